# orchestrator/main.py

# --- Importações de Bibliotecas Padrão ---
import json  # Para serializar e desserializar as mensagens.
import numbers  # Para validar os resultados numéricos enviados pelos workers.
import socket  # Para comunicação de rede (TCP) com clientes e workers.
import threading  # Para atender conexões e expressões em paralelo.
import time  # Para manter a thread principal viva.

# --- Importações do Projeto ---
# Importa as configurações de rede, fila e tempos de operação, além do logger.
from config import (
    ORCHESTRATOR_HOST, CLIENT_PORT, WORKER_PORT, OPERATION_TIMES,
    TASK_QUEUE_CAPACITY, TASK_LEASE_TIMEOUT, LEASE_CHECK_INTERVAL, logging,
)
from orchestrator.errors import NotFoundError, ValidationError  # Erros devolvidos como respostas de fronteira.
from orchestrator.evaluator import Evaluator  # Percorre a árvore e gera as tarefas.
from orchestrator.state_manager import StateManager  # Registro das expressões e recebimento de resultados.
from orchestrator.task_queue import TaskQueue  # Fila limitada compartilhada pelos workers.
from shared.models import Expression  # Modelo de dados de uma expressão.
from shared.protocol import recv_message, send_message  # Enquadramento JSON por linha.

# Tempo máximo que uma conexão pode ficar parada no meio de uma requisição.
CONNECTION_TIMEOUT = 10.0


# Resposta de sucesso, com campos extras.
def _ok(**fields):
    return {"status": "ok", **fields}


# Resposta de erro: "not_found" ou "invalid".
def _error(status, message):
    return {"status": status, "error": message}


# Extrai um campo de texto obrigatório. Com allow_empty, "" é aceito: um texto
# vazio é um payload válido cuja expressão falha depois, na análise.
def _require_str(request, key, allow_empty=False):
    value = request.get(key)
    if not isinstance(value, str) or (not value and not allow_empty):
        raise ValidationError(f"Campo '{key}' ausente ou inválido")
    return value


# O "cérebro" do sistema: recebe expressões dos clientes, gera tarefas e
# conversa com os workers que as calculam.
class Orchestrator:
    def __init__(self, host=ORCHESTRATOR_HOST, client_port=CLIENT_PORT, worker_port=WORKER_PORT,
                 queue_capacity=TASK_QUEUE_CAPACITY, lease_timeout=TASK_LEASE_TIMEOUT,
                 lease_check_interval=LEASE_CHECK_INTERVAL, operation_times=None):
        self.host = host
        self.client_port = client_port
        self.worker_port = worker_port
        self.lease_check_interval = lease_check_interval

        # Componentes principais gerenciados pelo Orquestrador.
        self.task_queue = TaskQueue(queue_capacity, lease_timeout=lease_timeout)
        self.state_manager = StateManager(self.task_queue)
        self.evaluator = Evaluator(self.task_queue, operation_times if operation_times is not None else OPERATION_TIMES)

        self.stopped = threading.Event()
        self.client_socket = None
        self.worker_socket = None

    # Abre os sockets e inicia as threads de serviço.
    # Os sockets são abertos aqui mesmo para que as portas reais (inclusive a porta 0) já estejam disponíveis.
    def start(self):
        self.client_socket = self._bind(self.client_port)
        self.worker_socket = self._bind(self.worker_port)
        self.client_port = self.client_socket.getsockname()[1]
        self.worker_port = self.worker_socket.getsockname()[1]

        threading.Thread(target=self.listen, args=(self.client_socket, self.handle_client),
                         daemon=True, name="ClientListener").start()
        threading.Thread(target=self.listen, args=(self.worker_socket, self.handle_worker),
                         daemon=True, name="WorkerListener").start()
        if self.task_queue.lease_timeout > 0:
            threading.Thread(target=self.monitor_leases, daemon=True, name="LeaseMonitor").start()

        logging.info(f"Ouvindo clientes em {self.host}:{self.client_port} e workers em {self.host}:{self.worker_port}")

    # Encerra as threads de serviço fechando os sockets.
    def stop(self):
        self.stopped.set()
        for s in (self.client_socket, self.worker_socket):
            if s is None:
                continue
            # shutdown() acorda a thread bloqueada em accept().
            try:
                s.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            s.close()
        logging.info("Orquestrador encerrado.")

    # Cria um socket TCP em modo de escuta na porta pedida.
    def _bind(self, port):
        s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        s.bind((self.host, port))
        s.listen()
        return s

    # Aceita conexões e atende cada uma numa thread própria.
    def listen(self, server_socket, handler):
        while not self.stopped.is_set():
            try:
                conn, addr = server_socket.accept()
            except OSError:
                # Socket fechado por stop().
                break
            threading.Thread(target=self.serve, args=(conn, addr, handler), daemon=True,
                             name=f"Conn-{addr[0]}:{addr[1]}").start()

    # Lê uma requisição, despacha para o handler e devolve a resposta.
    def serve(self, conn, addr, handler):
        try:
            with conn:
                conn.settimeout(CONNECTION_TIMEOUT)
                try:
                    request = recv_message(conn)
                except (json.JSONDecodeError, UnicodeDecodeError) as e:
                    send_message(conn, _error("invalid", f"JSON inválido: {e}"))
                    return
                # Conexão fechada sem enviar nada.
                if request is None:
                    return
                # Uma requisição, uma resposta, e a conexão é fechada.
                send_message(conn, handler(request))
        except (ConnectionResetError, BrokenPipeError, socket.timeout) as e:
            logging.error(f"Erro ao lidar com a conexão {addr}: {e}")

    # --- Ações dos clientes ---
    def handle_client(self, request):
        action = request.get("action")
        try:
            # Submete uma nova expressão; o ID volta na hora.
            if action == "calculate":
                expression = self.submit(_require_str(request, "expression", allow_empty=True))
                return _ok(id=expression.id)
            # Lista todas as expressões com suas tarefas.
            if action == "list_expressions":
                return _ok(expressions=self.state_manager.list_expressions())
            # Busca uma expressão pelo ID.
            if action == "get_expression":
                expression_id = _require_str(request, "id")
                return _ok(expression=self.state_manager.get_expression_snapshot(expression_id))
            raise ValidationError(f"Ação desconhecida: {action!r}")
        except NotFoundError as e:
            return _error("not_found", str(e))
        except ValidationError as e:
            logging.warning(f"Requisição inválida de cliente: {e}")
            return _error("invalid", str(e))

    # Registra a expressão e inicia sua avaliação numa thread dedicada.
    def submit(self, text) -> Expression:
        expression = self.state_manager.add_expression(text)
        threading.Thread(target=self.evaluator.process, args=(expression,), daemon=True,
                         name=f"Expr-{expression.id[:8]}").start()
        return expression

    # --- Ações dos workers ---
    def handle_worker(self, request):
        action = request.get("action")
        try:
            # O worker pede uma tarefa; a fila vazia não é um erro.
            if action == "get_task":
                task = self.task_queue.get()
                if task is None:
                    return {"status": "empty"}
                logging.info(f"Tarefa {task.id} entregue a um worker.")
                return _ok(task=task.payload())
            # O worker devolve o resultado de uma tarefa.
            if action == "submit_result":
                task_id = _require_str(request, "id")
                expression_id = _require_str(request, "expression_id")
                result = request.get("result")
                # bool é subclasse de int no Python, mas não é um resultado válido.
                if isinstance(result, bool) or not isinstance(result, numbers.Real):
                    raise ValidationError("Campo 'result' ausente ou não numérico")
                try:
                    result = float(result)
                except OverflowError:
                    # Inteiros JSON grandes demais para um float (ex.: 10**400).
                    raise ValidationError("Campo 'result' fora do intervalo de um float")
                self.state_manager.complete_task(task_id, expression_id, result)
                return _ok()
            raise ValidationError(f"Ação desconhecida: {action!r}")
        except NotFoundError as e:
            logging.warning(f"Resultado recusado: {e}")
            return _error("not_found", str(e))
        except ValidationError as e:
            logging.warning(f"Requisição inválida de worker: {e}")
            return _error("invalid", str(e))

    # Thread que devolve à fila as tarefas cujo prazo venceu.
    def monitor_leases(self):
        while not self.stopped.wait(self.lease_check_interval):
            self.task_queue.requeue_expired()


# Ponto de entrada do script.
if __name__ == "__main__":
    orch = Orchestrator()
    orch.start()
    # Mantém a thread principal viva enquanto as threads daemon trabalham.
    while True:
        time.sleep(60)
