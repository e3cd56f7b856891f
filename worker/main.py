# worker/main.py

# --- Importações de Bibliotecas Padrão ---
import argparse  # Para os argumentos de linha de comando.
import json  # Para tratar respostas inválidas do orquestrador.
import threading  # Para rodar várias threads de cálculo.

# --- Importações do Projeto ---
from config import ORCHESTRATOR_HOST, WORKER_PORT, COMPUTING_POWER, PING_MS, logging  # Endereço, tamanho do pool e logger.
from shared.protocol import request  # Uma requisição por conexão.
from worker.task_executor import execute_task  # Executa uma única operação.


# Agente de cálculo: um conjunto de threads que pedem tarefas ao orquestrador,
# calculam e devolvem o resultado.
class Agent:
    def __init__(self, computing_power=COMPUTING_POWER, ping_ms=PING_MS,
                 host=ORCHESTRATOR_HOST, port=WORKER_PORT):
        self.computing_power = computing_power
        self.ping_ms = ping_ms
        self.orchestrator_addr = (host, port)
        self.stopped = threading.Event()
        self.threads = []

    def start(self):
        logging.info(f"Iniciando {self.computing_power} workers para {self.orchestrator_addr[0]}:{self.orchestrator_addr[1]}")
        for i in range(self.computing_power):
            t = threading.Thread(target=self.work_loop, daemon=True, name=f"Agent-{i}")
            t.start()
            # Guarda a thread para que run() possa esperar por ela.
            self.threads.append(t)

    # Inicia os workers e bloqueia até que todos terminem.
    def run(self):
        self.start()
        for t in self.threads:
            t.join()

    def stop(self):
        self.stopped.set()

    # Laço principal de cada worker: pede, calcula, envia.
    def work_loop(self):
        while not self.stopped.is_set():
            task = self.get_task()
            if task is None:
                # Fila vazia ou orquestrador fora do ar: espera antes de tentar de novo.
                self.stopped.wait(self.ping_ms / 1000)
                continue

            try:
                result = execute_task(task)
            except (KeyError, TypeError, ValueError) as e:
                logging.error(f"Tarefa {task.get('id')} descartada: {e}")
                continue

            # Envia o resultado; uma falha aqui deixa a tarefa sem resposta.
            self.notify_task_completion(task, result)

    # Pede uma tarefa ao orquestrador. Retorna None se não houver nenhuma.
    def get_task(self):
        try:
            response = request(*self.orchestrator_addr, {"action": "get_task"})
        except (OSError, json.JSONDecodeError) as e:
            logging.error(f"Erro ao pedir tarefa: {e}")
            return None
        if not response or response.get("status") != "ok":
            return None
        return response.get("task")

    # Envia o resultado de uma tarefa concluída.
    def notify_task_completion(self, task, result):
        message = {
            "action": "submit_result",
            "id": task["id"],
            "expression_id": task["expression_id"],
            "result": result,
        }
        try:
            response = request(*self.orchestrator_addr, message)
        except (OSError, json.JSONDecodeError) as e:
            logging.error(f"Erro ao enviar o resultado da tarefa {task['id']}: {e}")
            return False
        if not response or response.get("status") != "ok":
            logging.error(f"Resultado da tarefa {task['id']} recusado: {response}")
            return False
        return True


# Ponto de entrada do script.
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Agente de cálculo para o orquestrador de expressões.")
    parser.add_argument("--host", default=ORCHESTRATOR_HOST, help="Endereço do orquestrador.")
    parser.add_argument("--port", type=int, default=WORKER_PORT, help="Porta de workers do orquestrador.")
    parser.add_argument("-n", "--computing-power", type=int, default=COMPUTING_POWER, help="Quantidade de threads de cálculo.")
    args = parser.parse_args()

    Agent(computing_power=args.computing_power, host=args.host, port=args.port).run()
