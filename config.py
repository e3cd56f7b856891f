# config.py

import logging  # Configuração global de logs.
import os  # Para ler as variáveis de ambiente.

# --- Configurações de Logging ---
LOGGING_FORMAT = '%(asctime)s - %(levelname)s - %(threadName)s - %(message)s'
logging.basicConfig(level=logging.INFO, format=LOGGING_FORMAT)


# Lê um valor numérico do ambiente. Se a variável não existir ou não puder
# ser convertida, o valor padrão é usado.
def get_env_number(name, default, cast=int):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logging.warning(f"Valor inválido para {name}: {raw!r}. Usando o padrão {default}.")
        return default


# --- Configurações de Rede ---
ORCHESTRATOR_HOST = os.environ.get('ORCHESTRATOR_HOST', 'localhost')
# Porta para comunicação com Clientes (TCP)
CLIENT_PORT = get_env_number('CLIENT_PORT', 50051)
# Porta para comunicação com Workers (pedido de tarefas e envio de resultados, TCP)
WORKER_PORT = get_env_number('WORKER_PORT', 50052)

# --- Tempo simulado de cada operação (ms) ---
# O orquestrador só repassa esse valor; quem dorme é o worker.
TIME_ADDITION_MS = get_env_number('TIME_ADDITION_MS', 1000)
TIME_SUBTRACTION_MS = get_env_number('TIME_SUBTRACTION_MS', 1000)
TIME_MULTIPLICATION_MS = get_env_number('TIME_MULTIPLICATION_MS', 2000)
TIME_DIVISION_MS = get_env_number('TIME_DIVISION_MS', 3000)

OPERATION_TIMES = {
    '+': TIME_ADDITION_MS,
    '-': TIME_SUBTRACTION_MS,
    '*': TIME_MULTIPLICATION_MS,
    '/': TIME_DIVISION_MS,
}

# --- Configurações da Fila de Tarefas ---
# Capacidade máxima da fila. Quando cheia, quem enfileira fica bloqueado.
TASK_QUEUE_CAPACITY = get_env_number('TASK_QUEUE_CAPACITY', 100)
# Prazo em segundos para um worker devolver o resultado de uma tarefa retirada.
# 0 desativa o mecanismo: uma tarefa perdida nunca volta para a fila.
TASK_LEASE_TIMEOUT = get_env_number('TASK_LEASE_TIMEOUT', 0.0, cast=float)
# Intervalo em segundos entre as verificações de prazos vencidos.
LEASE_CHECK_INTERVAL = get_env_number('LEASE_CHECK_INTERVAL', 1.0, cast=float)

# --- Configurações dos Workers ---
# Quantidade de threads de cálculo em cada agente.
COMPUTING_POWER = get_env_number('COMPUTING_POWER', 5)
# Espera em ms após um pedido sem tarefa (ou com falha) antes de tentar de novo.
PING_MS = get_env_number('PING_MS', 1000)
