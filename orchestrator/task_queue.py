# orchestrator/task_queue.py

# --- Importações ---
import threading  # Lock e Condition para o acesso concorrente à fila.
import time  # Relógio monotônico para os prazos das tarefas entregues.
from collections import deque  # Fila com inserção eficiente nas duas pontas.
from typing import Deque, Dict, List, Tuple  # Para anotações de tipo.

from shared.models import Task, TASK_QUEUED  # Modelo da tarefa e seu estado inicial.
from config import logging  # Logger configurado em config.py.


# Fila FIFO limitada, compartilhada por todas as expressões e consumida pelos workers.
# Cada tarefa é entregue a um único worker. Com lease_timeout > 0, uma tarefa
# retirada e não concluída dentro do prazo volta para o início da fila.
class TaskQueue:
    def __init__(self, capacity: int, lease_timeout: float = 0.0):
        if capacity < 1:
            raise ValueError("A capacidade da fila deve ser pelo menos 1")
        self.capacity = capacity
        self.lease_timeout = lease_timeout
        self.pending: Deque[Task] = deque()
        # Tarefas entregues a workers e ainda sem resultado: { task_id: (task, prazo) }
        self.leases: Dict[str, Tuple[Task, float]] = {}
        self.lock = threading.Lock()
        self.not_full = threading.Condition(self.lock)

    # Enfileira uma tarefa. Bloqueia enquanto a fila estiver cheia.
    # Retorna False somente se 'timeout' expirar antes de surgir espaço.
    def put(self, task: Task, timeout: float | None = None) -> bool:
        with self.not_full:
            if not self.not_full.wait_for(lambda: len(self.pending) < self.capacity, timeout=timeout):
                return False
            # Entra no fim da fila (FIFO).
            self.pending.append(task)
        logging.info(f"Tarefa {task.id} enfileirada: {task.arg1} {task.operation} {task.arg2}")
        return True

    # Retira a próxima tarefa, ou None se a fila estiver vazia.
    def get(self) -> Task | None:
        with self.not_full:
            if not self.pending:
                return None
            # Remove a primeira tarefa: cada tarefa sai da fila uma única vez.
            task = self.pending.popleft()
            # Com leases ativos, registra o prazo para a resposta do worker.
            if self.lease_timeout > 0:
                self.leases[task.id] = (task, time.monotonic() + self.lease_timeout)
            # Acorda um produtor bloqueado pela fila cheia.
            self.not_full.notify()
            return task

    # Chamado quando o resultado de uma tarefa chega.
    def release(self, task_id: str):
        with self.lock:
            self.leases.pop(task_id, None)

    # Devolve ao início da fila as tarefas com prazo vencido.
    def requeue_expired(self, now: float | None = None) -> List[Task]:
        now = time.monotonic() if now is None else now
        requeued = []
        with self.lock:
            expired = [task_id for task_id, (_, deadline) in self.leases.items() if deadline <= now]
            for task_id in expired:
                task, _ = self.leases.pop(task_id)
                # O resultado chegou entre o vencimento e esta verificação.
                if task.status != TASK_QUEUED:
                    continue
                # Vai para o início, fora do limite de capacidade, para ser reatribuída logo.
                self.pending.appendleft(task)
                requeued.append(task)
        for task in requeued:
            logging.warning(f"Prazo da tarefa {task.id} venceu. Devolvida à fila.")
        return requeued

    def __len__(self):
        with self.lock:
            return len(self.pending)
