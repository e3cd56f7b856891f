# shared/models.py

# --- Importações ---
# threading: Lock por expressão e Event de uso único por tarefa.
import threading
# dataclasses: classes que armazenam dados de forma concisa; field para valores padrão mutáveis.
from dataclasses import dataclass, field
# typing: para anotações de tipo.
from typing import Any, Dict, List, Optional

# Estados possíveis de uma expressão.
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_ERROR = "error"
TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_ERROR)

# Estados possíveis de uma tarefa.
TASK_QUEUED = "queued"
TASK_COMPLETED = "completed"


@dataclass
class Task:
    """
    Representa uma única operação binária extraída da árvore de uma expressão.
    É a unidade de trabalho entregue aos workers: dois operandos já conhecidos
    e um operador. O resultado é gravado uma única vez, quando o worker responde.
    """

    # Identificador único da tarefa (UUID).
    id: str

    # Identificador da expressão dona da tarefa.
    expression_id: str

    # Um de '+', '-', '*', '/'.
    operation: str

    # Os dois operandos, já conhecidos no momento da criação.
    arg1: float
    arg2: float

    # "queued" até o worker responder, depois "completed".
    status: str = TASK_QUEUED

    # Válido somente quando status == "completed".
    result: Optional[float] = None

    # Tempo simulado (ms) que o worker deve esperar. O orquestrador não o interpreta.
    operation_time: int = 0

    # Sinal de uso único disparado quando o resultado chega.
    done: threading.Event = field(default_factory=threading.Event, repr=False, compare=False)

    # Dados enviados ao worker no momento em que ele pede uma tarefa.
    def payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "expression_id": self.expression_id,
            "operation": self.operation,
            "arg1": self.arg1,
            "arg2": self.arg2,
            "operation_time": self.operation_time,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.payload()
        data["status"] = self.status
        data["result"] = self.result
        return data


@dataclass
class Expression:
    """
    Uma expressão submetida por um cliente e o estado da sua avaliação.
    Todas as alterações passam pelo lock próprio da expressão.
    """

    # ID único atribuído na submissão.
    id: str
    # Texto original enviado pelo cliente.
    expression: str
    # "processing" até chegar a "completed" ou "error".
    status: str = STATUS_PROCESSING
    # Válido somente quando status == "completed".
    result: Optional[float] = None

    # Em ordem de criação (pós-ordem da árvore): a tarefa da raiz é sempre a última.
    tasks: List[Task] = field(default_factory=list)

    # Protege status, resultado e lista de tarefas.
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def add_task(self, task: Task):
        with self.lock:
            self.tasks.append(task)

    def find_task(self, task_id: str) -> Task | None:
        with self.lock:
            for task in self.tasks:
                if task.id == task_id:
                    return task
            return None

    # Grava o resultado de uma tarefa. Retorna False se ela já estava concluída.
    def complete_task(self, task: Task, result: float) -> bool:
        with self.lock:
            if task.status != TASK_QUEUED:
                return False
            task.result = result
            task.status = TASK_COMPLETED
        # Acorda o avaliador que espera por esta tarefa.
        task.done.set()
        return True

    # Visão agregada: se todas as tarefas terminaram, o resultado da última (a raiz).
    def aggregate_result(self) -> Optional[float]:
        with self.lock:
            if not self.tasks or any(t.status != TASK_COMPLETED for t in self.tasks):
                return None
            return self.tasks[-1].result

    # Única transição permitida: processing -> completed/error. Estados finais não mudam mais.
    def finish(self, status: str, result: Optional[float] = None) -> bool:
        if status not in TERMINAL_STATUSES:
            raise ValueError(f"Estado final inválido: {status}")
        with self.lock:
            if self.status in TERMINAL_STATUSES:
                return False
            self.status = status
            self.result = result if status == STATUS_COMPLETED else None
            return True

    # Cópia do estado atual para enviar ao cliente.
    def to_dict(self) -> Dict[str, Any]:
        with self.lock:
            return {
                "id": self.id,
                "expression": self.expression,
                "status": self.status,
                "result": self.result,
                "tasks": [t.to_dict() for t in self.tasks],
            }
