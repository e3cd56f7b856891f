# orchestrator/state_manager.py

# --- Importações ---
import threading  # Lock que protege o dicionário de expressões.
import uuid  # Para gerar IDs únicos para as expressões.
from typing import Any, Dict, List  # Para anotações de tipo.

from shared.models import Expression  # Modelo de dados de uma expressão.
from orchestrator.errors import NotFoundError  # Levantado para IDs desconhecidos.
from orchestrator.task_queue import TaskQueue  # Para liberar o prazo de uma tarefa concluída.
from config import logging  # Logger configurado em config.py.


# Registro central das expressões e ponto de chegada dos resultados dos workers.
# O lock do registro protege apenas o dicionário (inserção e busca); qualquer
# alteração numa expressão usa o lock da própria expressão, adquirido depois
# que o lock do registro já foi liberado.
class StateManager:
    def __init__(self, task_queue: TaskQueue):
        # Todas as expressões, indexadas pelo ID. Nunca são removidas.
        self.expressions: Dict[str, Expression] = {}
        self.task_queue = task_queue
        self.lock = threading.Lock()

    # Cria e registra uma nova expressão no estado "processing".
    def add_expression(self, text: str) -> Expression:
        # O ID é atribuído aqui, no momento da submissão.
        expression = Expression(id=str(uuid.uuid4()), expression=text)
        with self.lock:
            self.expressions[expression.id] = expression
        logging.info(f"Nova expressão registrada: {expression.id} ({text!r})")
        return expression

    def get_expression(self, expression_id: str) -> Expression:
        with self.lock:
            expression = self.expressions.get(expression_id)
        if expression is None:
            raise NotFoundError(f"Expressão não encontrada: {expression_id}")
        return expression

    def get_expression_snapshot(self, expression_id: str) -> Dict[str, Any]:
        return self.get_expression(expression_id).to_dict()

    # Fotografia de todas as expressões. O lock do registro só é mantido durante a cópia da lista.
    def list_expressions(self) -> List[Dict[str, Any]]:
        with self.lock:
            expressions = list(self.expressions.values())
        return [e.to_dict() for e in expressions]

    # Recebe o resultado de uma tarefa enviado por um worker.
    # Só altera a tarefa e acorda quem a espera; o estado final da expressão
    # é decidido pelo avaliador.
    def complete_task(self, task_id: str, expression_id: str, result: float):
        expression = self.get_expression(expression_id)
        # A busca da tarefa usa só o lock da expressão.
        task = expression.find_task(task_id)
        if task is None:
            raise NotFoundError(f"Tarefa {task_id} não encontrada na expressão {expression_id}")

        if not expression.complete_task(task, result):
            logging.warning(f"Resultado repetido para a tarefa {task_id} ignorado.")
            return
        # A tarefa não precisa mais voltar para a fila.
        self.task_queue.release(task_id)
        logging.info(f"Tarefa {task_id} concluída com resultado {result}")
