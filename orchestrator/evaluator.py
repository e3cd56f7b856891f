# orchestrator/evaluator.py

# --- Importações de Bibliotecas Padrão ---
import math  # Para reconhecer resultados NaN (ex.: 0/0).
import numbers  # Para validar que o resultado de um worker é numérico.
import uuid  # Para gerar IDs únicos para as tarefas.
from typing import Dict  # Para anotações de tipo.

# --- Importações do Projeto ---
from shared.models import Expression, Task, STATUS_COMPLETED, STATUS_ERROR  # Modelos de dados e estados.
from orchestrator.calc import infix_to_postfix, tokenize  # Tokenização e shunting-yard.
from orchestrator.errors import CalcError, EvaluationError, InvalidExpressionError  # Hierarquia de erros.
from orchestrator.task_queue import TaskQueue  # Fila compartilhada com os workers.
from orchestrator.tree import Node, build_expression_tree  # Árvore da expressão.
from config import logging  # Logger configurado em config.py.


class Evaluator:
    """
    Transforma cada nó interno da árvore numa tarefa para os workers e espera o resultado.

    A árvore é percorrida em pós-ordem, um nó de cada vez: o filho da esquerda,
    depois o da direita, e só então a tarefa do próprio nó é criada, com os dois
    operandos já conhecidos. Por isso a tarefa da raiz é sempre a última da lista
    da expressão. Expressões diferentes são avaliadas em threads diferentes.

    Não há prazo de espera: se um worker retirar uma tarefa e nunca responder
    (e a fila não tiver leases ativos), a avaliação fica bloqueada para sempre.
    """

    def __init__(self, task_queue: TaskQueue, operation_times: Dict[str, int]):
        self.task_queue = task_queue
        self.operation_times = operation_times

    def evaluate(self, root: Node, expression: Expression) -> float:
        # Percurso em pós-ordem com pilha explícita, sem recursão: uma cadeia
        # longa de operadores não esgota a pilha de chamadas do Python.
        # Cada entrada é (nó, filhos_já_empilhados).
        pending = [(root, False)]
        # Valores já resolvidos, na ordem em que os nós terminaram.
        values = []

        while pending:
            node, expanded = pending.pop()

            # Folha: o valor é conhecido na hora, sem tarefa.
            if node.is_leaf:
                values.append(node.value)
                continue

            # Primeira visita: agenda o próprio nó para depois dos filhos.
            # A esquerda é empilhada por último para ser resolvida primeiro.
            if not expanded:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
                continue

            # Segunda visita: os dois operandos já estão no topo de 'values'.
            # Um erro num filho interrompe o pai. Tarefas já enfileiradas pelo
            # filho da esquerda não são retiradas da fila.
            right = values.pop()
            left = values.pop()
            values.append(self.dispatch(node.operation, left, right, expression))

        return values[0]

    # Cria a tarefa de um nó interno, enfileira e espera o resultado do worker.
    def dispatch(self, operation: str, left: float, right: float, expression: Expression) -> float:
        task = Task(
            id=str(uuid.uuid4()),  # ID único da tarefa.
            expression_id=expression.id,
            operation=operation,
            arg1=left,
            arg2=right,
            # Dica de duração para o worker, vinda da configuração.
            operation_time=self.operation_times.get(operation, 0),
        )
        # A lista da expressão guarda as tarefas em ordem de criação.
        expression.add_task(task)
        # Bloqueia enquanto a fila estiver cheia.
        self.task_queue.put(task)

        # Disparado uma única vez, pelo recebimento do resultado.
        task.done.wait()

        # Um resultado que não é número aborta a avaliação inteira.
        if isinstance(task.result, bool) or not isinstance(task.result, numbers.Real):
            raise EvaluationError(f"Resultado inválido para a tarefa {task.id}: {task.result!r}")
        return float(task.result)

    # Pipeline completo de uma expressão. Roda na thread dedicada à expressão
    # e é o único ponto que decide o estado final dela.
    def process(self, expression: Expression):
        try:
            # Texto -> tokens -> notação pós-fixa -> árvore.
            tokens = tokenize(expression.expression)
            postfix = infix_to_postfix(tokens)
            # Texto vazio (ou só espaços e parênteses) não produz nenhum token útil.
            if not postfix:
                raise InvalidExpressionError("empty expression")
            root = build_expression_tree(postfix)
            logging.info(f"Expressão {expression.id} gera {root.count_operations()} tarefa(s).")
            result = self.evaluate(root, expression)
        except CalcError as e:
            # Qualquer falha descarta o resultado parcial e encerra a expressão com erro.
            expression.finish(STATUS_ERROR)
            logging.warning(f"Erro ao processar a expressão {expression.id} ({expression.expression!r}): {e}")
            return

        # A tarefa da raiz é a última criada; os dois valores devem coincidir.
        if not root.is_leaf and expression.aggregate_result() != result and not math.isnan(result):
            logging.warning(f"Resultado da última tarefa da expressão {expression.id} difere da raiz.")

        # Única escrita do estado final "completed".
        expression.finish(STATUS_COMPLETED, result)
        logging.info(f"Expressão concluída: {expression.expression!r}. Resultado: {result}")
