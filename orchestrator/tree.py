# orchestrator/tree.py

# --- Importações ---
from __future__ import annotations  # Permite anotar 'Node' dentro da própria classe.

from dataclasses import dataclass  # Para declarar o nó de forma concisa.
from typing import List, Optional  # Para anotações de tipo.

from orchestrator.calc import is_number, is_operator  # Classificação dos tokens.
from orchestrator.errors import InvalidExpressionError, InvalidTokenError  # Erros de montagem.


# eq e repr gerados pelo dataclass percorreriam a árvore recursivamente;
# nós são comparados por identidade.
@dataclass(eq=False, repr=False)
class Node:
    """
    Nó da árvore de uma expressão. Uma folha guarda apenas 'value';
    um nó interno guarda o operador e seus dois filhos.
    A árvore é montada a cada avaliação e nunca é compartilhada entre expressões.
    """

    # Valor numérico de uma folha.
    value: float = 0.0
    # Operador de um nó interno; None numa folha.
    operation: Optional[str] = None
    left: Optional[Node] = None
    right: Optional[Node] = None

    @property
    def is_leaf(self) -> bool:
        return self.operation is None

    # Quantidade de nós internos, isto é, de tarefas que a avaliação vai gerar.
    # Iterativo, para não depender da profundidade da árvore.
    def count_operations(self) -> int:
        count = 0
        pending = [self]
        while pending:
            node = pending.pop()
            if node.is_leaf:
                continue
            count += 1
            pending.append(node.left)
            pending.append(node.right)
        return count


# Monta a árvore a partir da notação pós-fixa usando uma pilha de nós.
def build_expression_tree(postfix: List[str]) -> Node:
    stack: List[Node] = []

    for token in postfix:
        if is_number(token):
            # Número: vira uma folha.
            stack.append(Node(value=float(token)))
        elif is_operator(token):
            # Operador: precisa de dois operandos já montados.
            if len(stack) < 2:
                raise InvalidExpressionError()
            # O último empilhado é o operando da direita.
            right = stack.pop()
            left = stack.pop()
            stack.append(Node(operation=token, left=left, right=right))
        else:
            # Qualquer outra coisa (ex.: "1.2.3", "^") é rejeitada aqui.
            raise InvalidTokenError(token)

    # Sobrou exatamente uma raiz? Senão a expressão está incompleta ou tem operandos soltos.
    if len(stack) != 1:
        raise InvalidExpressionError()

    return stack[0]
