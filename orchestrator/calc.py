# orchestrator/calc.py

# Tokenização e conversão infixa -> pós-fixa (shunting-yard).
# Nenhuma validação numérica acontece aqui: "1.2.3" vira um único token e só
# é rejeitado mais tarde, na montagem da árvore.

from typing import List  # Para anotações de tipo.

from orchestrator.errors import MismatchedParenthesesError  # Único erro levantado nesta etapa.

OPERATORS = ('+', '-', '*', '/')

# Todos os operadores são associativos à esquerda.
PRECEDENCE = {
    '+': 1,
    '-': 1,
    '*': 2,
    '/': 2,
}


def is_number(token: str) -> bool:
    # Um token é número se o Python consegue convertê-lo para float.
    try:
        float(token)
        return True
    except ValueError:
        return False


def is_operator(token: str) -> bool:
    return token in OPERATORS


# Converte o texto em tokens: números (dígitos e '.') e símbolos de um caractere.
def tokenize(expression: str) -> List[str]:
    tokens = []
    number = []

    # Todo espaço em branco é removido antes da leitura.
    for ch in "".join(expression.split()):
        if ch.isdigit() or ch == '.':
            number.append(ch)
            continue
        # Qualquer outro caractere fecha o número pendente e vira um token sozinho.
        if number:
            tokens.append("".join(number))
            number = []
        tokens.append(ch)

    if number:
        tokens.append("".join(number))

    return tokens


def infix_to_postfix(tokens: List[str]) -> List[str]:
    output = []
    stack = []

    for token in tokens:
        # Números vão direto para a saída.
        if is_number(token):
            output.append(token)
        elif token == '(':
            stack.append(token)
        elif token == ')':
            while stack and stack[-1] != '(':
                output.append(stack.pop())
            if not stack:
                raise MismatchedParenthesesError()
            # Descarta o '(' correspondente.
            stack.pop()
        else:
            # Precedência igual também desempilha: garante avaliação da esquerda para a direita.
            # Tokens desconhecidos têm precedência 0 e seguem para a montagem da árvore,
            # que os rejeita.
            while stack and PRECEDENCE.get(token, 0) <= PRECEDENCE.get(stack[-1], 0):
                output.append(stack.pop())
            stack.append(token)

    # No fim, esvazia a pilha de operadores na saída.
    while stack:
        top = stack.pop()
        if top == '(':
            raise MismatchedParenthesesError()
        output.append(top)

    return output
