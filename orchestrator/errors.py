# orchestrator/errors.py

# Hierarquia de erros do orquestrador. Todos derivam de CalcError para que o
# pipeline de uma expressão possa tratá-los num único ponto.


class CalcError(Exception):
    pass


# --- Erros de análise (tokenização, pós-fixa, árvore) ---
class ParseError(CalcError):
    pass


class MismatchedParenthesesError(ParseError):
    def __init__(self):
        super().__init__("mismatched parentheses")


class InvalidTokenError(ParseError):
    def __init__(self, token):
        self.token = token
        super().__init__(f"invalid token: {token!r}")


class InvalidExpressionError(ParseError):
    def __init__(self, message="invalid expression"):
        super().__init__(message)


# --- Erros de avaliação (propagados pelos filhos de um nó) ---
class EvaluationError(CalcError):
    pass


# --- Erros de fronteira (clientes e workers) ---
class NotFoundError(CalcError):
    pass


class ValidationError(CalcError):
    pass
