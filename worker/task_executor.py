# worker/task_executor.py

# Executa uma única operação aritmética recebida do orquestrador.

import math  # Para inf, nan e copysign na divisão por zero.
import operator  # Funções prontas para +, - e *.
import time  # Para simular o tempo de execução da operação.

from config import logging  # Logger configurado em config.py.


# Divisão com a semântica de ponto flutuante IEEE: x/0 dá ±inf e 0/0 dá nan,
# sem levantar exceção.
def divide(a, b):
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


OPERATIONS = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': divide,
}


# Espera o tempo simulado da operação e devolve o resultado.
# Levanta ValueError para um operador desconhecido.
def execute_task(task_data, sleep=time.sleep):
    operation = OPERATIONS.get(task_data['operation'])
    if operation is None:
        raise ValueError(f"Operador desconhecido: {task_data['operation']!r}")

    # O tempo vem em milissegundos; sleep recebe segundos.
    sleep(task_data.get('operation_time', 0) / 1000)

    result = operation(float(task_data['arg1']), float(task_data['arg2']))
    logging.info(f"Tarefa {task_data['id']}: {task_data['arg1']} {task_data['operation']} {task_data['arg2']} = {result}")
    return result
