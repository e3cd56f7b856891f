# client/main.py

# Cliente de linha de comando para o orquestrador de expressões.
# Exemplos:
#   python -m client.main submit "2*3+4"
#   python -m client.main list
#   python -m client.main status <id>

import argparse  # Para a interface de linha de comando.
import json  # Para tratar respostas inválidas do servidor.

from config import ORCHESTRATOR_HOST, CLIENT_PORT  # Endereço padrão do orquestrador.
from shared.protocol import request  # Uma requisição por conexão.


# Envia uma requisição ao orquestrador e trata falhas de conexão.
def send_request(message, host=ORCHESTRATOR_HOST, port=CLIENT_PORT):
    try:
        response = request(host, port, message)
    except (ConnectionRefusedError, OSError):
        return {"error": "Não foi possível conectar ao orquestrador."}
    except json.JSONDecodeError:
        return {"error": "Resposta inválida recebida do servidor."}
    if response is None:
        return {"error": "O orquestrador fechou a conexão sem responder."}
    return response


def print_expression(expression):
    print("\n--- Expressão ---")
    for key in ("id", "expression", "status", "result"):
        print(f"{key.capitalize():<12}: {expression.get(key)}")
    tasks = expression.get("tasks", [])
    if tasks:
        print("Tarefas:")
        for task in tasks:
            print(f"  {task['arg1']} {task['operation']} {task['arg2']} -> {task['result']} ({task['status']})")
    print("-----------------\n")


def handle_submit(args):
    response = send_request({"action": "calculate", "expression": args.expression}, args.host, args.port)
    if "id" in response:
        print(f"Expressão submetida com sucesso! ID: {response['id']}")
    else:
        print(f"Erro ao submeter expressão: {response.get('error', 'desconhecido')}")


def handle_list(args):
    response = send_request({"action": "list_expressions"}, args.host, args.port)
    if "error" in response:
        print(f"Erro: {response['error']}")
        return
    expressions = response.get("expressions", [])
    if not expressions:
        print("Nenhuma expressão registrada.")
    for expression in expressions:
        print(f"{expression['id']}  {expression['status']:<10}  {expression['result']!s:<12}  {expression['expression']}")


def handle_status(args):
    response = send_request({"action": "get_expression", "id": args.expression_id}, args.host, args.port)
    if "error" in response:
        print(f"Erro: {response['error']}")
    else:
        print_expression(response["expression"])


def main(argv=None):
    parser = argparse.ArgumentParser(description="Cliente para o orquestrador de expressões distribuídas.")
    parser.add_argument("--host", default=ORCHESTRATOR_HOST, help="Endereço do orquestrador.")
    parser.add_argument("--port", type=int, default=CLIENT_PORT, help="Porta de clientes do orquestrador.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parser_submit = subparsers.add_parser("submit", help="Submete uma expressão para cálculo.")
    parser_submit.add_argument("expression", type=str, help="Expressão aritmética, ex.: '2*(3+4)'.")
    parser_submit.set_defaults(func=handle_submit)

    parser_list = subparsers.add_parser("list", help="Lista todas as expressões.")
    parser_list.set_defaults(func=handle_list)

    parser_status = subparsers.add_parser("status", help="Mostra uma expressão e suas tarefas.")
    parser_status.add_argument("expression_id", type=str, help="O ID da expressão.")
    parser_status.set_defaults(func=handle_status)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
