# shared/protocol.py

# Protocolo de mensagens usado entre clientes, workers e orquestrador:
# uma mensagem JSON por linha, uma requisição por conexão TCP.

import json  # Para serializar e desserializar as mensagens.
import socket  # Para as conexões TCP.
from typing import Any, Dict  # Para anotações de tipo.

ENCODING = 'utf-8'
BUFFER_SIZE = 4096


# Serializa e envia um dicionário, terminado por '\n'.
def send_message(sock: socket.socket, message: Dict[str, Any]):
    sock.sendall((json.dumps(message) + "\n").encode(ENCODING))


# Lê até o fim da linha (ou até o outro lado fechar) e desserializa.
# Levanta json.JSONDecodeError se o conteúdo não for JSON válido.
def recv_message(sock: socket.socket) -> Dict[str, Any] | None:
    buffer = b""
    while b"\n" not in buffer:
        chunk = sock.recv(BUFFER_SIZE)
        if not chunk:
            break
        buffer += chunk
    # Descarta o que vier depois da primeira linha.
    line = buffer.split(b"\n", 1)[0].strip()
    if not line:
        return None
    message = json.loads(line.decode(ENCODING))
    if not isinstance(message, dict):
        raise json.JSONDecodeError("A mensagem deve ser um objeto JSON", line.decode(ENCODING), 0)
    return message


# Abre uma conexão, envia a requisição e devolve a resposta do servidor.
def request(host: str, port: int, message: Dict[str, Any], timeout: float = 10.0) -> Dict[str, Any] | None:
    with socket.create_connection((host, port), timeout=timeout) as s:
        send_message(s, message)
        return recv_message(s)
