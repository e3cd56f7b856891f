import socket

import pytest

from client.main import main
from orchestrator.main import Orchestrator


@pytest.fixture
def closed_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def test_reports_unreachable_orchestrator(capsys, closed_port):
    main(["--host", "127.0.0.1", "--port", str(closed_port), "list"])
    assert "Não foi possível conectar" in capsys.readouterr().out


def test_submit_and_status_against_a_running_orchestrator(capsys):
    orch = Orchestrator(host="127.0.0.1", client_port=0, worker_port=0)
    orch.start()
    try:
        port = str(orch.client_port)
        main(["--host", "127.0.0.1", "--port", port, "submit", "7"])
        out = capsys.readouterr().out
        assert "ID:" in out
        expression_id = out.strip().rsplit(" ", 1)[-1]

        main(["--host", "127.0.0.1", "--port", port, "status", expression_id])
        assert expression_id in capsys.readouterr().out

        main(["--host", "127.0.0.1", "--port", port, "status", "missing"])
        assert "Erro" in capsys.readouterr().out
    finally:
        orch.stop()
