import threading
import time

import pytest

from orchestrator.evaluator import Evaluator
from orchestrator.state_manager import StateManager
from orchestrator.task_queue import TaskQueue
from worker.task_executor import execute_task

ZERO_TIMES = {'+': 0, '-': 0, '*': 0, '/': 0}


@pytest.fixture
def task_queue():
    return TaskQueue(capacity=10)


@pytest.fixture
def state_manager(task_queue):
    return StateManager(task_queue)


@pytest.fixture
def evaluator(task_queue):
    return Evaluator(task_queue, ZERO_TIMES)


@pytest.fixture
def next_task(task_queue):
    """Wait until a task shows up in the queue and pull it."""
    def _next(timeout=5.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            task = task_queue.get()
            if task is not None:
                return task
            time.sleep(0.01)
        raise AssertionError("no task reached the queue")
    return _next


@pytest.fixture
def auto_worker(task_queue, state_manager):
    """A background worker that computes every queued task right away."""
    stopped = threading.Event()

    def loop():
        while not stopped.is_set():
            task = task_queue.get()
            if task is None:
                stopped.wait(0.001)
                continue
            result = execute_task(task.payload(), sleep=lambda _: None)
            state_manager.complete_task(task.id, task.expression_id, result)

    t = threading.Thread(target=loop, daemon=True)
    t.start()
    yield
    stopped.set()
    t.join(timeout=2)


@pytest.fixture
def process(state_manager, evaluator):
    """Submit an expression and run its evaluation to the end."""
    def _process(text, timeout=5.0):
        expression = state_manager.add_expression(text)
        t = threading.Thread(target=evaluator.process, args=(expression,), daemon=True)
        t.start()
        t.join(timeout)
        assert not t.is_alive(), f"evaluation of {text!r} did not finish"
        return expression
    return _process
