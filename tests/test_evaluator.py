import math
import threading
import time

import pytest

from orchestrator.evaluator import Evaluator
from orchestrator.task_queue import TaskQueue
from shared.models import STATUS_COMPLETED, STATUS_ERROR, STATUS_PROCESSING, TASK_COMPLETED


def test_scenario_two_times_three_plus_four(state_manager, evaluator, next_task):
    expression = state_manager.add_expression("2*3+4")
    t = threading.Thread(target=evaluator.process, args=(expression,), daemon=True)
    t.start()

    first = next_task()
    assert (first.operation, first.arg1, first.arg2) == ("*", 2.0, 3.0)
    assert first.expression_id == expression.id
    # The parent task only exists once its operands are known.
    assert len(expression.tasks) == 1
    state_manager.complete_task(first.id, expression.id, 6.0)

    second = next_task()
    assert (second.operation, second.arg1, second.arg2) == ("+", 6.0, 4.0)
    assert expression.status == STATUS_PROCESSING
    state_manager.complete_task(second.id, expression.id, 10.0)

    t.join(5)
    assert not t.is_alive()
    assert expression.status == STATUS_COMPLETED
    assert expression.result == 10.0
    assert [task.id for task in expression.tasks] == [first.id, second.id]


@pytest.mark.parametrize("text, value", [
    ("2*3+4", 10.0),
    ("(1+2)*(3-4)/5", -0.6),
    ("8-3-2", 3.0),
    ("8/4*2", 4.0),
    ("1.5+2.25", 3.75),
    ("((7))", 7.0),
])
def test_final_result_matches_arithmetic(auto_worker, process, text, value):
    expression = process(text)
    assert expression.status == STATUS_COMPLETED
    assert expression.result == pytest.approx(value)


def test_tasks_follow_post_order(auto_worker, process):
    expression = process("(1+2)*(3-4)/5")
    ops = [(t.operation, t.arg1, t.arg2) for t in expression.tasks]
    assert ops == [
        ("+", 1.0, 2.0),
        ("-", 3.0, 4.0),
        ("*", 3.0, -1.0),
        ("/", -3.0, 5.0),
    ]
    assert all(t.status == TASK_COMPLETED for t in expression.tasks)
    assert expression.tasks[-1].result == expression.result


def test_number_alone_creates_no_task(auto_worker, process):
    expression = process("42")
    assert expression.status == STATUS_COMPLETED
    assert expression.result == 42.0
    assert expression.tasks == []


def test_division_by_zero_is_not_an_error(auto_worker, process):
    expression = process("1/0+1")
    assert expression.status == STATUS_COMPLETED
    assert math.isinf(expression.result) and expression.result > 0

    expression = process("0/0")
    assert expression.status == STATUS_COMPLETED
    assert math.isnan(expression.result)


@pytest.mark.parametrize("text", ["(1+2*3", "1+2)*3", "1.2.3+4", "", "1+", "+", "2^3", "()"])
def test_parse_failures_mark_error(process, text):
    expression = process(text)
    assert expression.status == STATUS_ERROR
    assert expression.result is None
    assert expression.tasks == []


def test_invalid_task_result_aborts_evaluation(state_manager, evaluator, next_task):
    expression = state_manager.add_expression("2*3+4")
    t = threading.Thread(target=evaluator.process, args=(expression,), daemon=True)
    t.start()

    first = next_task()
    expression.complete_task(first, "six")

    t.join(5)
    assert expression.status == STATUS_ERROR
    assert expression.result is None
    # The parent node never got a task.
    assert len(expression.tasks) == 1


def test_completed_expression_ignores_later_writes(auto_worker, process, state_manager):
    expression = process("2*3")
    task = expression.tasks[0]
    state_manager.complete_task(task.id, expression.id, 123.0)
    assert not expression.finish(STATUS_ERROR)
    assert expression.status == STATUS_COMPLETED
    assert expression.result == 6.0
    assert task.result == 6.0


def test_duration_hint_comes_from_operation_times(state_manager):
    queue = TaskQueue(capacity=4)
    evaluator = Evaluator(queue, {'+': 10, '-': 20, '*': 30, '/': 40})
    expression = state_manager.add_expression("6/3")
    threading.Thread(target=evaluator.process, args=(expression,), daemon=True).start()

    for _ in range(500):
        task = queue.get()
        if task is not None:
            break
        time.sleep(0.01)
    assert task.operation_time == 40
    expression.complete_task(task, 2.0)


def test_expressions_run_concurrently(auto_worker, state_manager, evaluator):
    expressions = [state_manager.add_expression(f"{n}*2+1") for n in range(5)]
    threads = [threading.Thread(target=evaluator.process, args=(e,), daemon=True) for e in expressions]
    for t in threads:
        t.start()
    for t in threads:
        t.join(5)
    assert [e.result for e in expressions] == [1.0, 3.0, 5.0, 7.0, 9.0]


def test_long_operator_chain_completes(auto_worker, process):
    text = "+".join(["1"] * 1200)
    expression = process(text, timeout=60)
    assert expression.status == STATUS_COMPLETED
    assert expression.result == 1200.0
    assert len(expression.tasks) == 1199
    # Left-deep chain: each task adds one more term to the running sum.
    assert [t.arg1 for t in expression.tasks[:3]] == [1.0, 2.0, 3.0]
    assert expression.tasks[-1].result == 1200.0


def test_deeply_nested_parentheses(auto_worker, process):
    expression = process("(" * 600 + "2" + "*1)" * 600, timeout=60)
    assert expression.status == STATUS_COMPLETED
    assert expression.result == 2.0
    assert len(expression.tasks) == 600
