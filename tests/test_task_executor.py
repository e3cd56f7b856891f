import math

import pytest

from worker.task_executor import divide, execute_task


def task(op, a, b, operation_time=0):
    return {"id": "t", "expression_id": "e", "operation": op, "arg1": a, "arg2": b,
            "operation_time": operation_time}


def no_sleep(_):
    pass


@pytest.mark.parametrize("op, a, b, expected", [
    ("+", 2, 3, 5.0),
    ("-", 2, 3, -1.0),
    ("*", 2.5, 4, 10.0),
    ("/", 7, 2, 3.5),
])
def test_operations(op, a, b, expected):
    assert execute_task(task(op, a, b), sleep=no_sleep) == expected


def test_sleeps_for_the_duration_hint():
    slept = []
    execute_task(task("+", 1, 1, operation_time=1500), sleep=slept.append)
    assert slept == [1.5]


def test_division_by_zero_gives_non_finite_values():
    assert divide(1.0, 0.0) == math.inf
    assert divide(-1.0, 0.0) == -math.inf
    assert divide(1.0, -0.0) == -math.inf
    assert math.isnan(divide(0.0, 0.0))
    assert math.isnan(divide(math.nan, 0.0))
    assert execute_task(task("/", 4, 0), sleep=no_sleep) == math.inf


def test_unknown_operator():
    with pytest.raises(ValueError):
        execute_task(task("^", 2, 3), sleep=no_sleep)
