from __future__ import annotations

import pytest

from site_attendance.common.request_queue import RequestQueue
from site_attendance.core.exceptions import DataFetchError, InvalidInput, ValidationError


class Flaky:
    def __init__(self, failures: int, result="ok"):
        self.failures = failures
        self.calls = 0
        self.result = result

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError("database unavailable")
        return self.result


def test_run_returns_first_success_with_linear_backoff():
    sleeps = []
    queue = RequestQueue(sleep=sleeps.append)
    op = Flaky(failures=2, result=[1, 2])

    assert queue.run(op, max_retries=3) == [1, 2]
    assert op.calls == 3
    assert sleeps == [2.0, 4.0]


def test_run_gives_up_after_max_retries():
    sleeps = []
    queue = RequestQueue(sleep=sleeps.append)
    op = Flaky(failures=10)

    with pytest.raises(DataFetchError) as excinfo:
        queue.run(op, max_retries=3, metadata={"kind": "events"})

    assert op.calls == 3
    assert sleeps == [2.0, 4.0]
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_process_drains_in_order_and_drops_exhausted_requests():
    sleeps = []
    queue = RequestQueue(sleep=sleeps.append, pacing_seconds=0)
    order = []

    def good(name):
        return lambda: order.append(name)

    queue.add(good("first"))
    failing = Flaky(failures=10)
    queue.add(failing, max_retries=2)
    queue.add(good("last"))
    assert queue.size() == 3

    succeeded = queue.process()

    assert succeeded == 2
    assert order == ["first", "last"]
    assert failing.calls == 2
    assert sleeps == [2.0]
    assert queue.size() == 0


def test_process_paces_between_requests():
    sleeps = []
    queue = RequestQueue(sleep=sleeps.append)
    queue.add(lambda: None)
    queue.add(lambda: None)

    assert queue.process() == 2
    assert sleeps == [1.0]


def test_service_reads_go_through_the_queue(container, employees, attendance_repo, sleeps, fixed_now):
    emp = employees.add()
    original = attendance_repo.list_events
    calls = []

    def flaky_list_events(**kwargs):
        calls.append(kwargs)
        if len(calls) == 1:
            raise ConnectionError("timeout")
        return original(**kwargs)

    attendance_repo.list_events = flaky_list_events

    days = container.attendance_service.classify_employee_month(emp, 2024, 6, now=fixed_now)

    assert len(days) == 30
    assert len(calls) == 2
    assert sleeps == [2.0]


def test_run_does_not_retry_domain_errors():
    sleeps = []
    queue = RequestQueue(sleep=sleeps.append)
    calls = []

    def bad_month():
        calls.append(1)
        raise InvalidInput("Invalid month: 2024-13")

    with pytest.raises(InvalidInput):
        queue.run(bad_month, max_retries=3)

    assert calls == [1]
    assert sleeps == []


def test_run_retries_a_wrapped_database_error():
    sleeps = []
    queue = RequestQueue(sleep=sleeps.append)
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise DataFetchError("Database query failed")
        return "rows"

    assert queue.run(flaky) == "rows"
    assert sleeps == [2.0]


def test_process_raises_non_transient_error_and_keeps_the_rest():
    queue = RequestQueue(sleep=lambda _: None, pacing_seconds=0)
    done = []

    def rejects():
        raise ValidationError("Employee not found")

    queue.add(rejects)
    queue.add(lambda: done.append("next"))

    with pytest.raises(ValidationError):
        queue.process()

    assert queue.size() == 1
    assert queue.process() == 1
    assert done == ["next"]


def test_programming_errors_surface_unchanged(container, employees, attendance_repo, sleeps, fixed_now):
    emp = employees.add()

    def broken(**kwargs):
        raise KeyError("timestamp")

    attendance_repo.list_events = broken

    with pytest.raises(KeyError):
        container.attendance_service.classify_employee_month(emp, 2024, 6, now=fixed_now)
    assert sleeps == []
