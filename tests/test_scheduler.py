from __future__ import annotations

from tabline_engine.errors import RenderPipelineFailure
from tabline_engine.runtime.scheduler import ManualDeferrer, SchedulerState, UpdateScheduler


def make_scheduler(
    rebuild=None,
) -> tuple[UpdateScheduler, ManualDeferrer, list[str], list[RenderPipelineFailure]]:
    deferrer = ManualDeferrer()
    calls: list[str] = []
    failures: list[RenderPipelineFailure] = []
    scheduler = UpdateScheduler(
        deferrer,
        rebuild or (lambda: calls.append("rebuild")),
        on_failure=failures.append,
    )
    return scheduler, deferrer, calls, failures


def test_burst_of_requests_coalesces_into_one_rebuild() -> None:
    scheduler, deferrer, calls, _ = make_scheduler()

    results = [scheduler.request(f"event-{i}") for i in range(5)]

    assert results == [True, False, False, False, False]
    assert len(deferrer) == 1
    assert scheduler.state is SchedulerState.PENDING_REBUILD

    deferrer.run_pending()

    assert calls == ["rebuild"]
    assert scheduler.state is SchedulerState.IDLE
    assert scheduler.coalesced == 4
    assert scheduler.completed == 1


def test_request_after_rebuild_schedules_again() -> None:
    scheduler, deferrer, calls, _ = make_scheduler()

    scheduler.request()
    deferrer.run_pending()
    scheduler.request()
    deferrer.run_pending()

    assert calls == ["rebuild", "rebuild"]


def test_request_during_rebuild_schedules_fresh_pass() -> None:
    deferrer = ManualDeferrer()
    calls: list[int] = []
    holder: dict[str, UpdateScheduler] = {}

    def rebuild() -> None:
        calls.append(len(calls))
        if len(calls) == 1:
            assert holder["scheduler"].request("from rebuild")

    holder["scheduler"] = UpdateScheduler(deferrer, rebuild)
    holder["scheduler"].request()

    assert deferrer.run_pending() == 1
    assert calls == [0]
    assert len(deferrer) == 1

    deferrer.drain()
    assert calls == [0, 1]


def test_reset_drops_pending_rebuild() -> None:
    scheduler, deferrer, calls, _ = make_scheduler()

    scheduler.request()
    scheduler.reset()
    deferrer.drain()

    assert calls == []
    assert scheduler.state is SchedulerState.IDLE


def test_reset_then_request_runs_only_latest() -> None:
    scheduler, deferrer, calls, _ = make_scheduler()

    scheduler.request()
    scheduler.reset()
    scheduler.request()
    deferrer.drain()

    assert calls == ["rebuild"]


def test_failure_is_reported_and_scheduler_recovers() -> None:
    attempts: list[int] = []

    def rebuild() -> None:
        attempts.append(1)
        if len(attempts) == 1:
            raise ValueError("boom")

    scheduler, deferrer, _, failures = make_scheduler(rebuild)

    scheduler.request()
    deferrer.run_pending()

    assert len(failures) == 1
    assert isinstance(failures[0].cause, ValueError)
    assert str(failures[0]) == "Tabline update failed: boom"
    assert scheduler.state is SchedulerState.IDLE
    assert scheduler.failed == 1

    scheduler.request()
    deferrer.run_pending()
    assert scheduler.completed == 1


def test_manual_deferrer_drain_limit() -> None:
    deferrer = ManualDeferrer()

    def again() -> None:
        deferrer(again)

    deferrer(again)

    assert deferrer.drain(limit=3) == 3
    assert len(deferrer) == 1
