from __future__ import annotations

from tabline_engine import ManualDeferrer, TablineEngine
from tabline_engine.cache import ByFiletypeProvider
from tabline_engine.health import run_health_check
from tabline_engine.host import MemoryHost


def make_engine(width: int = 120, **kwargs) -> tuple[TablineEngine, MemoryHost]:
    host = MemoryHost(width=width)
    return TablineEngine(host, defer=ManualDeferrer(), **kwargs), host


def titles(report) -> list[str]:
    return [section.title for section in report.sections]


def test_disabled_engine_stops_after_configuration() -> None:
    engine, _ = make_engine()

    report = run_health_check(engine)

    assert titles(report) == ["Tabline Configuration"]
    assert report.count("warn") == 1
    assert report.healthy


def test_healthy_engine_report() -> None:
    engine, host = make_engine(
        icon_provider=ByFiletypeProvider(lambda ft: ("λ", "Identifier"))
    )
    host.open_buffer("/p/a.py")
    engine.setup()

    report = run_health_check(engine)

    assert titles(report) == [
        "Tabline Configuration",
        "Icon Providers",
        "Buffer Status",
        "Display",
    ]
    assert report.healthy
    assert report.count("warn") == 0
    assert "Icon provider 'filetype' is configured" in report.render()


def test_warnings_for_missing_provider_buffers_and_narrow_view() -> None:
    engine, _ = make_engine(width=60)
    engine.setup()

    report = run_health_check(engine)
    messages = [entry.message for entry in report.entries() if entry.level == "warn"]

    assert messages == [
        "No icon provider found",
        "No listed buffers found",
        "Viewport is narrow",
    ]


def test_list_failure_is_an_error() -> None:
    engine, host = make_engine()
    engine.setup()
    host.fail("list_buffers")

    report = run_health_check(engine)

    assert not report.healthy
    assert titles(report)[-1] == "Buffer Status"


def test_missing_source_is_an_error() -> None:
    engine, host = make_engine()
    host.open_buffer("/p/a.py")

    def refuse(source) -> None:
        raise RuntimeError("display locked")

    host.set_tabline_source = refuse  # type: ignore[method-assign]
    engine.setup()

    report = run_health_check(engine)

    assert not report.healthy
    assert "ERROR Display has no tabline source" in report.render()
