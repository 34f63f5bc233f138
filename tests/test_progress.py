import sys

import pytest

from consultant_scraper.core import progress


class FakeClock:
    def __init__(self, *readings):
        self.readings = list(readings)

    def __call__(self):
        return self.readings.pop(0)


def test_format_duration():
    assert progress.format_duration(5) == "5s"
    assert progress.format_duration(65) == "1m 5s"
    assert progress.format_duration(3600) == "1h 0m 0s"
    assert progress.format_duration(3725.9) == "1h 2m 5s"
    assert progress.format_duration(-3) == "0s"


def test_tracker_computes_eta_from_elapsed_and_completed():
    tracker = progress.ProgressTracker("details", total=10, clock=FakeClock(100.0, 110.0, 120.0))

    first = tracker.record(label="p1")
    assert first.completed == 1
    assert first.elapsed == 10.0
    assert first.eta == pytest.approx(90.0)
    assert first.percentage == pytest.approx(10.0)

    second = tracker.record()
    assert second.completed == 2
    assert second.eta == pytest.approx(20.0 / 2 * 10 - 20.0)


def test_tracker_without_total_has_no_eta():
    tracker = progress.ProgressTracker("list", clock=FakeClock(0.0, 3.0))

    event = tracker.record(label="page 1")
    assert event.eta is None
    assert event.percentage is None


def test_combine_observers_skips_missing_ones():
    seen = []
    notify = progress.combine_observers(seen.append, None, lambda event: seen.append(event.completed))

    notify(progress.ProgressEvent(phase="list", completed=3, total=None, elapsed=1.0, eta=None))

    assert seen[1] == 3
    assert len(seen) == 2


def test_log_observers_write_to_logger(caplog):
    event = progress.ProgressEvent(phase="details", completed=1, total=4, elapsed=2.0, eta=6.0, label="p1")

    with caplog.at_level("INFO"):
        progress.log_progress(event)
        progress.log_memory_usage(event)

    text = " ".join(caplog.messages)
    assert "25.00%" in text
    assert "6s" in text
    assert "peak rss" in text


class DummyResource:
    RUSAGE_SELF = 0

    @staticmethod
    def getrusage(who):
        return type("Usage", (), {"ru_maxrss": 2048 * 1024})()


def test_memory_observer_loads_resource_lazily(monkeypatch, caplog):
    assert "resource" not in vars(progress)
    monkeypatch.setitem(sys.modules, "resource", DummyResource)
    monkeypatch.setattr(progress.sys, "platform", "linux")
    event = progress.ProgressEvent(phase="list", completed=2, total=None, elapsed=1.0, eta=None)

    with caplog.at_level("INFO"):
        progress.log_memory_usage(event)

    assert "peak rss 2048.00 MB" in caplog.text
