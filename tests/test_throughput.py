import pytest

from serialterm.core import ThroughputMonitor


@pytest.fixture
def monitor(qtbot):
    m = ThroughputMonitor()
    yield m
    m.stop()


def test_negative_counts_are_ignored(qtbot, monitor):
    monitor.record_bytes(500)
    monitor.record_bytes(-10)
    monitor.record_bytes(0)

    with qtbot.waitSignal(monitor.throughput_sample) as blocker:
        monitor.tick()

    assert blocker.args == [500, 500]
    assert monitor.interval_bytes == 0
    assert monitor.current_rate == 500.0


def test_idle_tick_emits_zero_sample(qtbot, monitor):
    monitor.record_bytes(10)
    monitor.tick()
    with qtbot.waitSignal(monitor.throughput_sample) as blocker:
        monitor.tick()
    assert blocker.args == [0, 10]


def test_timer_ticks_every_second(qtbot, monitor):
    monitor.record_bytes(42)
    monitor.start()
    assert monitor.is_active
    with qtbot.waitSignal(monitor.throughput_sample, timeout=2500) as blocker:
        pass
    assert blocker.args == [42, 42]


def test_stop_keeps_total_and_reset_zeroes(monitor):
    monitor.start()
    monitor.record_bytes(100)
    monitor.stop()
    assert not monitor.is_active
    assert monitor.total_bytes == 100
    assert monitor.current_rate == 0.0

    monitor.reset()
    assert monitor.total_bytes == 0
    assert monitor.interval_bytes == 0


@pytest.mark.parametrize("rate, expected", [
    (0, "0 bytes/s"),
    (512, "512 bytes/s"),
    (1023.9, "1023 bytes/s"),
    (1024, "1.0 KB/s"),
    (1536, "1.5 KB/s"),
])
def test_format_rate(rate, expected):
    assert ThroughputMonitor.format_rate(rate) == expected


@pytest.mark.parametrize("count, expected", [
    (0, "0 B"),
    (1023, "1023 B"),
    (1536, "1.5 KB"),
    (1048575, "1024.0 KB"),
    (1048576, "1.0 MB"),
    (2202010, "2.1 MB"),
])
def test_format_total(count, expected):
    assert ThroughputMonitor.format_total(count) == expected
