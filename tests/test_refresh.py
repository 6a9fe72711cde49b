import pytest

from serialterm.core import RefreshScheduler


class FakeDisplay:
    def __init__(self):
        self.calls = []

    def __call__(self, text, scroll):
        self.calls.append((text, scroll))


@pytest.fixture
def display():
    return FakeDisplay()


@pytest.fixture
def scheduler(qtbot, display):
    s = RefreshScheduler(display)
    yield s
    s.stop()


def test_tick_drains_everything_in_one_display_call(scheduler, display):
    for part in ["a", "bc", "", "def"]:
        scheduler.enqueue(part)

    scheduler.tick()

    assert display.calls == [("abcdef", True)]
    assert not scheduler.has_pending()


def test_empty_tick_does_nothing(qtbot, scheduler, display):
    with qtbot.assertNotEmitted(scheduler.flushed):
        scheduler.tick()
    assert display.calls == []


def test_flushed_reports_length(qtbot, scheduler):
    scheduler.enqueue("12345")
    with qtbot.waitSignal(scheduler.flushed) as blocker:
        scheduler.tick()
    assert blocker.args == [5]


def test_timer_batches_bursts(qtbot, scheduler, display):
    scheduler.start()
    assert scheduler.is_active
    for i in range(50):
        scheduler.enqueue(f"{i},")

    qtbot.waitUntil(lambda: len(display.calls) > 0, timeout=1000)
    assert "".join(t for t, _ in display.calls) == "".join(f"{i}," for i in range(50))
    assert len(display.calls) < 50


def test_transport_stop_flushes_residual_text_and_halts(scheduler, display):
    scheduler.start()
    scheduler.enqueue("tail")
    scheduler.on_transport_stopped()

    assert display.calls == [("tail", True)]
    assert not scheduler.is_active


def test_discard_drops_pending(scheduler, display):
    scheduler.enqueue("junk")
    scheduler.discard()
    scheduler.tick()
    assert display.calls == []


def test_scroll_position_gates_auto_scroll(scheduler, display):
    scheduler.on_scroll_changed(200, 500)
    assert not scheduler.auto_scroll
    scheduler.enqueue("x")
    scheduler.tick()

    scheduler.on_scroll_changed(495, 500)
    assert scheduler.auto_scroll
    scheduler.enqueue("y")
    scheduler.tick()

    assert display.calls == [("x", False), ("y", True)]


def test_scroll_tolerance_boundary(scheduler):
    scheduler.on_scroll_changed(490, 500)
    assert scheduler.auto_scroll
    scheduler.on_scroll_changed(489, 500)
    assert not scheduler.auto_scroll
