"""Shared fixtures.

Transport tests run against pyserial's ``loop://`` handler, which echoes
every written byte back to the reader, so no hardware is needed.
"""

from __future__ import annotations

import os

# Run Qt headless when no display is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from serialterm.serial import SerialLinkConfig, SerialTransport, TransportState

LOOPBACK = "loop://"


@pytest.fixture
def loop_config() -> SerialLinkConfig:
    return SerialLinkConfig(port=LOOPBACK, baud_rate=115200)


@pytest.fixture
def transport(qtbot):
    t = SerialTransport()
    yield t
    if t.state != TransportState.CLOSED:
        with qtbot.waitSignal(t.stopped, timeout=3000, raising=False):
            t.stop()
    t.shutdown()


@pytest.fixture
def open_transport(qtbot, transport, loop_config):
    with qtbot.waitSignal(transport.opened, timeout=3000):
        transport.start(loop_config)
    return transport
