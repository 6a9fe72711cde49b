import pytest
import serial

from serialterm.serial import ErrorKind, OpenError, SerialLinkConfig, SerialPortHandler, SerialRuntimeError


class ShortWriteSerial:
    """Stands in for an open port whose driver accepts only part of a write."""
    is_open = True

    def __init__(self, accepted=None, exc=None):
        self.accepted = accepted
        self.exc = exc

    def write(self, data):
        if self.exc:
            raise self.exc
        return self.accepted

    def close(self):
        self.is_open = False


@pytest.fixture
def loop_handler():
    handler = SerialPortHandler(SerialLinkConfig(port="loop://"), poll_interval=0.05)
    handler.open()
    yield handler
    handler.close()


def test_loopback_read_returns_everything_available(loop_handler):
    assert loop_handler.is_open
    loop_handler.write(b"hello world")
    assert loop_handler.read_available() == b"hello world"


def test_read_with_nothing_available_returns_empty(loop_handler):
    assert loop_handler.read_available() == b""


def test_close_is_idempotent(loop_handler):
    loop_handler.close()
    loop_handler.close()
    assert not loop_handler.is_open
    assert loop_handler.read_available() == b""


def test_missing_device_is_classified():
    handler = SerialPortHandler(SerialLinkConfig(port="/dev/serialterm-no-such-device"))
    with pytest.raises(OpenError) as excinfo:
        handler.open()
    assert excinfo.value.kind == ErrorKind.DEVICE_NOT_FOUND
    assert not handler.is_open


def test_unknown_url_is_generic_open_failure():
    handler = SerialPortHandler(SerialLinkConfig(port="nosuchproto://x"))
    with pytest.raises(OpenError) as excinfo:
        handler.open()
    assert excinfo.value.kind == ErrorKind.OPEN_FAILURE


def test_incomplete_write():
    handler = SerialPortHandler(SerialLinkConfig(port="x"))
    handler._ser = ShortWriteSerial(accepted=2)
    with pytest.raises(SerialRuntimeError) as excinfo:
        handler.write(b"abcd")
    assert excinfo.value.kind == ErrorKind.INCOMPLETE_WRITE
    assert excinfo.value.message == "Incomplete write: 2 of 4 bytes written"


def test_failed_write():
    handler = SerialPortHandler(SerialLinkConfig(port="x"))
    handler._ser = ShortWriteSerial(exc=serial.SerialException("write failed"))
    with pytest.raises(SerialRuntimeError) as excinfo:
        handler.write(b"abcd")
    assert excinfo.value.kind == ErrorKind.WRITE_ERROR
