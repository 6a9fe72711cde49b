import pytest

from serialterm.core import build_payload, echo_line, parse_hex
from serialterm.serial import ValidationError


@pytest.mark.parametrize("text, expected", [
    ("48 65 6c", b"Hel"),
    ("48656C", b"Hel"),
    ("0x48,0x65", b"\x04\x80\x65"),
    ("ABC", b"\x0a\xbc"),
    ("ff\n00", b"\xff\x00"),
])
def test_parse_hex(text, expected):
    assert parse_hex(text) == expected


@pytest.mark.parametrize("text", ["zz", "a", "hello"])
def test_parse_hex_requires_a_pair(text):
    with pytest.raises(ValidationError):
        parse_hex(text)


def test_text_payload_with_newline():
    assert build_payload("AT") == b"AT\r\n"


def test_text_payload_without_newline():
    assert build_payload("AT", append_newline=False) == b"AT"


def test_hex_payload():
    assert build_payload("01 02", hex_mode=True, append_newline=False) == b"\x01\x02"


def test_empty_input_sends_nothing():
    assert build_payload("") == b""


def test_echo_line():
    assert echo_line("AT") == "send>>>  AT  >>>end\r\n"
