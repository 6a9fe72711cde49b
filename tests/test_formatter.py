import re
from datetime import datetime

import pytest

from serialterm.core import DisplayMode, FormatterConfig, FrameFormatter, TextCodec, format_frame
from serialterm.core.formatter import decode_text, format_hex, format_timestamp

SAMPLE = bytes([0x48, 0x65, 0x0D, 0x0A, 0x4C])

HEX = FormatterConfig(mode=DisplayMode.HEX, hex_newline_splitting=False)
HEX_SPLIT = FormatterConfig(mode=DisplayMode.HEX, hex_newline_splitting=True)


def test_hex_without_splitting_is_one_spaced_run():
    assert format_frame(SAMPLE, HEX) == "48 65 0D 0A 4C"


def test_hex_with_splitting_brackets_control_run():
    assert format_frame(SAMPLE, HEX_SPLIT) == "48 65\n[0D 0A]\n4C"


@pytest.mark.parametrize("raw, expected", [
    (b"\r\n", "[0D 0A]"),
    (b"\n\nAB", "[0A 0A]\n41 42"),
    (b"AB\r", "41 42\n[0D]"),
    (b"A\rB\nC", "41\n[0D]\n42\n[0A]\n43"),
    (b"\xff\x00", "FF 00"),
    (b"", ""),
])
def test_hex_splitting_edges(raw, expected):
    assert format_hex(raw, True) == expected


def test_hex_splitting_never_doubles_separators():
    text = format_hex(b"\x01\r\n\r\x02\n\x03", True)
    assert not text.startswith((" ", "\n"))
    assert not text.endswith((" ", "\n"))
    assert "  " not in text
    assert "\n\n" not in text
    assert " \n" not in text and "\n " not in text


def test_control_run_split_across_calls_is_not_merged():
    first = format_hex(b"A\r", True)
    second = format_hex(b"\nB", True)
    assert first == "41\n[0D]"
    assert second == "[0A]\n42"


def test_latin1_round_trips_every_byte():
    raw = bytes(range(256))
    text = format_frame(raw, FormatterConfig(codec=TextCodec.LATIN1))
    assert len(text) == 256
    assert text.encode("latin-1") == raw


def test_utf8_substitutes_invalid_sequences():
    text = decode_text(b"ok \xff\xfe \xe4\xbd\xa0", TextCodec.UTF8)
    assert text.startswith("ok ")
    assert "�" in text
    assert text.endswith("你")


def test_gbk_decodes_chinese():
    raw = "中文".encode("gbk")
    assert decode_text(raw, TextCodec.GBK) == "中文"


def test_timestamp_prefix_once_per_call():
    now = datetime(2024, 1, 2, 3, 4, 5, 678000)
    cfg = FormatterConfig(mode=DisplayMode.HEX, timestamp_enabled=True,
                          hex_newline_splitting=True)
    assert format_frame(SAMPLE, cfg, now) == "03:04:05.678 >> 48 65\n[0D 0A]\n4C"


def test_format_timestamp_shape():
    assert re.fullmatch(r"\d{2}:\d{2}:\d{2}\.\d{3}", format_timestamp())


def test_text_mode_with_timestamp():
    now = datetime(2024, 1, 2, 23, 59, 59, 1000)
    cfg = FormatterConfig(timestamp_enabled=True)
    assert format_frame(b"hi", cfg, now) == "23:59:59.001 >> hi"


def test_frame_formatter_emits_text(qtbot):
    formatter = FrameFormatter()
    formatter.set_mode(DisplayMode.HEX)
    formatter.set_hex_newline_splitting(False)

    with qtbot.waitSignal(formatter.formatted_text_ready) as blocker:
        formatter.process(SAMPLE)

    assert blocker.args == ["48 65 0D 0A 4C"]


def test_frame_formatter_ignores_empty_input(qtbot):
    formatter = FrameFormatter()
    with qtbot.assertNotEmitted(formatter.formatted_text_ready):
        formatter.process(b"")


def test_frame_formatter_setters_replace_config():
    formatter = FrameFormatter()
    formatter.set_codec(TextCodec.UTF8)
    formatter.set_timestamp_enabled(True)
    assert formatter.config == FormatterConfig(codec=TextCodec.UTF8, timestamp_enabled=True)

    formatter.set_config(HEX)
    assert formatter.config is HEX
