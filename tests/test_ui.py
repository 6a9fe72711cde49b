from types import SimpleNamespace

from PySide6 import QtGui

from serialterm.ui import KeywordHighlighter
from serialterm.ui.widgets import port_discovery
from serialterm.ui.widgets.port_discovery import PortDiscovery


def fake_port(device, description="n/a", hwid="n/a", vid=None):
    return SimpleNamespace(device=device, description=description, hwid=hwid, vid=vid)


def test_only_usb_ports_by_default(monkeypatch):
    ports = [
        fake_port("/dev/ttyS0"),
        fake_port("/dev/ttyUSB0", "CP2102 USB to UART", vid=0x10C4),
        fake_port("/dev/ttyACM1", "Pico"),
    ]
    monkeypatch.setattr(port_discovery.list_ports, "comports", lambda: ports)

    devices = [entry.device for entry in PortDiscovery.get_ports()]
    assert devices == ["/dev/ttyACM1", "/dev/ttyUSB0"]
    assert len(PortDiscovery.get_ports(show_all=True)) == 3


def test_enumeration_failure_gives_no_ports(monkeypatch):
    def broken():
        raise OSError("sandboxed")

    monkeypatch.setattr(port_discovery.list_ports, "comports", broken)
    assert PortDiscovery.get_ports() == []


def test_find_port(monkeypatch):
    ports = [fake_port("COM3"), fake_port("COM4")]
    monkeypatch.setattr(port_discovery.list_ports, "comports", lambda: ports)
    assert PortDiscovery.find("COM4") is ports[1]
    assert PortDiscovery.find("COM9") is None


def coloured_spans(doc):
    layout = doc.firstBlock().layout()
    return [(r.start, r.length, r.format.foreground().color().name()) for r in layout.formats()]


def test_highlighter_colours_error_keyword(qtbot):
    doc = QtGui.QTextDocument()
    doc.setPlainText("boot ERROR here")
    highlighter = KeywordHighlighter(doc)
    highlighter.rehighlight()

    assert (5, 5, "#cc0000") in coloured_spans(doc)


def test_disabled_highlighter_leaves_text_plain(qtbot):
    doc = QtGui.QTextDocument()
    doc.setPlainText("12:00:00.000 >> warning low voltage")
    highlighter = KeywordHighlighter(doc)
    highlighter.rehighlight()
    assert coloured_spans(doc)

    highlighter.set_enabled(False)

    assert not highlighter.is_enabled()
    assert coloured_spans(doc) == []
