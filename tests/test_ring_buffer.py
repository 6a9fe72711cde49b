import threading

import pytest

from serialterm.core import RingBuffer


def test_default_capacity():
    assert RingBuffer().capacity() == 65536


@pytest.mark.parametrize("bad", [0, -5])
def test_non_positive_capacity_falls_back_to_default(bad):
    assert RingBuffer(bad).capacity() == RingBuffer.DEFAULT_CAPACITY


def test_keeps_last_capacity_bytes_of_all_writes():
    buf = RingBuffer(8)
    history = b""
    for chunk in [b"abc", b"", b"defgh", b"ij", b"k", b"lmnopq", b"r"]:
        buf.write(chunk)
        history += chunk
        assert buf.size() <= 8
        assert buf.size() == min(8, len(history))

    assert buf.read_all() == history[-8:]


def test_single_write_at_least_capacity_replaces_contents():
    buf = RingBuffer(4)
    buf.write(b"xy")
    buf.write(b"0123456789")
    assert buf.read_all() == b"6789"

    buf.write(b"zz")
    buf.write(b"ABCD")
    assert buf.read_all() == b"ABCD"


def test_read_all_drains_in_fifo_order():
    buf = RingBuffer(16)
    buf.write(b"first ")
    buf.write(b"second")
    assert buf.read_all() == b"first second"
    assert buf.is_empty()
    assert buf.read_all() == b""


def test_clear():
    buf = RingBuffer(16)
    buf.write(b"data")
    buf.clear()
    assert buf.is_empty()
    assert len(buf) == 0


def test_concurrent_writers_and_reader_never_lose_or_tear():
    buf = RingBuffer(1 << 20)
    drained = []
    chunk = bytes(range(256))
    stop = threading.Event()

    def writer():
        for _ in range(200):
            buf.write(chunk)

    def reader():
        while not stop.is_set():
            drained.append(buf.read_all())

    threads = [threading.Thread(target=writer) for _ in range(4)]
    r = threading.Thread(target=reader)
    r.start()
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    stop.set()
    r.join()
    drained.append(buf.read_all())

    data = b"".join(drained)
    assert len(data) == 4 * 200 * 256
    # Each write is atomic, so the stream is whole copies of the chunk
    assert data == chunk * (4 * 200)
