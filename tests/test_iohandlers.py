import numpy as np
import pytest

from freq import count_symbols, histogram
from iohandlers import EOS, ByteReader, ByteSink


def test_reader_peek_does_not_consume():
    r = ByteReader(b"xy")
    assert r.peek() == ord("x")
    assert r.peek() == ord("x")
    assert list(r.sequence()) == [ord("x"), ord("y")]
    assert r.peek() == EOS


def test_reader_reset_allows_second_pass():
    r = ByteReader(b"hello", chunk=2)
    assert bytes(r.sequence()) == b"hello"
    assert list(r.sequence()) == []
    r.reset()
    assert bytes(r.sequence()) == b"hello"


def test_reader_from_path(tmp_path):
    p = tmp_path / "in.bin"
    p.write_bytes(bytes(range(256)) * 10)
    with ByteReader(str(p), chunk=100) as r:
        assert sum(len(c) for c in r.chunks()) == 2560
        r.reset()
        assert r.read(3) == b"\x00\x01\x02"


def test_missing_file_propagates(tmp_path):
    r = ByteReader(str(tmp_path / "nope"))
    with pytest.raises(FileNotFoundError):
        r.peek()


def test_sink_counts_and_flush():
    s = ByteSink()
    s.write(b"abc")
    s.write_bits(np.array([1, 0, 0, 0, 0, 0, 0, 0]))
    assert s.bytes_cached_since_flush == 4
    s.flush()
    assert s.bytes_cached_since_flush == 0
    assert s.getvalue() == b"abc\x01"


def test_sink_rejects_unaligned_bits():
    with pytest.raises(ValueError):
        ByteSink().write_bits(np.zeros(5, dtype=np.uint8))


def test_file_sink(tmp_path):
    p = tmp_path / "out.bin"
    with ByteSink(str(p)) as s:
        s.write(b"data")
        with pytest.raises(ValueError):
            s.getvalue()
    assert p.read_bytes() == b"data"


def test_count_symbols():
    counts, present = count_symbols(ByteReader(b"aaabbc", chunk=4))
    assert counts.shape == (256,)
    assert counts[ord("a")] == 3 and counts[ord("b")] == 2 and counts[ord("c")] == 1
    assert int(counts.sum()) == 6
    assert np.flatnonzero(present).tolist() == [97, 98, 99]


def test_count_symbols_empty():
    counts, present = count_symbols(ByteReader(b""))
    assert not counts.any()
    assert not present.any()


def test_histogram_matches():
    data = bytes(range(256)) * 3 + b"\xff"
    counts, _ = count_symbols(ByteReader(data))
    assert np.array_equal(histogram(data), counts)


def test_reader_closed():
    r = ByteReader(b"abc")
    r.close()
    with pytest.raises(ValueError, match="closed"):
        r.peek()
    with pytest.raises(ValueError, match="closed"):
        r.read(1)


def test_path_reader_closed(tmp_path):
    p = tmp_path / "in.bin"
    p.write_bytes(b"abc")
    with ByteReader(str(p)) as r:
        assert r.read(1) == b"a"
    with pytest.raises(ValueError, match="closed"):
        r.reset()
