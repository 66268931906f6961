import io
from typing import Iterator, Optional, Union

import numpy as np

READ_CHUNK = 4096 * 4

EOS = -1  # peek() result at end of stream


class ByteReader:
    """
    Sequential byte source with peek and rewind.

    Wraps either a path (opened on first use) or an in-memory bytes object.
    sequence() is single-pass; call reset() before iterating again.
    """
    def __init__(self, src: Union[str, bytes, bytearray, memoryview], chunk: int = READ_CHUNK):
        if isinstance(src, (bytes, bytearray, memoryview)):
            self._f = io.BytesIO(bytes(src))
            self._path = None
        else:
            self._f = None
            self._path = src
        self.chunk = chunk
        self._closed = False

    def _file(self):
        if self._closed:
            raise ValueError("reader is closed")
        if self._f is None:
            self._f = open(self._path, "rb")
        return self._f

    def peek(self) -> int:
        f = self._file()
        pos = f.tell()
        b = f.read(1)
        f.seek(pos)
        return b[0] if b else EOS

    def sequence(self) -> Iterator[int]:
        for block in self.chunks():
            yield from block.tolist()

    def chunks(self) -> Iterator[np.ndarray]:
        """Yield the remaining input as uint8 arrays of up to `chunk` bytes."""
        f = self._file()
        while True:
            data = f.read(self.chunk)
            if not data:
                return
            yield np.frombuffer(data, dtype=np.uint8)

    def read(self, n: int) -> bytes:
        return self._file().read(n)

    def reset(self):
        self._file().seek(0)

    def close(self):
        if self._f is not None:
            self._f.close()
            self._f = None
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class ByteSink:
    """
    Buffered byte/bit sink.

    bytes_cached_since_flush counts bytes written since the last flush(); flush() hands
    them to the underlying file and resets the counter.
    """
    def __init__(self, dst: Optional[str] = None):
        if dst is None:
            self._f = io.BytesIO()
            self._owned = False
        else:
            self._f = open(dst, "wb")
            self._owned = True
        self._cached = 0

    @property
    def bytes_cached_since_flush(self) -> int:
        return self._cached

    def write(self, data: bytes):
        self._f.write(data)
        self._cached += len(data)

    def write_bits(self, bits: np.ndarray):
        """Write a 0/1 array, packed LSB-first. len(bits) must be a multiple of 8."""
        if len(bits) % 8:
            raise ValueError(f"bit count {len(bits)} is not byte aligned")
        self.write(np.packbits(bits.astype(np.uint8), bitorder="little").tobytes())

    def flush(self):
        self._f.flush()
        self._cached = 0

    def getvalue(self) -> bytes:
        if self._owned:
            raise ValueError("getvalue() is only available on in-memory sinks")
        return self._f.getvalue()

    def close(self):
        self.flush()
        if self._owned:
            self._f.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
