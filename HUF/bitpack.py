import numpy as np
from bitstream import FormatError
from iohandlers import READ_CHUNK

DEFAULT_BUFFER_BITS = 4096   # packer buffer capacity
DEFAULT_FLUSH_BYTES = 4096   # force sink.flush() once it caches more than this


class BitPacker:
    """
    Accumulates code bits into a fixed-size bit buffer and hands full buffers
    to the sink. Bits are packed LSB-first within each output byte.
    """
    def __init__(self, sink, buffer_bits: int = DEFAULT_BUFFER_BITS, flush_bytes: int = DEFAULT_FLUSH_BYTES):
        if buffer_bits <= 0 or buffer_bits % 8:
            raise ValueError(f"buffer_bits must be a positive multiple of 8, got {buffer_bits}")
        if flush_bytes < 0:
            raise ValueError(f"flush_bytes must be >= 0, got {flush_bytes}")
        self.sink = sink
        self.buffer_bits = buffer_bits
        self.flush_bytes = flush_bytes
        self._buf = np.zeros(buffer_bits, dtype=np.uint8)
        self._ptr = 0
        self.bits_written = 0

    def write_bit(self, bit: int):
        if self._ptr == self.buffer_bits:
            self.sink.write_bits(self._buf)
            self._buf = np.zeros(self.buffer_bits, dtype=np.uint8)
            self._ptr = 0
        self._buf[self._ptr] = bit
        self._ptr += 1
        self.bits_written += 1
        if self.sink.bytes_cached_since_flush > self.flush_bytes:
            self.sink.flush()

    def write_code(self, code: int, length: int):
        """Write `length` bits of code, bit 0 first."""
        for i in range(length):
            self.write_bit((code >> i) & 1)

    def finish(self):
        """Trim the partial buffer to whole bytes (zero padded) and flush."""
        if self._ptr:
            nbits = (self._ptr + 7) // 8 * 8
            tail = self._buf[:nbits].copy()
            tail[self._ptr:] = 0
            self.sink.write_bits(tail)
            self._ptr = 0
        self.sink.flush()


class BitReader:
    def __init__(self, f, chunk: int = READ_CHUNK):
        self.f = f
        self.chunk = chunk
        self._bits = []
        self._i = 0

    def read_bit(self) -> int:
        if self._i >= len(self._bits):
            data = self.f.read(self.chunk)
            if not data:
                raise FormatError("Malformed stream: payload truncated")
            self._bits = np.unpackbits(np.frombuffer(data, dtype=np.uint8), bitorder="little").tolist()
            self._i = 0
        b = self._bits[self._i]
        self._i += 1
        return b
