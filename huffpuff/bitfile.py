from __future__ import annotations

import struct
from typing import BinaryIO, Iterator, List, Optional, Sequence

from .errors import TruncatedHeaderError

HEADER_FORMAT = "<256Q" # one unsigned 64-bit count per byte value
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)


class BitWriter:
    """
    Packs single bits most-significant-bit first into a binary stream.

    Whole bytes go to the stream as soon as they fill. close() pads the last
    partial byte with zero bits.
    """

    def __init__(self, stream: BinaryIO, buffer_size: int = 16 * 1024):
        self.stream = stream
        self.buffer_size = buffer_size
        self._out = bytearray()
        self._acc = 0
        self._acc_bits = 0
        self.bits_written = 0

    def write_header(self, counts: Sequence[int]) -> None:
        if self.bits_written or self._out:
            raise ValueError("header must be written before any bits")
        self.stream.write(struct.pack(HEADER_FORMAT, *counts))

    def put_bit(self, bit: int) -> None:
        self._acc = (self._acc << 1) | (1 if bit else 0)
        self._acc_bits += 1
        self.bits_written += 1
        if self._acc_bits == 8:
            self._out.append(self._acc)
            self._acc = 0
            self._acc_bits = 0
            if len(self._out) >= self.buffer_size:
                self.flush()

    def flush(self) -> None: # whole bytes only, a partial byte stays pending
        if self._out:
            self.stream.write(bytes(self._out))
            self._out.clear()

    @property
    def pad_bits(self) -> int:
        return (8 - self._acc_bits) % 8

    def close(self) -> int:
        """Flush everything, padding the final byte. Returns the number of pad bits."""
        pad_bits = self.pad_bits
        if self._acc_bits:
            self._out.append((self._acc << pad_bits) & 0xFF)
            self._acc = 0
            self._acc_bits = 0
        self.flush()
        return pad_bits

    def __enter__(self) -> "BitWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()


class BitReader:
    """Reads a raw header block and then single bits, most-significant-bit first."""

    def __init__(self, stream: BinaryIO, chunk_size: int = 16 * 1024):
        self.stream = stream
        self.chunk_size = chunk_size
        self._chunk = b""
        self._pos = 0
        self._bit = 0 # next bit inside _chunk[_pos], 0 is the MSB
        self.bits_read = 0

    def read_header(self) -> List[int]:
        raw = self.stream.read(HEADER_SIZE)
        if len(raw) < HEADER_SIZE:
            raise TruncatedHeaderError(
                f"header needs {HEADER_SIZE} bytes, only {len(raw)} available"
            )
        return list(struct.unpack(HEADER_FORMAT, raw))

    def get_bit(self) -> Optional[int]:
        """Return the next bit, or None at end of stream."""
        if self._pos >= len(self._chunk):
            self._chunk = self.stream.read(self.chunk_size)
            self._pos = 0
            if not self._chunk:
                return None
        bit = (self._chunk[self._pos] >> (7 - self._bit)) & 1
        self._bit += 1
        if self._bit == 8:
            self._bit = 0
            self._pos += 1
        self.bits_read += 1
        return bit

    def __iter__(self) -> Iterator[int]:
        while True:
            bit = self.get_bit()
            if bit is None:
                return
            yield bit
