"""
CBOR Writer

Low-level emitter for the CBOR item grammar used by Plutus data: major-type
heads in their shortest form, chunked byte strings, indefinite-length markers
and the break code.
"""

import struct
from typing import List

# Major types
MT_UNSIGNED = 0
MT_NEGATIVE = 1
MT_BYTES = 2
MT_TEXT = 3
MT_ARRAY = 4
MT_MAP = 5
MT_TAG = 6
MT_SIMPLE = 7

# Additional-information values
AI_ONE_BYTE = 24
AI_TWO_BYTES = 25
AI_FOUR_BYTES = 26
AI_EIGHT_BYTES = 27
AI_INDEFINITE = 31

BREAK = 0xFF

# Ledger rule: byte strings longer than this are split into chunks
BYTES_CHUNK_SIZE = 64

UINT64_MAX = 0xFFFFFFFFFFFFFFFF


class CborWriter:
    """
    CBOR writer accumulating bytes into an internal buffer.

    Mirrors the reader's primitives: every method appends exactly one
    syntactic piece of an item.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb: List[int] = []

    def u8(self, v: int) -> None:
        """Write a single raw byte."""
        self._bb.append(v & 0xFF)

    def raw(self, v: bytes) -> None:
        """Write raw bytes without any header."""
        self._bb.extend(v)

    def head(self, major: int, arg: int) -> None:
        """
        Write an item head using the shortest argument encoding.

        Args:
            major: Major type (0-7)
            arg: Unsigned argument, at most 2**64 - 1

        Raises:
            ValueError: If arg does not fit in 64 bits
        """
        if arg < 0 or arg > UINT64_MAX:
            raise ValueError(f"CBOR head argument out of range: {arg}")
        ib = major << 5
        if arg < AI_ONE_BYTE:
            self.u8(ib | arg)
        elif arg <= 0xFF:
            self.u8(ib | AI_ONE_BYTE)
            self.u8(arg)
        elif arg <= 0xFFFF:
            self.u8(ib | AI_TWO_BYTES)
            self.raw(struct.pack(">H", arg))
        elif arg <= 0xFFFFFFFF:
            self.u8(ib | AI_FOUR_BYTES)
            self.raw(struct.pack(">I", arg))
        else:
            self.u8(ib | AI_EIGHT_BYTES)
            self.raw(struct.pack(">Q", arg))

    def indefinite(self, major: int) -> None:
        """Write the start marker of an indefinite-length item."""
        self.u8((major << 5) | AI_INDEFINITE)

    def break_marker(self) -> None:
        """Write the break code closing an indefinite-length item."""
        self.u8(BREAK)

    def uint(self, v: int) -> None:
        """Write an unsigned integer item."""
        self.head(MT_UNSIGNED, v)

    def nint(self, v: int) -> None:
        """Write a negative integer item; v must be negative."""
        self.head(MT_NEGATIVE, -1 - v)

    def tag(self, t: int) -> None:
        """Write a tag head."""
        self.head(MT_TAG, t)

    def byte_string(self, v: bytes) -> None:
        """
        Write a byte string item.

        Strings up to 64 bytes are definite-length. Longer strings become an
        indefinite sequence of definite chunks of at most 64 bytes each.
        """
        if len(v) <= BYTES_CHUNK_SIZE:
            self.head(MT_BYTES, len(v))
            self.raw(v)
            return
        self.indefinite(MT_BYTES)
        for off in range(0, len(v), BYTES_CHUNK_SIZE):
            chunk = v[off:off + BYTES_CHUNK_SIZE]
            self.head(MT_BYTES, len(chunk))
            self.raw(chunk)
        self.break_marker()

    def array_header(self, n: int) -> None:
        """Write a definite-length array head."""
        self.head(MT_ARRAY, n)

    def map_header(self, n: int) -> None:
        """Write a definite-length map head."""
        self.head(MT_MAP, n)

    def to_bytes(self) -> bytes:
        """Return accumulated bytes as an immutable bytes object."""
        return bytes(self._bb)
