"""
CBOR Reader

Bounded cursor over a byte buffer. Every read checks the remaining length
and raises FormatError on truncation instead of IndexError.
"""

import builtins
import struct
from typing import Optional, Tuple

from ..runtime.errors import ErrorCode, FormatError
from .writer import (
    AI_EIGHT_BYTES,
    AI_FOUR_BYTES,
    AI_INDEFINITE,
    AI_ONE_BYTE,
    AI_TWO_BYTES,
    BREAK,
)


class CborReader:
    """
    CBOR reader over an immutable byte buffer.

    Tracks the current offset so errors can report where decoding stopped.
    """

    def __init__(self, buf: builtins.bytes):
        """
        Initialize reader with byte buffer.

        Args:
            buf: Byte buffer to read from
        """
        self._buf = buf
        self._off = 0

    @property
    def offset(self) -> int:
        """Current read offset."""
        return self._off

    @property
    def eof(self) -> bool:
        """True once every byte has been consumed."""
        return self._off >= len(self._buf)

    def error(self, message: str, code: ErrorCode = ErrorCode.MALFORMED_CBOR) -> FormatError:
        """Build a FormatError annotated with the current offset."""
        return FormatError(message, code, details={"offset": self._off})

    def _require(self, n: int) -> None:
        if self._off + n > len(self._buf):
            raise FormatError(
                f"Unexpected end of input: need {n} bytes, {len(self._buf) - self._off} remaining",
                ErrorCode.TRUNCATED_INPUT,
                details={"offset": self._off, "needed": n},
            )

    def u8(self) -> int:
        """Read one raw byte."""
        self._require(1)
        val = self._buf[self._off]
        self._off += 1
        return val

    def peek(self) -> int:
        """Return the next byte without consuming it."""
        self._require(1)
        return self._buf[self._off]

    def bytes(self, n: int) -> builtins.bytes:
        """Read n raw bytes."""
        self._require(n)
        out = self._buf[self._off:self._off + n]
        self._off += n
        return builtins.bytes(out)

    def at_break(self) -> bool:
        """True if the next byte is the break code; raises on end of input."""
        return self.peek() == BREAK

    def head(self) -> Tuple[int, Optional[int]]:
        """
        Read an item head.

        Returns:
            (major type, argument); argument is None for indefinite length

        Raises:
            FormatError: On reserved additional-information values or truncation
        """
        start = self._off
        ib = self.u8()
        major = ib >> 5
        info = ib & 0x1F
        if info < AI_ONE_BYTE:
            return major, info
        if info == AI_ONE_BYTE:
            return major, self.u8()
        if info == AI_TWO_BYTES:
            return major, struct.unpack(">H", self.bytes(2))[0]
        if info == AI_FOUR_BYTES:
            return major, struct.unpack(">I", self.bytes(4))[0]
        if info == AI_EIGHT_BYTES:
            return major, struct.unpack(">Q", self.bytes(8))[0]
        if info == AI_INDEFINITE:
            return major, None
        raise FormatError(
            f"Reserved additional information value {info}",
            ErrorCode.MALFORMED_CBOR,
            details={"offset": start},
        )
