"""
Plutus Data Codec

Byte-exact CBOR encoding of PlutusData trees and the strict inverse decoder.

Encoding rules:
- Integers in the 64-bit range are direct major 0/1 items; larger
  magnitudes are tag 2 / tag 3 bignums over a big-endian byte string.
- Byte strings longer than 64 bytes are split into 64-byte chunks.
- Lists (and constructor fields) are indefinite-length when non-empty and
  the definite empty array 0x80 when empty.
- Maps are definite-length and keep construction order; keys are not sorted.
- Constr index 0-6 uses tags 121-127, index 7-127 uses tags 1280-1400, any
  other index uses tag 102 over [index, fields].

Both directions share one nesting limit: the root node sits at depth 0 and
every child of a List, Map or Constr sits one level below its parent. A tree
with nodes deeper than MAX_NESTING_DEPTH is refused by the encoder
(ValidationError) and by the decoder (FormatError), so anything that encodes
also decodes.
"""

from typing import List, Optional, Sequence, Tuple, Union

from ..data import Constr, PlutusBytes, PlutusData, PlutusInteger, PlutusList, PlutusMap
from ..runtime.errors import ErrorCode, FormatError, ValidationError
from .reader import CborReader
from .writer import (
    MT_ARRAY,
    MT_BYTES,
    MT_MAP,
    MT_NEGATIVE,
    MT_SIMPLE,
    MT_TAG,
    MT_TEXT,
    MT_UNSIGNED,
    UINT64_MAX,
    CborWriter,
)

TAG_POSITIVE_BIGNUM = 2
TAG_NEGATIVE_BIGNUM = 3
TAG_CONSTR_GENERAL = 102
TAG_CONSTR_COMPACT_BASE = 121
TAG_CONSTR_EXTENDED_BASE = 1280

COMPACT_INDEX_LIMIT = 7
EXTENDED_INDEX_LIMIT = 128

MAX_NESTING_DEPTH = 256


def constr_tag(index: int) -> Optional[int]:
    """
    Compact tag for a constructor index.

    Returns:
        121-127 for index 0-6, 1280-1400 for index 7-127, None otherwise
    """
    if 0 <= index < COMPACT_INDEX_LIMIT:
        return TAG_CONSTR_COMPACT_BASE + index
    if COMPACT_INDEX_LIMIT <= index < EXTENDED_INDEX_LIMIT:
        return TAG_CONSTR_EXTENDED_BASE + (index - COMPACT_INDEX_LIMIT)
    return None


def constr_index(tag: int) -> Optional[int]:
    """Inverse of constr_tag; None for tags outside the two compact ranges."""
    if TAG_CONSTR_COMPACT_BASE <= tag < TAG_CONSTR_COMPACT_BASE + COMPACT_INDEX_LIMIT:
        return tag - TAG_CONSTR_COMPACT_BASE
    last_extended = TAG_CONSTR_EXTENDED_BASE + (EXTENDED_INDEX_LIMIT - COMPACT_INDEX_LIMIT)
    if TAG_CONSTR_EXTENDED_BASE <= tag < last_extended:
        return tag - TAG_CONSTR_EXTENDED_BASE + COMPACT_INDEX_LIMIT
    return None


# ---------------------------------------------------------------------------
# Encoder
# ---------------------------------------------------------------------------

def encode_data(data: PlutusData) -> bytes:
    """
    Encode a PlutusData tree to its canonical CBOR bytes.

    Args:
        data: Root node

    Returns:
        Encoded bytes

    Raises:
        ValidationError: If the tree contains a non-PlutusData node or nests
            deeper than MAX_NESTING_DEPTH
    """
    writer = CborWriter()
    _encode(writer, data, 0)
    return writer.to_bytes()


def data_to_hex(data: PlutusData) -> str:
    """Encode a PlutusData tree to lowercase hex."""
    return encode_data(data).hex()


def _encode(w: CborWriter, data: PlutusData, depth: int) -> None:
    if depth > MAX_NESTING_DEPTH:
        raise ValidationError(
            f"PlutusData nests deeper than {MAX_NESTING_DEPTH} levels",
            details={"max_depth": MAX_NESTING_DEPTH},
        )
    if isinstance(data, PlutusInteger):
        _encode_integer(w, data.value)
    elif isinstance(data, PlutusBytes):
        w.byte_string(data.value)
    elif isinstance(data, PlutusList):
        _encode_list(w, data.items, depth)
    elif isinstance(data, PlutusMap):
        w.map_header(len(data.entries))
        for key, value in data.entries:
            _encode(w, key, depth + 1)
            _encode(w, value, depth + 1)
    elif isinstance(data, Constr):
        _encode_constr(w, data, depth)
    else:
        raise ValidationError(
            f"Cannot encode {type(data).__name__} as PlutusData",
            details={"value": repr(data)},
        )


def _encode_integer(w: CborWriter, v: int) -> None:
    if 0 <= v <= UINT64_MAX:
        w.uint(v)
    elif -UINT64_MAX - 1 <= v < 0:
        w.nint(v)
    elif v > 0:
        w.tag(TAG_POSITIVE_BIGNUM)
        w.byte_string(_big_endian(v))
    else:
        w.tag(TAG_NEGATIVE_BIGNUM)
        w.byte_string(_big_endian(-1 - v))


def _big_endian(n: int) -> bytes:
    return n.to_bytes((n.bit_length() + 7) // 8, "big")


def _encode_list(w: CborWriter, items: Sequence[PlutusData], depth: int) -> None:
    if not items:
        w.array_header(0)
        return
    w.indefinite(MT_ARRAY)
    for item in items:
        _encode(w, item, depth + 1)
    w.break_marker()


def _encode_constr(w: CborWriter, data: Constr, depth: int) -> None:
    tag = constr_tag(data.index)
    if tag is not None:
        w.tag(tag)
        _encode_list(w, data.fields, depth)
        return
    w.tag(TAG_CONSTR_GENERAL)
    w.array_header(2)
    _encode_integer(w, data.index)
    w.array_header(len(data.fields))
    for field in data.fields:
        _encode(w, field, depth + 1)


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------

def decode_data(data: Union[bytes, bytearray, memoryview, str]) -> PlutusData:
    """
    Decode CBOR bytes (or their hex form) into a PlutusData tree.

    The whole input must be exactly one item.

    Args:
        data: Raw bytes or a hex string

    Returns:
        Decoded root node

    Raises:
        FormatError: On invalid hex, truncated or malformed input, unsupported
            major types or tags, excessive nesting, or trailing bytes
    """
    if isinstance(data, str):
        try:
            buf = bytes.fromhex(data)
        except ValueError as e:
            raise FormatError("Input is not valid hex", ErrorCode.INVALID_HEX, cause=e)
    elif isinstance(data, (bytes, bytearray, memoryview)):
        buf = bytes(data)
    else:
        raise FormatError(f"Cannot decode input of type {type(data).__name__}")

    reader = CborReader(buf)
    result = _decode(reader, 0)
    if not reader.eof:
        raise reader.error(f"Trailing bytes after data item ({len(buf) - reader.offset} bytes)")
    return result


def data_from_hex(text: str) -> PlutusData:
    """Decode a hex string into a PlutusData tree."""
    return decode_data(text)


def _decode(r: CborReader, depth: int) -> PlutusData:
    if depth > MAX_NESTING_DEPTH:
        raise r.error(f"Nesting deeper than {MAX_NESTING_DEPTH} levels")

    start = r.offset
    major, arg = r.head()

    if major == MT_UNSIGNED:
        if arg is None:
            raise _error_at(start, "Indefinite length on an integer")
        return PlutusInteger(arg)
    if major == MT_NEGATIVE:
        if arg is None:
            raise _error_at(start, "Indefinite length on an integer")
        return PlutusInteger(-1 - arg)
    if major == MT_BYTES:
        return PlutusBytes(_read_byte_string(r, arg))
    if major == MT_ARRAY:
        return PlutusList(_read_array(r, arg, depth))
    if major == MT_MAP:
        return PlutusMap(_read_map(r, arg, depth))
    if major == MT_TAG:
        if arg is None:
            raise _error_at(start, "Indefinite length on a tag")
        return _decode_tagged(r, arg, depth, start)
    if major == MT_TEXT:
        raise _error_at(start, "Text strings are not PlutusData", ErrorCode.MALFORMED_CBOR)
    if major == MT_SIMPLE and arg is None:
        raise _error_at(start, "Unexpected break marker")
    raise _error_at(start, "Simple and floating-point values are not PlutusData")


def _error_at(offset: int, message: str, code: ErrorCode = ErrorCode.MALFORMED_CBOR) -> FormatError:
    return FormatError(message, code, details={"offset": offset})


def _read_byte_string(r: CborReader, length: Optional[int]) -> bytes:
    if length is not None:
        return r.bytes(length)
    chunks: List[bytes] = []
    while not r.at_break():
        start = r.offset
        major, n = r.head()
        if major != MT_BYTES or n is None:
            raise _error_at(start, "Indefinite byte string chunk must be a definite byte string")
        chunks.append(r.bytes(n))
    r.u8()
    return b"".join(chunks)


def _read_array(r: CborReader, length: Optional[int], depth: int) -> List[PlutusData]:
    items: List[PlutusData] = []
    if length is None:
        while not r.at_break():
            items.append(_decode(r, depth + 1))
        r.u8()
    else:
        for _ in range(length):
            items.append(_decode(r, depth + 1))
    return items


def _read_map(r: CborReader, length: Optional[int], depth: int) -> List[Tuple[PlutusData, PlutusData]]:
    entries: List[Tuple[PlutusData, PlutusData]] = []
    if length is None:
        while not r.at_break():
            key = _decode(r, depth + 1)
            entries.append((key, _decode(r, depth + 1)))
        r.u8()
    else:
        for _ in range(length):
            key = _decode(r, depth + 1)
            entries.append((key, _decode(r, depth + 1)))
    return entries


def _array_head(r: CborReader, message: str) -> Optional[int]:
    start = r.offset
    major, length = r.head()
    if major != MT_ARRAY:
        raise _error_at(start, message)
    return length


def _read_general_constr(r: CborReader, depth: int, start: int) -> Constr:
    # 102([index, fields]); the fields count as direct children of the Constr
    length = _array_head(r, "Tag 102 must wrap an array")
    if length is not None and length != 2:
        raise _error_at(start, f"Tag 102 must wrap a 2-element array, got {length}")
    if length is None and r.at_break():
        raise _error_at(start, "Tag 102 must wrap a 2-element array, got 0")
    raw_index = _decode(r, depth + 1)
    if not isinstance(raw_index, PlutusInteger) or raw_index.value < 0:
        raise _error_at(start, "Tag 102 constructor index must be a non-negative integer")
    if length is None and r.at_break():
        raise _error_at(start, "Tag 102 must wrap a 2-element array, got 1")
    fields_length = _array_head(r, "Tag 102 constructor fields must be an array")
    fields = _read_array(r, fields_length, depth)
    if length is None:
        if not r.at_break():
            raise _error_at(start, "Tag 102 must wrap a 2-element array")
        r.u8()
    return Constr(raw_index.value, fields)


def _decode_tagged(r: CborReader, tag: int, depth: int, start: int) -> PlutusData:
    if tag in (TAG_POSITIVE_BIGNUM, TAG_NEGATIVE_BIGNUM):
        content_start = r.offset
        major, length = r.head()
        if major != MT_BYTES:
            raise _error_at(content_start, "Bignum tag must wrap a byte string")
        magnitude = int.from_bytes(_read_byte_string(r, length), "big")
        if tag == TAG_POSITIVE_BIGNUM:
            return PlutusInteger(magnitude)
        return PlutusInteger(-1 - magnitude)

    index = constr_index(tag)
    if index is not None:
        length = _array_head(r, "Constructor tag must wrap an array")
        return Constr(index, _read_array(r, length, depth))

    if tag == TAG_CONSTR_GENERAL:
        return _read_general_constr(r, depth, start)

    raise _error_at(start, f"Unsupported tag {tag}", ErrorCode.UNSUPPORTED_TAG)
