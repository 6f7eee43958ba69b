"""
Plutus Data value model.

A closed set of five immutable node types describing the structured values
attached to transactions as datums and redeemers:

- PlutusInteger: arbitrary-precision signed integer
- PlutusBytes: raw byte string (lowercase hex as its text form)
- PlutusList: ordered sequence of values
- PlutusMap: ordered (key, value) pairs; equality ignores order
- Constr: sum-type alternative with a non-negative index and ordered fields

Every node owns its children; trees are never cyclic and are not mutated once
built.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Tuple, Union

from .runtime.errors import ErrorCode, ValidationError


@dataclass(frozen=True)
class PlutusInteger:
    """Integer leaf."""

    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"PlutusInteger expects an int, got {type(self.value).__name__}",
                details={"value": repr(self.value)},
            )


@dataclass(frozen=True)
class PlutusBytes:
    """Byte string leaf."""

    value: bytes

    def __post_init__(self):
        if isinstance(self.value, bytearray):
            object.__setattr__(self, "value", bytes(self.value))
        elif not isinstance(self.value, bytes):
            raise ValidationError(
                f"PlutusBytes expects bytes, got {type(self.value).__name__}",
                details={"value": repr(self.value)},
            )

    @classmethod
    def from_hex(cls, text: str) -> PlutusBytes:
        """
        Build a byte string from its hex text form.

        Odd-length or non-hex text is rejected rather than truncated.

        Args:
            text: Hex string, either case

        Returns:
            PlutusBytes holding the decoded bytes

        Raises:
            ValidationError: If text is not an even-length hex string
        """
        if not isinstance(text, str):
            raise ValidationError("Hex literal must be a string", ErrorCode.INVALID_VALUE)
        if len(text) % 2:
            raise ValidationError(
                f"Hex literal has odd length ({len(text)})",
                ErrorCode.INVALID_VALUE,
                details={"hex": text},
            )
        try:
            return cls(bytes.fromhex(text))
        except ValueError as e:
            raise ValidationError("Invalid hex literal", ErrorCode.INVALID_VALUE,
                                  details={"hex": text}, cause=e)

    def hex(self) -> str:
        """Lowercase hex text form."""
        return self.value.hex()


@dataclass(frozen=True)
class PlutusList:
    """Ordered sequence of values."""

    items: Tuple[PlutusData, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "items", _freeze_values(self.items, "PlutusList item"))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]


@dataclass(frozen=True, eq=False)
class PlutusMap:
    """
    Key/value pairs in construction order.

    Keys may repeat. Two maps are equal when they hold the same multiset of
    pairs, whatever the order; encoding still follows construction order.
    """

    entries: Tuple[Tuple[PlutusData, PlutusData], ...] = ()

    def __post_init__(self):
        source = self.entries
        if isinstance(source, Mapping):
            source = source.items()
        frozen = []
        for pair in source:
            try:
                key, value = pair
            except (TypeError, ValueError) as e:
                raise ValidationError("PlutusMap entries must be (key, value) pairs",
                                      details={"entry": repr(pair)}, cause=e)
            _check_value(key, "PlutusMap key")
            _check_value(value, "PlutusMap value")
            frozen.append((key, value))
        object.__setattr__(self, "entries", tuple(frozen))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, PlutusMap):
            return NotImplemented
        if len(self.entries) != len(other.entries):
            return False
        return Counter(self.entries) == Counter(other.entries)

    def __hash__(self) -> int:
        return hash(frozenset(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> Tuple[PlutusData, ...]:
        return tuple(k for k, _ in self.entries)

    def values(self) -> Tuple[PlutusData, ...]:
        return tuple(v for _, v in self.entries)

    def items(self) -> Tuple[Tuple[PlutusData, PlutusData], ...]:
        return self.entries


@dataclass(frozen=True)
class Constr:
    """Sum-type alternative: a non-negative index and ordered fields."""

    index: int
    fields: Tuple[PlutusData, ...] = field(default=())

    def __post_init__(self):
        if isinstance(self.index, bool) or not isinstance(self.index, int) or self.index < 0:
            raise ValidationError(
                "Constr index must be a non-negative integer",
                details={"index": repr(self.index)},
            )
        object.__setattr__(self, "fields", _freeze_values(self.fields, "Constr field"))


PlutusData = Union[PlutusInteger, PlutusBytes, PlutusList, PlutusMap, Constr]

PLUTUS_DATA_TYPES = (PlutusInteger, PlutusBytes, PlutusList, PlutusMap, Constr)


def _check_value(value: Any, what: str) -> None:
    if not isinstance(value, PLUTUS_DATA_TYPES):
        raise ValidationError(
            f"{what} must be PlutusData, got {type(value).__name__}",
            details={"value": repr(value)},
        )


def _freeze_values(values: Iterable[Any], what: str) -> Tuple[PlutusData, ...]:
    if isinstance(values, (str, bytes, bytearray, Mapping)):
        raise ValidationError(f"{what}s must be given as a sequence of PlutusData")
    frozen = tuple(values)
    for value in frozen:
        _check_value(value, what)
    return frozen


def to_plutus_data(obj: Any) -> PlutusData:
    """
    Convert native Python values into a PlutusData tree.

    int -> PlutusInteger, bytes -> PlutusBytes, str -> PlutusBytes (strict hex),
    list/tuple -> PlutusList, dict -> PlutusMap. PlutusData nodes pass through
    unchanged.

    Raises:
        ValidationError: For values with no PlutusData counterpart
    """
    if isinstance(obj, PLUTUS_DATA_TYPES):
        return obj
    if isinstance(obj, bool):
        raise ValidationError("bool has no PlutusData representation; use Constr(0|1, [])")
    if isinstance(obj, int):
        return PlutusInteger(obj)
    if isinstance(obj, (bytes, bytearray)):
        return PlutusBytes(bytes(obj))
    if isinstance(obj, str):
        return PlutusBytes.from_hex(obj)
    if isinstance(obj, (list, tuple)):
        return PlutusList([to_plutus_data(item) for item in obj])
    if isinstance(obj, dict):
        return PlutusMap([(to_plutus_data(k), to_plutus_data(v)) for k, v in obj.items()])
    raise ValidationError(
        f"Cannot convert {type(obj).__name__} to PlutusData",
        details={"value": repr(obj)},
    )


__all__ = [
    "PlutusInteger",
    "PlutusBytes",
    "PlutusList",
    "PlutusMap",
    "Constr",
    "PlutusData",
    "PLUTUS_DATA_TYPES",
    "to_plutus_data",
]
