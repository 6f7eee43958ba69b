"""
Hex and unit-identifier helpers shared by the codec boundary and the
asset bridge.
"""

from typing import Tuple

from .runtime.errors import ErrorCode, ValidationError

LOVELACE = "lovelace"
POLICY_ID_HEX_LENGTH = 56
MAX_ASSET_NAME_BYTES = 32


def to_hex(data: bytes) -> str:
    """Lowercase hex form of raw bytes."""
    return bytes(data).hex()


def from_hex(text: str) -> bytes:
    """
    Parse hex text into bytes.

    Raises:
        ValidationError: On odd-length or non-hex text
    """
    if len(text) % 2:
        raise ValidationError(f"Hex string has odd length ({len(text)})",
                              ErrorCode.INVALID_VALUE, details={"hex": text})
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise ValidationError("Invalid hex string", ErrorCode.INVALID_VALUE,
                              details={"hex": text}, cause=e)


def is_hex(text: str) -> bool:
    """True for even-length lowercase hex (the empty string included)."""
    if len(text) % 2:
        return False
    return all(c in "0123456789abcdef" for c in text)


def from_unit(unit: str) -> Tuple[str, str]:
    """
    Split a unit identifier into (policy id, asset name), both hex.

    Raises:
        ValidationError: If the unit is the base-currency key or malformed
    """
    if unit == LOVELACE:
        raise ValidationError("The base-currency key has no policy id",
                              ErrorCode.INVALID_UNIT, details={"unit": unit})
    if not isinstance(unit, str) or len(unit) < POLICY_ID_HEX_LENGTH or not is_hex(unit):
        raise ValidationError(
            "Unit must be a 56-char policy id followed by a hex asset name",
            ErrorCode.INVALID_UNIT,
            details={"unit": unit},
        )
    policy_id = unit[:POLICY_ID_HEX_LENGTH]
    asset_name = unit[POLICY_ID_HEX_LENGTH:]
    if len(asset_name) > MAX_ASSET_NAME_BYTES * 2:
        raise ValidationError(
            f"Asset name longer than {MAX_ASSET_NAME_BYTES} bytes",
            ErrorCode.INVALID_UNIT,
            details={"unit": unit},
        )
    return policy_id, asset_name


def to_unit(policy_id: str, asset_name: str = "") -> str:
    """
    Join a policy id and asset name into a unit identifier.

    Raises:
        ValidationError: If either part is malformed
    """
    unit = policy_id + asset_name
    if len(policy_id) != POLICY_ID_HEX_LENGTH:
        raise ValidationError("Policy id must be 56 hex chars", ErrorCode.INVALID_UNIT,
                              details={"policy_id": policy_id})
    from_unit(unit)
    return unit
