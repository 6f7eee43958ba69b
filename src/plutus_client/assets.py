"""
Asset/Value bridge.

Converts between the flat ``{unit: quantity}`` mapping application code works
with and the nested multi-asset Value consumed by transaction building:

    {"lovelace": 5000000, "<policy><name>": 8}
        <->
    Value(coin=5000000, multiasset={"<policy>": {"<name>": 8}})
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Dict, Mapping

from pydantic import BaseModel, Field, field_serializer, field_validator

from .runtime.errors import ErrorCode, ValidationError
from .utils import LOVELACE, MAX_ASSET_NAME_BYTES, POLICY_ID_HEX_LENGTH, from_unit, is_hex

Assets = Dict[str, int]


class Value(BaseModel):
    """
    Ledger value: base coin plus a multi-asset bundle.

    ``multiasset`` maps policy id hex -> asset name hex -> quantity. After
    validation it is held as read-only mappings, so a Value cannot be changed
    in place past its checks.
    """
    coin: int = Field(default=0, ge=0, description="Base coin amount")
    multiasset: Dict[str, Dict[str, int]] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @field_validator('multiasset')
    @classmethod
    def check_multiasset(cls, v: Dict[str, Dict[str, int]]) -> Mapping[str, Mapping[str, int]]:
        """Policy ids are 56 hex chars; asset names are hex of at most 32 bytes."""
        for policy_id, assets in v.items():
            if len(policy_id) != POLICY_ID_HEX_LENGTH or not is_hex(policy_id):
                raise ValueError(f"Invalid policy id: {policy_id!r}")
            for name, quantity in assets.items():
                if not is_hex(name) or len(name) > MAX_ASSET_NAME_BYTES * 2:
                    raise ValueError(f"Invalid asset name: {name!r}")
                if quantity < 0:
                    raise ValueError(f"Negative quantity for {policy_id}{name}")
        return MappingProxyType({
            policy_id: MappingProxyType(dict(assets)) for policy_id, assets in v.items()
        })

    @field_serializer('multiasset')
    def dump_multiasset(self, v: Mapping[str, Mapping[str, int]]) -> Dict[str, Dict[str, int]]:
        return {policy_id: dict(assets) for policy_id, assets in v.items()}

    def policy_count(self) -> int:
        """Number of policy groups in the multi-asset portion."""
        return len(self.multiasset)

    def quantity_of(self, unit: str) -> int:
        """Quantity held for a unit, zero when absent."""
        if unit == LOVELACE:
            return self.coin
        policy_id, name = from_unit(unit)
        return self.multiasset.get(policy_id, {}).get(name, 0)


def _check_quantity(unit: str, quantity: object) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(
            f"Quantity for {unit!r} must be an int",
            ErrorCode.INVALID_QUANTITY,
            details={"unit": unit, "quantity": repr(quantity)},
        )
    if quantity < 0:
        raise ValidationError(
            f"Quantity for {unit!r} is negative",
            ErrorCode.INVALID_QUANTITY,
            details={"unit": unit, "quantity": quantity},
        )
    return quantity


def assets_to_value(assets: Mapping[str, int]) -> Value:
    """
    Group a flat asset mapping into a nested Value.

    Units are grouped by their 28-byte policy prefix; zero quantities are
    dropped from the multi-asset portion. The base coin is always present and
    defaults to zero.

    Args:
        assets: Mapping of unit identifier to non-negative quantity

    Returns:
        Nested Value

    Raises:
        ValidationError: On malformed units or invalid quantities
    """
    coin = 0
    multiasset: Dict[str, Dict[str, int]] = {}
    for unit, quantity in assets.items():
        quantity = _check_quantity(unit, quantity)
        if unit == LOVELACE:
            coin = quantity
            continue
        policy_id, name = from_unit(unit)
        if quantity == 0:
            continue
        bundle = multiasset.setdefault(policy_id, {})
        bundle[name] = bundle.get(name, 0) + quantity
    return Value(coin=coin, multiasset=multiasset)


def value_to_assets(value: Value) -> Assets:
    """
    Flatten a nested Value into a unit -> quantity mapping.

    The base coin is always emitted under ``lovelace``; each non-zero asset is
    emitted under ``policy_id + asset_name``.
    """
    assets: Assets = {LOVELACE: value.coin}
    for policy_id, bundle in value.multiasset.items():
        for name, quantity in bundle.items():
            if quantity:
                assets[policy_id + name] = quantity
    return assets


__all__ = ["Assets", "Value", "assets_to_value", "value_to_assets"]
