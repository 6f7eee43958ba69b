"""
Typed chain data exchanged with providers and wallets.
"""

from __future__ import annotations
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from .utils import LOVELACE


class Network(str, Enum):
    """Target network."""
    MAINNET = "Mainnet"
    TESTNET = "Testnet"

    @property
    def network_id(self) -> int:
        """Network id as written into addresses."""
        return 1 if self is Network.MAINNET else 0


class ProtocolParameters(BaseModel):
    """Protocol parameters needed to configure transaction building."""
    min_fee_a: int = Field(ge=0)
    min_fee_b: int = Field(ge=0)
    max_tx_size: int = Field(ge=0)
    max_val_size: int = Field(ge=0)
    key_deposit: int = Field(ge=0)
    pool_deposit: int = Field(ge=0)
    price_mem: float = Field(ge=0)
    price_step: float = Field(ge=0)
    coins_per_utxo_word: int = Field(ge=0)


class UTxO(BaseModel):
    """
    Unspent transaction output.

    ``assets`` is the flat unit -> quantity mapping. ``datum`` holds the
    datum hex once known (inline, or fetched by ``datum_hash``).
    """
    tx_hash: str
    output_index: int = Field(ge=0)
    address: str
    assets: Dict[str, int] = Field(default_factory=dict)
    datum_hash: Optional[str] = None
    datum: Optional[str] = None

    @field_validator('tx_hash')
    @classmethod
    def check_tx_hash(cls, v: str) -> str:
        if len(v) != 64:
            raise ValueError("tx_hash must be 32 bytes of hex")
        bytes.fromhex(v)
        return v.lower()

    @property
    def lovelace(self) -> int:
        """Base coin held by this output."""
        return self.assets.get(LOVELACE, 0)

    @property
    def out_ref(self) -> str:
        """``tx_hash#index`` reference."""
        return f"{self.tx_hash}#{self.output_index}"


class VKeyWitness(BaseModel):
    """Verification-key witness produced by signing a transaction body."""
    vkey: str
    signature: str

    model_config = {"frozen": True}


__all__ = ["Network", "ProtocolParameters", "UTxO", "VKeyWitness"]
