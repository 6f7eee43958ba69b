"""
Plutus Client Python SDK

Client library for building and submitting transactions against a UTxO
ledger with Plutus script data. The core is the byte-exact Plutus data codec
and the flat-assets/nested-value bridge; chain access and signing go through
the Provider and Wallet interfaces.
"""

from .data import (
    Constr,
    PlutusBytes,
    PlutusData,
    PlutusInteger,
    PlutusList,
    PlutusMap,
    to_plutus_data,
)
from .codec import (
    data_from_hex,
    data_to_hex,
    decode_data,
    encode_data,
    hash_data,
)
from .assets import Assets, Value, assets_to_value, value_to_assets
from .utils import LOVELACE, from_hex, from_unit, to_hex, to_unit
from .types import Network, ProtocolParameters, UTxO, VKeyWitness
from .provider import BlockfrostProvider, Provider, ProviderConfig
from .wallet import KeyWallet, UtxoWallet, Wallet
from .lucid import Lucid
from .runtime.errors import (
    DatumNotFoundError,
    EncodingError,
    ErrorCode,
    FormatError,
    PlutusClientError,
    ProviderError,
    SubmissionError,
    ValidationError,
    WalletError,
)

__version__ = "0.1.0"
__all__ = [
    # Value model
    "PlutusData",
    "PlutusInteger",
    "PlutusBytes",
    "PlutusList",
    "PlutusMap",
    "Constr",
    "to_plutus_data",

    # Codec
    "encode_data",
    "decode_data",
    "data_to_hex",
    "data_from_hex",
    "hash_data",

    # Asset/Value bridge
    "Assets",
    "Value",
    "assets_to_value",
    "value_to_assets",
    "LOVELACE",
    "from_hex",
    "to_hex",
    "from_unit",
    "to_unit",

    # Chain types and collaborators
    "Network",
    "ProtocolParameters",
    "UTxO",
    "VKeyWitness",
    "Provider",
    "ProviderConfig",
    "BlockfrostProvider",
    "Wallet",
    "KeyWallet",
    "UtxoWallet",
    "Lucid",

    # Errors
    "ErrorCode",
    "PlutusClientError",
    "EncodingError",
    "FormatError",
    "ValidationError",
    "ProviderError",
    "DatumNotFoundError",
    "SubmissionError",
    "WalletError",
]
