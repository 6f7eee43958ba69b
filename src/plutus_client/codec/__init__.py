"""
Plutus Data Codec Module

Implements the canonical CBOR encoding/decoding of PlutusData that on-chain
validators and the ledger hash over.

Key components:
- writer.py: CBOR writer with shortest-form heads and chunked byte strings
- reader.py: bounded CBOR reader raising FormatError on truncation
- plutus_data.py: PlutusData encoder and strict decoder
- hashes.py: blake2b datum, transaction and key hashes
"""

from .hashes import blake2b_224, blake2b_256, hash_data, hash_key, hash_transaction
from .plutus_data import (
    constr_index,
    constr_tag,
    data_from_hex,
    data_to_hex,
    decode_data,
    encode_data,
)
from .reader import CborReader
from .writer import CborWriter

__all__ = [
    "CborReader",
    "CborWriter",
    "encode_data",
    "decode_data",
    "data_to_hex",
    "data_from_hex",
    "constr_tag",
    "constr_index",
    "blake2b_224",
    "blake2b_256",
    "hash_data",
    "hash_key",
    "hash_transaction",
]
