"""
Hash Functions

Blake2b digests used by the ledger: 256-bit for datum and transaction
hashes, 224-bit for key hashes and policy identifiers.
"""

import hashlib

from ..data import PlutusData
from .plutus_data import encode_data


def blake2b_256(input_bytes: bytes) -> bytes:
    """
    Compute a 32-byte blake2b digest.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        Digest bytes (32 bytes)
    """
    return hashlib.blake2b(input_bytes, digest_size=32).digest()


def blake2b_224(input_bytes: bytes) -> bytes:
    """
    Compute a 28-byte blake2b digest.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        Digest bytes (28 bytes)
    """
    return hashlib.blake2b(input_bytes, digest_size=28).digest()


def hash_data(data: PlutusData) -> str:
    """
    Datum hash of a PlutusData tree, as hex.

    The hash covers the exact encoded bytes, so any change in encoding
    changes the hash.
    """
    return blake2b_256(encode_data(data)).hex()


def hash_transaction(tx_body: bytes) -> bytes:
    """Transaction id: blake2b-256 over the serialized transaction body."""
    return blake2b_256(tx_body)


def hash_key(public_key: bytes) -> bytes:
    """Key hash: blake2b-224 over a raw public key."""
    return blake2b_224(public_key)
