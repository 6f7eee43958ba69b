"""
Wallets for the Plutus client SDK.

``Wallet`` is the signing/address contract the SDK consumes. Two backends
are provided:

- KeyWallet: a local Ed25519 payment key; UTxOs are looked up through the
  provider and transaction bodies are signed in process.
- UtxoWallet: an externally managed wallet emulated from its address and,
  optionally, a pre-supplied UTxO set. It cannot sign or submit.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from .codec.hashes import hash_key, hash_transaction
from .provider import Provider
from .runtime.errors import ErrorCode, WalletError
from .types import UTxO, VKeyWitness
from .utils import LOVELACE, from_hex

logger = logging.getLogger(__name__)

COLLATERAL_MIN_LOVELACE = 5_000_000


class Wallet(ABC):
    """Signing and address source."""

    @abstractmethod
    def address(self) -> str:
        """Controlling address."""
        pass

    @abstractmethod
    def reward_address(self) -> Optional[str]:
        """Reward (stake) address, if any."""
        pass

    @abstractmethod
    def get_utxos(self) -> List[UTxO]:
        """Spendable UTxOs."""
        pass

    @abstractmethod
    def get_collateral(self) -> List[UTxO]:
        """UTxOs usable as script collateral."""
        pass

    @abstractmethod
    def sign_tx(self, tx_body: bytes) -> VKeyWitness:
        """
        Sign a serialized transaction body.

        Raises:
            WalletError: If the wallet cannot sign
        """
        pass

    @abstractmethod
    def submit_tx(self, tx: bytes) -> str:
        """Submit a signed transaction; returns its hash."""
        pass


def is_collateral_candidate(utxo: UTxO) -> bool:
    """Pure-coin output holding at least 5 000 000 of the base coin."""
    return list(utxo.assets) == [LOVELACE] and utxo.lovelace >= COLLATERAL_MIN_LOVELACE


class KeyWallet(Wallet):
    """
    Wallet backed by a local Ed25519 payment key.

    The address is supplied by the caller; it is expected to be the
    enterprise address of ``payment_key_hash``.
    """

    def __init__(self, private_key: Union[Ed25519PrivateKey, bytes, str], address: str,
                 provider: Provider):
        """
        Initialize wallet.

        Args:
            private_key: Ed25519 key, or its 32-byte seed as bytes or hex
            address: Address controlled by the key
            provider: Provider used for UTxO lookup and submission
        """
        if isinstance(private_key, str):
            private_key = from_hex(private_key)
        if isinstance(private_key, bytes):
            if len(private_key) != 32:
                raise WalletError(f"Ed25519 seed must be 32 bytes, got {len(private_key)}")
            private_key = Ed25519PrivateKey.from_private_bytes(private_key)
        if not isinstance(private_key, Ed25519PrivateKey):
            raise WalletError(f"Unsupported private key type: {type(private_key).__name__}")

        self._private_key = private_key
        self._address = address
        self.provider = provider

    @classmethod
    def generate(cls, address: str, provider: Provider) -> KeyWallet:
        """Create a wallet around a freshly generated key."""
        return cls(Ed25519PrivateKey.generate(), address, provider)

    @property
    def public_key(self) -> bytes:
        """Raw 32-byte public key."""
        return self._private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    @property
    def payment_key_hash(self) -> str:
        """28-byte key hash of the public key, as hex."""
        return hash_key(self.public_key).hex()

    def address(self) -> str:
        return self._address

    def reward_address(self) -> Optional[str]:
        return None

    def get_utxos(self) -> List[UTxO]:
        return self.provider.get_utxos(self._address)

    def get_collateral(self) -> List[UTxO]:
        return [utxo for utxo in self.get_utxos() if is_collateral_candidate(utxo)]

    def sign_tx(self, tx_body: bytes) -> VKeyWitness:
        """Sign the transaction id (blake2b-256 of the body)."""
        tx_hash = hash_transaction(tx_body)
        signature = self._private_key.sign(tx_hash)
        logger.debug(f"Signed transaction {tx_hash.hex()}")
        return VKeyWitness(vkey=self.public_key.hex(), signature=signature.hex())

    def submit_tx(self, tx: bytes) -> str:
        return self.provider.submit_tx(tx)


class UtxoWallet(Wallet):
    """
    Emulates an external wallet from its address, UTxOs and collateral.

    If no UTxOs are given they are fetched from the provider at the address.
    """

    def __init__(self, address: str, provider: Provider, utxos: Optional[List[UTxO]] = None,
                 collateral: Optional[List[UTxO]] = None, reward_address: Optional[str] = None):
        self._address = address
        self.provider = provider
        self._utxos = list(utxos) if utxos is not None else None
        self._collateral = list(collateral) if collateral is not None else []
        self._reward_address = reward_address

    def address(self) -> str:
        return self._address

    def reward_address(self) -> Optional[str]:
        return self._reward_address

    def get_utxos(self) -> List[UTxO]:
        if self._utxos is not None:
            return list(self._utxos)
        return self.provider.get_utxos(self._address)

    def get_collateral(self) -> List[UTxO]:
        return list(self._collateral)

    def sign_tx(self, tx_body: bytes) -> VKeyWitness:
        raise WalletError("Wallet built from UTxOs cannot sign transactions",
                          ErrorCode.SIGNING_UNAVAILABLE)

    def submit_tx(self, tx: bytes) -> str:
        raise WalletError("Wallet built from UTxOs cannot submit transactions",
                          ErrorCode.SIGNING_UNAVAILABLE)


__all__ = ["Wallet", "KeyWallet", "UtxoWallet", "is_collateral_candidate", "COLLATERAL_MIN_LOVELACE"]
