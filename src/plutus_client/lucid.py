"""
Lucid facade.

Entry point tying a Provider, a selected Wallet and the Plutus data codec
together. Chain queries are delegated to the provider; datums are decoded
only from bytes already fetched from the ledger.
"""

from __future__ import annotations
import logging
from typing import List, Optional, Union

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from .codec.plutus_data import decode_data
from .data import PlutusData
from .provider import Provider
from .runtime.errors import ErrorCode, ValidationError, WalletError
from .types import Network, ProtocolParameters, UTxO
from .wallet import KeyWallet, UtxoWallet, Wallet

logger = logging.getLogger(__name__)


class Lucid:
    """
    Transaction-building context.

    Example:
        >>> lucid = Lucid(BlockfrostProvider.for_network("preprod", project_id)).initialize()
        >>> lucid.select_wallet_from_private_key(seed_hex, address)
        >>> datum = lucid.datum_of(lucid.utxos_at(script_address)[0])
    """

    def __init__(self, provider: Provider, network: Network = Network.MAINNET):
        """
        Initialize the context.

        Args:
            provider: Chain data provider
            network: Target network
        """
        self.provider = provider
        self.network = Network(network)
        self.protocol_parameters: Optional[ProtocolParameters] = None
        self._initialized_network: Optional[Network] = None
        self._wallet: Optional[Wallet] = None

    def initialize(self, network: Optional[Network] = None) -> Lucid:
        """
        Fetch and cache protocol parameters.

        Does nothing when already initialized for the same network.
        """
        if network is not None:
            network = Network(network)
        if self.protocol_parameters is not None and network in (None, self._initialized_network):
            return self
        if network is not None:
            self.network = network
        self.protocol_parameters = self.provider.get_protocol_parameters()
        self._initialized_network = self.network
        logger.info(f"Initialized for {self.network.value}")
        return self

    @property
    def wallet(self) -> Wallet:
        """The selected wallet."""
        if self._wallet is None:
            raise WalletError("No wallet selected", ErrorCode.NO_WALLET_SELECTED)
        return self._wallet

    # ==== Chain queries ====

    def current_slot(self) -> int:
        return self.provider.get_current_slot()

    def utxos_at(self, address: str) -> List[UTxO]:
        return self.provider.get_utxos(address)

    def utxos_at_with_unit(self, address: str, unit: str) -> List[UTxO]:
        return self.provider.get_utxos_with_unit(address, unit)

    def await_tx(self, tx_hash: str, check_interval: float = 3.0,
                 timeout: Optional[float] = None) -> bool:
        return self.provider.await_tx(tx_hash, check_interval, timeout)

    def datum_of(self, utxo: UTxO) -> PlutusData:
        """
        Decoded datum of a UTxO.

        An inline or previously fetched datum on the UTxO is used as is;
        otherwise the datum is fetched by hash and cached on the UTxO.

        Raises:
            ValidationError: If the UTxO carries neither a datum nor a datum hash
            DatumNotFoundError: If the provider has no datum for the hash
            FormatError: If the datum bytes are not valid Plutus data
        """
        if utxo.datum is None:
            if not utxo.datum_hash:
                raise ValidationError("This UTxO does not have a datum hash",
                                      details={"utxo": utxo.out_ref})
            utxo.datum = self.provider.get_datum(utxo.datum_hash)
        return decode_data(utxo.datum)

    # ==== Wallet selection ====

    def select_wallet(self, wallet: Wallet) -> Lucid:
        """Use an already constructed wallet."""
        self._wallet = wallet
        logger.debug(f"Selected {type(wallet).__name__} for {wallet.address()}")
        return self

    def select_wallet_from_private_key(self, private_key: Union[Ed25519PrivateKey, bytes, str],
                                       address: str) -> Lucid:
        """Select a wallet backed by a local Ed25519 payment key."""
        return self.select_wallet(KeyWallet(private_key, address, self.provider))

    def select_wallet_from_utxos(self, address: str, utxos: Optional[List[UTxO]] = None,
                                 collateral: Optional[List[UTxO]] = None,
                                 reward_address: Optional[str] = None) -> Lucid:
        """Select a read-only wallet emulated from an address and UTxO set."""
        return self.select_wallet(UtxoWallet(address, self.provider, utxos, collateral, reward_address))


__all__ = ["Lucid"]
