"""
Chain data providers.

``Provider`` is the contract the SDK consumes for chain state and
submission. ``BlockfrostProvider`` implements it over the Blockfrost HTTP
API with retries on transient failures.
"""

from __future__ import annotations
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .runtime.errors import (
    DatumNotFoundError,
    ErrorCode,
    ErrorHandler,
    ProviderError,
    SubmissionError,
)
from .types import ProtocolParameters, UTxO

logger = logging.getLogger(__name__)


class Provider(ABC):
    """
    Chain data source.

    Implementations perform I/O; errors they raise propagate to callers
    unchanged.
    """

    @abstractmethod
    def get_protocol_parameters(self) -> ProtocolParameters:
        """Current protocol parameters."""
        pass

    @abstractmethod
    def get_current_slot(self) -> int:
        """Slot of the latest block."""
        pass

    @abstractmethod
    def get_utxos(self, address: str) -> List[UTxO]:
        """All UTxOs at an address."""
        pass

    @abstractmethod
    def get_utxos_with_unit(self, address: str, unit: str) -> List[UTxO]:
        """UTxOs at an address holding the given unit."""
        pass

    @abstractmethod
    def get_datum(self, datum_hash: str) -> str:
        """
        Datum bytes (hex) for a datum hash.

        Raises:
            DatumNotFoundError: If the provider does not know the datum
        """
        pass

    @abstractmethod
    def submit_tx(self, tx: bytes) -> str:
        """Submit a signed transaction; returns its hash."""
        pass

    @abstractmethod
    def await_tx(self, tx_hash: str, check_interval: float = 3.0,
                 timeout: Optional[float] = None) -> bool:
        """Block until the transaction is on chain; False on timeout."""
        pass


@dataclass
class ProviderConfig:
    """Configuration for the Blockfrost provider."""

    url: str
    project_id: str
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0
    retry_backoff: float = 2.0
    debug: bool = False
    verify_ssl: bool = True
    user_agent: str = "plutus-client-python/0.1.0"
    page_size: int = 100


class BlockfrostProvider(Provider):
    """
    Provider backed by the Blockfrost REST API.

    Provides:
    - Automatic retries with exponential backoff on connection errors,
      timeouts, rate limiting and 5xx responses
    - Pagination for address UTxO listings
    - Typed errors for missing datums and rejected submissions
    """

    ENDPOINTS = {
        'mainnet': 'https://cardano-mainnet.blockfrost.io/api/v0',
        'preprod': 'https://cardano-preprod.blockfrost.io/api/v0',
        'preview': 'https://cardano-preview.blockfrost.io/api/v0',
    }

    def __init__(self, config: ProviderConfig):
        """
        Initialize the provider.

        Args:
            config: Provider configuration; ``url`` may be a well-known
                network name (mainnet, preprod, preview)
        """
        self.config = config
        self.url = self.ENDPOINTS.get(config.url.lower(), config.url).rstrip('/')

        self.logger = logger
        if self.config.debug:
            self.logger.setLevel(logging.DEBUG)

        self._session = requests.Session()
        self._session.headers.update({
            "project_id": config.project_id,
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        })

    @classmethod
    def for_network(cls, network: str, project_id: str, **kwargs) -> 'BlockfrostProvider':
        """Create a provider for a well-known network name."""
        return cls(ProviderConfig(url=network, project_id=project_id, **kwargs))

    def _request(self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None,
                 data: Optional[bytes] = None, headers: Optional[Dict[str, str]] = None,
                 allow_404: bool = False) -> Any:
        """
        Make an HTTP request with retry logic.

        Returns:
            Decoded JSON body, or None for a 404 when ``allow_404`` is set

        Raises:
            SubmissionError: On HTTP 400 from the submit endpoint
            ProviderError: On any other failure once retries are exhausted
        """
        url = f"{self.url}{path}"
        last_error: Optional[ProviderError] = None

        for attempt in range(self.config.max_retries + 1):
            if attempt > 0:
                delay = self.config.retry_delay * (self.config.retry_backoff ** (attempt - 1))
                self.logger.warning(f"Retrying {method} {path} in {delay:.2f}s (attempt {attempt + 1}): {last_error}")
                time.sleep(delay)

            self.logger.debug(f"Request: {method} {url} params={params}")
            try:
                response = self._session.request(
                    method,
                    url,
                    params=params,
                    data=data,
                    headers=headers,
                    timeout=self.config.timeout,
                    verify=self.config.verify_ssl,
                )
            except requests.Timeout as e:
                last_error = ProviderError(f"Request timed out: {method} {path}", ErrorCode.TIMEOUT, cause=e)
                continue
            except requests.ConnectionError as e:
                last_error = ProviderError(f"Connection failed: {method} {path}",
                                           ErrorCode.CONNECTION_FAILED, cause=e)
                continue

            self.logger.debug(f"Response: {response.status_code} {method} {path}")

            if response.status_code == 404 and allow_404:
                return None

            if response.status_code >= 400:
                error = self._error_for(response, path)
                if ErrorHandler.is_retryable(error):
                    last_error = error
                    continue
                raise error

            return response.json()

        raise last_error

    def _error_for(self, response: requests.Response, path: str) -> ProviderError:
        try:
            body = response.json()
        except ValueError:
            body = response.text
        details = {"status": response.status_code, "path": path, "body": body}
        message = body.get("message", str(body)) if isinstance(body, dict) else str(body)

        if response.status_code == 400 and path == "/tx/submit":
            return SubmissionError(f"Transaction rejected: {message}", details=details)
        if response.status_code == 429:
            return ProviderError(f"Rate limited: {message}", ErrorCode.RATE_LIMITED, details)
        if response.status_code >= 500:
            return ProviderError(f"Service unavailable: {message}", ErrorCode.SERVICE_UNAVAILABLE, details)
        if response.status_code == 404:
            return ProviderError(f"Not found: {path}", ErrorCode.NOT_FOUND, details)
        return ProviderError(f"HTTP {response.status_code}: {message}", ErrorCode.HTTP_ERROR, details)

    # ==== Provider methods ====

    def get_protocol_parameters(self) -> ProtocolParameters:
        """
        Fetch the parameters of the latest epoch.

        Older parameter sets report ``coins_per_utxo_word``; newer ones only
        ``coins_per_utxo_size`` (per byte), which is scaled to words.
        """
        result = self._request("GET", "/epochs/latest/parameters")
        coins_per_word = result.get("coins_per_utxo_word")
        if coins_per_word is None:
            coins_per_word = int(result.get("coins_per_utxo_size") or 0) * 8
        return ProtocolParameters(
            min_fee_a=result["min_fee_a"],
            min_fee_b=result["min_fee_b"],
            max_tx_size=result["max_tx_size"],
            max_val_size=result["max_val_size"],
            key_deposit=result["key_deposit"],
            pool_deposit=result["pool_deposit"],
            price_mem=result["price_mem"],
            price_step=result["price_step"],
            coins_per_utxo_word=coins_per_word,
        )

    def get_current_slot(self) -> int:
        """Slot of the latest block."""
        return int(self._request("GET", "/blocks/latest")["slot"])

    def get_utxos(self, address: str) -> List[UTxO]:
        """All UTxOs at an address; an unknown address has none."""
        return self._paginate_utxos(f"/addresses/{address}/utxos")

    def get_utxos_with_unit(self, address: str, unit: str) -> List[UTxO]:
        """UTxOs at an address holding ``unit``."""
        return self._paginate_utxos(f"/addresses/{address}/utxos/{unit}")

    def _paginate_utxos(self, path: str) -> List[UTxO]:
        utxos: List[UTxO] = []
        page = 1
        while True:
            batch = self._request("GET", path, params={"page": page, "count": self.config.page_size},
                                  allow_404=True)
            if not batch:
                break
            utxos.extend(self._utxo_from_json(entry) for entry in batch)
            if len(batch) < self.config.page_size:
                break
            page += 1
        return utxos

    @staticmethod
    def _utxo_from_json(entry: Dict[str, Any]) -> UTxO:
        assets: Dict[str, int] = {}
        for amount in entry.get("amount", []):
            assets[amount["unit"]] = int(amount["quantity"])
        return UTxO(
            tx_hash=entry["tx_hash"],
            output_index=entry["output_index"],
            address=entry["address"],
            assets=assets,
            datum_hash=entry.get("data_hash"),
            datum=entry.get("inline_datum"),
        )

    def get_datum(self, datum_hash: str) -> str:
        """Datum CBOR hex for ``datum_hash``."""
        result = self._request("GET", f"/scripts/datum/{datum_hash}/cbor", allow_404=True)
        if result is None:
            raise DatumNotFoundError(f"No datum found for hash {datum_hash}",
                                     details={"datum_hash": datum_hash})
        return result["cbor"]

    def submit_tx(self, tx: bytes) -> str:
        """Submit a signed transaction (raw CBOR); returns its hash."""
        result = self._request("POST", "/tx/submit", data=bytes(tx),
                               headers={"Content-Type": "application/cbor"})
        return result if isinstance(result, str) else str(result)

    def await_tx(self, tx_hash: str, check_interval: float = 3.0,
                 timeout: Optional[float] = None) -> bool:
        """Poll until ``tx_hash`` is found on chain or ``timeout`` elapses."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if self._request("GET", f"/txs/{tx_hash}", allow_404=True) is not None:
                self.logger.info(f"Transaction {tx_hash} confirmed")
                return True
            if deadline is not None and time.monotonic() >= deadline:
                self.logger.warning(f"Timed out waiting for transaction {tx_hash}")
                return False
            time.sleep(check_interval)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()


__all__ = ["Provider", "ProviderConfig", "BlockfrostProvider"]
