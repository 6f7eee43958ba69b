"""
Test bootstrap:
- In-memory Provider standing in for a chain data source
- UTxO factory with deterministic hashes
"""
from typing import Dict, List, Optional

import pytest

from plutus_client.provider import Provider
from plutus_client.runtime.errors import DatumNotFoundError
from plutus_client.types import ProtocolParameters, UTxO

ADDRESS = "addr_test1vz0000000000000000000000000000000000000000000000000000"
SCRIPT_ADDRESS = "addr_test1wz1111111111111111111111111111111111111111111111111111"


class InMemoryProvider(Provider):
    """Provider over dictionaries; records submissions and call counts."""

    def __init__(self):
        self.utxos: Dict[str, List[UTxO]] = {}
        self.datums: Dict[str, str] = {}
        self.confirmed: set = set()
        self.submitted: List[bytes] = []
        self.slot = 1000
        self.calls: Dict[str, int] = {}
        self.parameters = ProtocolParameters(
            min_fee_a=44,
            min_fee_b=155381,
            max_tx_size=16384,
            max_val_size=5000,
            key_deposit=2000000,
            pool_deposit=500000000,
            price_mem=0.0577,
            price_step=0.0000721,
            coins_per_utxo_word=34482,
        )

    def _count(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def get_protocol_parameters(self) -> ProtocolParameters:
        self._count("get_protocol_parameters")
        return self.parameters

    def get_current_slot(self) -> int:
        self._count("get_current_slot")
        return self.slot

    def get_utxos(self, address: str) -> List[UTxO]:
        self._count("get_utxos")
        return list(self.utxos.get(address, []))

    def get_utxos_with_unit(self, address: str, unit: str) -> List[UTxO]:
        self._count("get_utxos_with_unit")
        return [u for u in self.utxos.get(address, []) if u.assets.get(unit, 0) > 0]

    def get_datum(self, datum_hash: str) -> str:
        self._count("get_datum")
        if datum_hash not in self.datums:
            raise DatumNotFoundError(f"No datum found for hash {datum_hash}")
        return self.datums[datum_hash]

    def submit_tx(self, tx: bytes) -> str:
        self._count("submit_tx")
        self.submitted.append(tx)
        return "ab" * 32

    def await_tx(self, tx_hash: str, check_interval: float = 3.0,
                 timeout: Optional[float] = None) -> bool:
        self._count("await_tx")
        return tx_hash in self.confirmed


@pytest.fixture
def provider():
    """Provide an empty in-memory provider."""
    return InMemoryProvider()


@pytest.fixture
def make_utxo():
    """Build UTxOs with distinct deterministic tx hashes."""
    counter = {"n": 0}

    def _make(assets: Dict[str, int], address: str = ADDRESS, **kwargs) -> UTxO:
        counter["n"] += 1
        return UTxO(
            tx_hash=f"{counter['n']:064x}",
            output_index=0,
            address=address,
            assets=assets,
            **kwargs,
        )

    return _make
