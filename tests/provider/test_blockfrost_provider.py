#!/usr/bin/env python3

"""Unit tests for BlockfrostProvider with mocked HTTP calls"""

import json

import pytest
import requests
from unittest.mock import patch

from plutus_client.provider import BlockfrostProvider, ProviderConfig
from plutus_client.runtime.errors import (
    DatumNotFoundError,
    ErrorCode,
    ProviderError,
    SubmissionError,
)

TX_HASH = "0f" * 32
ADDRESS = "addr_test1vqprovidertestaddress"
POLICY = "ab" * 28


class MockResponse:
    """Mock response for testing"""

    def __init__(self, status_code=200, json_data=None, text="", raise_for_json=False):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text
        self._raise_for_json = raise_for_json

    def json(self):
        if self._raise_for_json:
            raise json.JSONDecodeError("Invalid JSON", "", 0)
        return self._json_data


def utxo_json(index=0, amount=None, **extra):
    entry = {
        "tx_hash": TX_HASH,
        "output_index": index,
        "address": ADDRESS,
        "amount": amount or [{"unit": "lovelace", "quantity": "2000000"}],
        "data_hash": None,
    }
    entry.update(extra)
    return entry


@pytest.fixture
def provider():
    """Provider with instant retries and small pages."""
    p = BlockfrostProvider(ProviderConfig(
        url="preprod",
        project_id="preprodTestProject",
        max_retries=2,
        retry_delay=0,
        page_size=2,
    ))
    yield p
    p.close()


class TestConfiguration:
    """Endpoint resolution and session setup."""

    def test_well_known_network(self, provider):
        assert provider.url == "https://cardano-preprod.blockfrost.io/api/v0"

    def test_custom_url(self):
        p = BlockfrostProvider(ProviderConfig(url="http://localhost:3000/", project_id="x"))
        assert p.url == "http://localhost:3000"

    def test_for_network(self):
        p = BlockfrostProvider.for_network("mainnet", "mainnetProject", timeout=5.0)
        assert p.url == BlockfrostProvider.ENDPOINTS["mainnet"]
        assert p.config.timeout == 5.0

    def test_project_id_header(self, provider):
        assert provider._session.headers["project_id"] == "preprodTestProject"


class TestQueries:
    """Read endpoints."""

    @patch('plutus_client.provider.requests.Session.request')
    def test_protocol_parameters(self, mock_request, provider):
        mock_request.return_value = MockResponse(json_data={
            "min_fee_a": 44, "min_fee_b": 155381, "max_tx_size": 16384,
            "max_val_size": "5000", "key_deposit": "2000000", "pool_deposit": "500000000",
            "price_mem": 0.0577, "price_step": 0.0000721, "coins_per_utxo_word": "34482",
        })

        params = provider.get_protocol_parameters()

        assert params.min_fee_a == 44
        assert params.max_val_size == 5000
        assert params.coins_per_utxo_word == 34482
        method, url = mock_request.call_args[0]
        assert method == "GET"
        assert url.endswith("/epochs/latest/parameters")

    @patch('plutus_client.provider.requests.Session.request')
    def test_protocol_parameters_per_byte_fallback(self, mock_request, provider):
        mock_request.return_value = MockResponse(json_data={
            "min_fee_a": 44, "min_fee_b": 155381, "max_tx_size": 16384,
            "max_val_size": 5000, "key_deposit": 2000000, "pool_deposit": 500000000,
            "price_mem": 0.0577, "price_step": 0.0000721,
            "coins_per_utxo_word": None, "coins_per_utxo_size": "4310",
        })
        assert provider.get_protocol_parameters().coins_per_utxo_word == 4310 * 8

    @patch('plutus_client.provider.requests.Session.request')
    def test_current_slot(self, mock_request, provider):
        mock_request.return_value = MockResponse(json_data={"slot": 123456})
        assert provider.get_current_slot() == 123456

    @patch('plutus_client.provider.requests.Session.request')
    def test_utxos_paginate(self, mock_request, provider):
        mock_request.side_effect = [
            MockResponse(json_data=[utxo_json(0), utxo_json(1)]),
            MockResponse(json_data=[utxo_json(2, amount=[
                {"unit": "lovelace", "quantity": "1500000"},
                {"unit": POLICY + "01", "quantity": "7"},
            ])]),
        ]

        utxos = provider.get_utxos(ADDRESS)

        assert [u.output_index for u in utxos] == [0, 1, 2]
        assert utxos[2].assets == {"lovelace": 1500000, POLICY + "01": 7}
        assert mock_request.call_count == 2
        assert mock_request.call_args_list[1][1]["params"] == {"page": 2, "count": 2}

    @patch('plutus_client.provider.requests.Session.request')
    def test_unknown_address_has_no_utxos(self, mock_request, provider):
        mock_request.return_value = MockResponse(status_code=404, json_data={"message": "not found"})
        assert provider.get_utxos(ADDRESS) == []

    @patch('plutus_client.provider.requests.Session.request')
    def test_utxos_with_unit_path(self, mock_request, provider):
        mock_request.return_value = MockResponse(json_data=[utxo_json(0, data_hash="cd" * 32)])

        utxos = provider.get_utxos_with_unit(ADDRESS, POLICY + "01")

        assert utxos[0].datum_hash == "cd" * 32
        assert mock_request.call_args[0][1].endswith(f"/addresses/{ADDRESS}/utxos/{POLICY}01")

    @patch('plutus_client.provider.requests.Session.request')
    def test_get_datum(self, mock_request, provider):
        mock_request.return_value = MockResponse(json_data={"cbor": "d87980"})
        assert provider.get_datum("cd" * 32) == "d87980"

    @patch('plutus_client.provider.requests.Session.request')
    def test_get_datum_missing(self, mock_request, provider):
        mock_request.return_value = MockResponse(status_code=404, json_data={"message": "not found"})
        with pytest.raises(DatumNotFoundError) as exc:
            provider.get_datum("cd" * 32)
        assert exc.value.code == ErrorCode.DATUM_NOT_FOUND


class TestSubmission:
    """Transaction submission and confirmation."""

    @patch('plutus_client.provider.requests.Session.request')
    def test_submit(self, mock_request, provider):
        mock_request.return_value = MockResponse(json_data=TX_HASH)

        assert provider.submit_tx(b"\x84\xa0") == TX_HASH

        method, url = mock_request.call_args[0]
        assert method == "POST"
        assert url.endswith("/tx/submit")
        assert mock_request.call_args[1]["data"] == b"\x84\xa0"
        assert mock_request.call_args[1]["headers"] == {"Content-Type": "application/cbor"}

    @patch('plutus_client.provider.requests.Session.request')
    def test_submit_rejected_is_not_retried(self, mock_request, provider):
        mock_request.return_value = MockResponse(status_code=400, json_data={
            "status_code": 400, "error": "Bad Request", "message": "ValueNotConservedUTxO",
        })

        with pytest.raises(SubmissionError) as exc:
            provider.submit_tx(b"\x84")

        assert "ValueNotConservedUTxO" in str(exc.value)
        assert mock_request.call_count == 1

    @patch('plutus_client.provider.time.sleep')
    @patch('plutus_client.provider.requests.Session.request')
    def test_await_tx_polls_until_found(self, mock_request, mock_sleep, provider):
        mock_request.side_effect = [
            MockResponse(status_code=404, json_data={}),
            MockResponse(status_code=404, json_data={}),
            MockResponse(json_data={"hash": TX_HASH}),
        ]

        assert provider.await_tx(TX_HASH, check_interval=0.5) is True
        assert mock_request.call_count == 3
        mock_sleep.assert_called_with(0.5)

    @patch('plutus_client.provider.requests.Session.request')
    def test_await_tx_times_out(self, mock_request, provider):
        mock_request.return_value = MockResponse(status_code=404, json_data={})
        assert provider.await_tx(TX_HASH, check_interval=0, timeout=0) is False


class TestRetries:
    """Transient failures are retried; client errors are not."""

    @patch('plutus_client.provider.requests.Session.request')
    def test_retry_on_server_error(self, mock_request, provider):
        mock_request.side_effect = [
            MockResponse(status_code=503, json_data={"message": "busy"}),
            MockResponse(json_data={"slot": 7}),
        ]
        assert provider.get_current_slot() == 7
        assert mock_request.call_count == 2

    @patch('plutus_client.provider.requests.Session.request')
    def test_retry_on_connection_error(self, mock_request, provider):
        mock_request.side_effect = [
            requests.ConnectionError("refused"),
            MockResponse(json_data={"slot": 8}),
        ]
        assert provider.get_current_slot() == 8

    @patch('plutus_client.provider.requests.Session.request')
    def test_retries_exhausted(self, mock_request, provider):
        mock_request.side_effect = requests.Timeout("slow")

        with pytest.raises(ProviderError) as exc:
            provider.get_current_slot()

        assert exc.value.code == ErrorCode.TIMEOUT
        assert mock_request.call_count == 3

    @patch('plutus_client.provider.requests.Session.request')
    def test_rate_limit_code(self, mock_request, provider):
        mock_request.return_value = MockResponse(status_code=429, json_data={"message": "slow down"})

        with pytest.raises(ProviderError) as exc:
            provider.get_current_slot()

        assert exc.value.code == ErrorCode.RATE_LIMITED
        assert mock_request.call_count == 3

    @patch('plutus_client.provider.requests.Session.request')
    def test_client_error_not_retried(self, mock_request, provider):
        mock_request.return_value = MockResponse(status_code=403, raise_for_json=True,
                                                 text="Invalid project token.")

        with pytest.raises(ProviderError) as exc:
            provider.get_current_slot()

        assert exc.value.code == ErrorCode.HTTP_ERROR
        assert exc.value.details["body"] == "Invalid project token."
        assert mock_request.call_count == 1
