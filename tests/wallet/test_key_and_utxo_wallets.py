"""
Wallet backends: local Ed25519 key wallet and UTxO-emulated wallet.
"""

import hashlib

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

from plutus_client.runtime.errors import ErrorCode, WalletError
from plutus_client.wallet import (
    COLLATERAL_MIN_LOVELACE,
    KeyWallet,
    UtxoWallet,
    is_collateral_candidate,
)

SEED = bytes(range(32))
WALLET_ADDRESS = "addr_test1vqwalletaddress"
POLICY = "cd" * 28


class TestKeyWallet:
    """Local Ed25519 key wallet."""

    def test_seed_bytes_and_hex_give_same_key(self, provider):
        w1 = KeyWallet(SEED, WALLET_ADDRESS, provider)
        w2 = KeyWallet(SEED.hex(), WALLET_ADDRESS, provider)
        w3 = KeyWallet(Ed25519PrivateKey.from_private_bytes(SEED), WALLET_ADDRESS, provider)
        assert w1.public_key == w2.public_key == w3.public_key
        assert len(w1.public_key) == 32

    def test_payment_key_hash_is_28_bytes(self, provider):
        wallet = KeyWallet(SEED, WALLET_ADDRESS, provider)
        expected = hashlib.blake2b(wallet.public_key, digest_size=28).hexdigest()
        assert wallet.payment_key_hash == expected
        assert len(bytes.fromhex(wallet.payment_key_hash)) == 28

    def test_bad_seed_length(self, provider):
        with pytest.raises(WalletError):
            KeyWallet(b"\x01" * 31, WALLET_ADDRESS, provider)

    def test_unsupported_key_type(self, provider):
        with pytest.raises(WalletError):
            KeyWallet(12345, WALLET_ADDRESS, provider)

    def test_generate(self, provider):
        w1 = KeyWallet.generate(WALLET_ADDRESS, provider)
        w2 = KeyWallet.generate(WALLET_ADDRESS, provider)
        assert w1.public_key != w2.public_key

    def test_address_and_reward_address(self, provider):
        wallet = KeyWallet(SEED, WALLET_ADDRESS, provider)
        assert wallet.address() == WALLET_ADDRESS
        assert wallet.reward_address() is None

    def test_sign_tx_signs_body_hash(self, provider):
        wallet = KeyWallet(SEED, WALLET_ADDRESS, provider)
        body = bytes.fromhex("a400800180020003a0")

        witness = wallet.sign_tx(body)

        assert witness.vkey == wallet.public_key.hex()
        public_key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(witness.vkey))
        tx_hash = hashlib.blake2b(body, digest_size=32).digest()
        # raises InvalidSignature on mismatch
        public_key.verify(bytes.fromhex(witness.signature), tx_hash)

    def test_utxos_come_from_provider(self, provider, make_utxo):
        utxo = make_utxo({"lovelace": 1000000}, address=WALLET_ADDRESS)
        provider.utxos[WALLET_ADDRESS] = [utxo]
        wallet = KeyWallet(SEED, WALLET_ADDRESS, provider)
        assert wallet.get_utxos() == [utxo]

    def test_collateral_filter(self, provider, make_utxo):
        pure = make_utxo({"lovelace": 5000000}, address=WALLET_ADDRESS)
        small = make_utxo({"lovelace": 4999999}, address=WALLET_ADDRESS)
        with_token = make_utxo({"lovelace": 9000000, POLICY: 1}, address=WALLET_ADDRESS)
        provider.utxos[WALLET_ADDRESS] = [pure, small, with_token]

        wallet = KeyWallet(SEED, WALLET_ADDRESS, provider)

        assert wallet.get_collateral() == [pure]

    def test_submit_goes_through_provider(self, provider):
        wallet = KeyWallet(SEED, WALLET_ADDRESS, provider)
        assert wallet.submit_tx(b"\x84") == "ab" * 32
        assert provider.submitted == [b"\x84"]


class TestUtxoWallet:
    """Read-only wallet emulated from UTxOs."""

    def test_preset_utxos(self, provider, make_utxo):
        utxo = make_utxo({"lovelace": 1})
        wallet = UtxoWallet(WALLET_ADDRESS, provider, utxos=[utxo])
        assert wallet.get_utxos() == [utxo]
        assert "get_utxos" not in provider.calls

    def test_utxos_fetched_when_not_given(self, provider, make_utxo):
        utxo = make_utxo({"lovelace": 1}, address=WALLET_ADDRESS)
        provider.utxos[WALLET_ADDRESS] = [utxo]
        wallet = UtxoWallet(WALLET_ADDRESS, provider)
        assert wallet.get_utxos() == [utxo]
        assert provider.calls["get_utxos"] == 1

    def test_collateral_and_reward_address(self, provider, make_utxo):
        collateral = make_utxo({"lovelace": 5000000})
        wallet = UtxoWallet(WALLET_ADDRESS, provider, collateral=[collateral],
                            reward_address="stake_test1uqreward")
        assert wallet.get_collateral() == [collateral]
        assert wallet.reward_address() == "stake_test1uqreward"

    def test_cannot_sign_or_submit(self, provider):
        wallet = UtxoWallet(WALLET_ADDRESS, provider, utxos=[])
        with pytest.raises(WalletError) as exc:
            wallet.sign_tx(b"\xa0")
        assert exc.value.code == ErrorCode.SIGNING_UNAVAILABLE
        with pytest.raises(WalletError):
            wallet.submit_tx(b"\x84")
        assert provider.submitted == []


def test_collateral_candidate_threshold(make_utxo):
    assert is_collateral_candidate(make_utxo({"lovelace": COLLATERAL_MIN_LOVELACE}))
    assert not is_collateral_candidate(make_utxo({"lovelace": COLLATERAL_MIN_LOVELACE - 1}))
    assert not is_collateral_candidate(make_utxo({POLICY: 10 ** 9}))
