"""Tests for the local Solana signer."""

import base58
import pytest
from solders.keypair import Keypair
from solders.message import to_bytes_versioned
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from dexchat.core.execution.wallet import SolanaWallet, WalletError, decode_base58
from tests.okx_payloads import unsigned_swap_transaction


SEED = bytes(range(32))


@pytest.fixture
def keypair():
    return Keypair.from_seed(SEED)


@pytest.fixture
def wallet(keypair):
    return SolanaWallet(keypair)


class TestDecodeBase58:

    def test_decodes(self):
        assert decode_base58("Cn8eVZg") == b"hello"

    def test_invalid_character(self):
        with pytest.raises(WalletError):
            decode_base58("0OIl")


class TestSolanaWallet:

    def test_address_is_public_key(self, wallet, keypair):
        assert wallet.address == str(keypair.pubkey())

    def test_from_seed_secret(self, keypair):
        wallet = SolanaWallet.from_secret(base58.b58encode(SEED).decode())
        assert wallet.address == str(keypair.pubkey())

    def test_from_keypair_secret(self, keypair):
        wallet = SolanaWallet.from_secret(str(keypair))
        assert wallet.address == str(keypair.pubkey())

    def test_keypair_with_wrong_public_key(self):
        secret = base58.b58encode(SEED + bytes(Keypair().pubkey())).decode()
        with pytest.raises(WalletError):
            SolanaWallet.from_secret(secret)

    def test_wrong_length(self):
        with pytest.raises(WalletError, match="32 or 64 bytes"):
            SolanaWallet.from_secret(base58.b58encode(b"\x05" * 16).decode())

    def test_sign_transaction_fills_fee_payer_slot(self, wallet, keypair):
        unsigned = unsigned_swap_transaction(keypair.pubkey())

        signed = VersionedTransaction.from_bytes(wallet.sign_transaction(unsigned))

        assert signed.message == VersionedTransaction.from_bytes(unsigned).message
        assert signed.signatures[0] != Signature.default()
        assert signed.signatures[0].verify(keypair.pubkey(), to_bytes_versioned(signed.message))

    def test_sign_transaction_keeps_other_slots(self, wallet, keypair):
        co_signer = Keypair()
        unsigned = unsigned_swap_transaction(keypair.pubkey(), co_signer.pubkey())

        signed = VersionedTransaction.from_bytes(wallet.sign_transaction(unsigned))

        assert len(signed.signatures) == 2
        assert signed.signatures[1] == Signature.default()

    def test_signing_is_deterministic(self, wallet, keypair):
        unsigned = unsigned_swap_transaction(keypair.pubkey())
        assert wallet.sign_transaction(unsigned) == wallet.sign_transaction(unsigned)

    def test_rejects_other_fee_payer(self, wallet):
        unsigned = unsigned_swap_transaction(Keypair().pubkey())

        with pytest.raises(WalletError, match="fee payer"):
            wallet.sign_transaction(unsigned)

    @pytest.mark.parametrize("tx", [b"", b"\x01\x02\x03"])
    def test_rejects_malformed_transactions(self, wallet, tx):
        with pytest.raises(WalletError):
            wallet.sign_transaction(tx)
