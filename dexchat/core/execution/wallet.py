"""
Solana wallet signer.

Holds the swap keypair and signs the fee payer slot of serialized
transactions. The DEX tool never touches this object; only the provider that
submits swaps does.
"""

from __future__ import annotations

import base58
from solders.keypair import Keypair
from solders.message import to_bytes_versioned
from solders.transaction import VersionedTransaction


class WalletError(Exception):
    """Invalid key material or transaction bytes."""
    pass


def decode_base58(value: str) -> bytes:
    try:
        return base58.b58decode(value.strip())
    except ValueError as exc:
        raise WalletError(f"Invalid base58 data: {exc}") from exc


class SolanaWallet:
    """Signing wallet built from a base58 secret (64-byte keypair or 32-byte seed)."""

    def __init__(self, keypair: Keypair) -> None:
        self._keypair = keypair
        self.address = str(keypair.pubkey())

    @classmethod
    def from_secret(cls, secret: str) -> "SolanaWallet":
        raw = decode_base58(secret)
        try:
            if len(raw) == 32:
                keypair = Keypair.from_seed(raw)
            elif len(raw) == 64:
                keypair = Keypair.from_bytes(raw)
            else:
                raise WalletError("Solana secret key must decode to 32 or 64 bytes")
        except ValueError as exc:
            raise WalletError("Invalid Solana secret key") from exc
        if len(raw) == 64 and bytes(keypair.pubkey()) != raw[32:]:
            raise WalletError("Solana secret key does not match its embedded public key")
        return cls(keypair)

    def sign_transaction(self, transaction: bytes) -> bytes:
        """Sign a serialized (legacy or v0) transaction as its fee payer.

        Only the first signature slot is replaced; signatures already present
        for other signers are kept.
        """
        try:
            tx = VersionedTransaction.from_bytes(transaction)
        except ValueError as exc:
            raise WalletError(f"Malformed transaction: {exc}") from exc

        signatures = list(tx.signatures)
        if not signatures:
            raise WalletError("Transaction has no signature slots")
        account_keys = tx.message.account_keys
        if not account_keys or account_keys[0] != self._keypair.pubkey():
            raise WalletError("Transaction fee payer is not this wallet")

        signatures[0] = self._keypair.sign_message(to_bytes_versioned(tx.message))
        return bytes(VersionedTransaction.populate(tx.message, signatures))
