"""
Transaction Execution Layer

- SolanaWallet: local ed25519 signer for swap transactions
- SolanaExecutor: broadcasts signed transactions and waits for confirmation
"""

from .solana_executor import (
    SolanaExecutor,
    SolanaExecutorError,
    SolanaRpcConfig,
    SolanaTransactionResult,
    SolanaTransactionStatus,
)
from .wallet import SolanaWallet, WalletError, decode_base58

__all__ = [
    "SolanaExecutor",
    "SolanaExecutorError",
    "SolanaRpcConfig",
    "SolanaTransactionResult",
    "SolanaTransactionStatus",
    "SolanaWallet",
    "WalletError",
    "decode_base58",
]
