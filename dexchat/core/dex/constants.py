"""Constants and token metadata for the OKX DEX tool."""

from __future__ import annotations

from typing import Dict, Tuple

from ..chain_types import SOLANA_CHAIN_INDEX, SOLANA_NATIVE_ADDRESS

OPERATION_GET_QUOTE = 'getQuote'
OPERATION_GET_ALL_TOKENS = 'getAllTokens'
OPERATION_GET_LIQUIDITY = 'getLiquidity'
OPERATION_GET_SUPPORTED_CHAINS = 'getSupportedChains'
OPERATION_EXECUTE_SWAP = 'executeSwap'

OPERATIONS: Tuple[str, ...] = (
    OPERATION_GET_QUOTE,
    OPERATION_GET_ALL_TOKENS,
    OPERATION_GET_LIQUIDITY,
    OPERATION_GET_SUPPORTED_CHAINS,
    OPERATION_EXECUTE_SWAP,
)

REQUIRED_SWAP_FIELDS: Tuple[str, ...] = ('fromTokenAddress', 'toTokenAddress', 'amount')

# Listing summaries keep this many tokens; the full list stays in ``data``.
TOKEN_SUMMARY_LIMIT = 10

NETWORK_NAME = 'Solana'

# Static token table keyed by lower-cased symbol. Solana mint addresses are
# Base58 and case-sensitive, so they are stored verbatim.
TOKEN_REGISTRY: Dict[str, Dict[str, object]] = {
    'sol': {
        'symbol': 'SOL',
        'address': SOLANA_NATIVE_ADDRESS,
        'decimals': 9,
        'is_native': True,
    },
    'usdc': {
        'symbol': 'USDC',
        'address': 'EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v',
        'decimals': 6,
        'is_native': False,
    },
    'usdt': {
        'symbol': 'USDT',
        'address': 'Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB',
        'decimals': 6,
        'is_native': False,
    },
}

__all__ = [
    'OPERATION_GET_QUOTE',
    'OPERATION_GET_ALL_TOKENS',
    'OPERATION_GET_LIQUIDITY',
    'OPERATION_GET_SUPPORTED_CHAINS',
    'OPERATION_EXECUTE_SWAP',
    'OPERATIONS',
    'REQUIRED_SWAP_FIELDS',
    'TOKEN_SUMMARY_LIMIT',
    'NETWORK_NAME',
    'TOKEN_REGISTRY',
    'SOLANA_CHAIN_INDEX',
]
