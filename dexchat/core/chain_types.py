"""
Chain identification for the single supported network.

OKX identifies chains by a string "chain index"; Solana is "501". The native
SOL placeholder address is the System Program id, which OKX accepts as the
token address for SOL.
"""

from __future__ import annotations

from typing import Union

ChainIndex = str

SOLANA_CHAIN_INDEX: ChainIndex = "501"

SOLANA_NATIVE_ADDRESS = "11111111111111111111111111111111"


def is_solana_chain(chain_index: Union[str, int, None]) -> bool:
    """Check if the chain index represents Solana."""
    if chain_index is None:
        return False
    return str(chain_index).strip().lower() in {SOLANA_CHAIN_INDEX, "solana", "sol"}
