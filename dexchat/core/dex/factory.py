"""Wiring for a tool backed by the real OKX provider."""

from __future__ import annotations

from typing import Optional

from ...config import Settings, settings as default_settings
from ...providers.okx import OKXDexProvider
from .session import QuoteSessionStore
from .tool import OKXDexTool


# Singleton instance
_default_tool: Optional[OKXDexTool] = None


def build_default_tool(config: Optional[Settings] = None) -> OKXDexTool:
    """Create a tool from settings; credentials and the wallet key stay inside the provider."""
    config = config or default_settings
    provider = OKXDexProvider(config=config)
    return OKXDexTool(
        provider,
        wallet_address=config.solana_wallet_address,
        sessions=QuoteSessionStore(config.quote_ttl_seconds),
        config=config,
    )


def get_default_tool() -> OKXDexTool:
    global _default_tool

    if _default_tool is None:
        _default_tool = build_default_tool()
    return _default_tool


async def close_default_tool() -> None:
    global _default_tool

    if _default_tool is not None:
        await _default_tool.close()
        _default_tool = None
