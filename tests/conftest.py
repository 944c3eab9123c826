"""Shared settings and a fake aggregator provider."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from dexchat.config import Settings
from tests.okx_payloads import (
    CHAINS_RESPONSE,
    LIQUIDITY_RESPONSE,
    SWAP_RESULT,
    WALLET_ADDRESS,
    make_quote_response,
    make_tokens_response,
)


@pytest.fixture
def config():
    return Settings(
        _env_file=None,
        okx_api_key="api-key",
        okx_secret_key="secret-key",
        okx_api_passphrase="passphrase",
        okx_project_id="project-id",
        solana_wallet_address=WALLET_ADDRESS,
        quote_ttl_seconds=300,
    )


@pytest.fixture
def provider():
    """Aggregator provider with canned OKX responses."""
    provider = MagicMock()
    provider.get_quote = AsyncMock(return_value=make_quote_response())
    provider.execute_swap = AsyncMock(return_value=dict(SWAP_RESULT))
    provider.get_tokens = AsyncMock(return_value=make_tokens_response(3))
    provider.get_liquidity = AsyncMock(return_value=LIQUIDITY_RESPONSE)
    provider.get_supported_chains = AsyncMock(return_value=CHAINS_RESPONSE)
    return provider
