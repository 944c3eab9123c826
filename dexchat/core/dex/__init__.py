"""
OKX DEX conversational tool.

Usage:
    from dexchat.core.dex import OKXDexTool, build_default_tool

    tool = build_default_tool()
    reply = await tool.run("quote for 0.5 sol to usdc", conversation_id="chat-1")
    reply = await tool.run("confirm swap", conversation_id="chat-1")
"""

from .errors import (
    DexToolError,
    ErrorCategory,
    InvalidAmountError,
    MissingOperationError,
    MissingParameterError,
    NoPendingQuoteError,
    QuoteExpiredError,
    UnknownOperationError,
    UnknownTokenError,
    UnrecognizedIntentError,
    UpstreamError,
)
from .intents import (
    ConfirmSwap,
    ExecuteSwap,
    GetQuote,
    IntentParser,
    ListChains,
    ListLiquidity,
    ListTokens,
    Unrecognized,
    parse_intent,
)
from .models import PendingSession, QuoteResult, SwapRequest, TokenInfo
from .session import DEFAULT_CONVERSATION_ID, QuoteSessionStore
from .tokens import resolve_token_address, to_base_units
from .tool import OKXDexTool
from .factory import build_default_tool, get_default_tool

__all__ = [
    "DexToolError",
    "ErrorCategory",
    "InvalidAmountError",
    "MissingOperationError",
    "MissingParameterError",
    "NoPendingQuoteError",
    "QuoteExpiredError",
    "UnknownOperationError",
    "UnknownTokenError",
    "UnrecognizedIntentError",
    "UpstreamError",
    "ConfirmSwap",
    "ExecuteSwap",
    "GetQuote",
    "IntentParser",
    "ListChains",
    "ListLiquidity",
    "ListTokens",
    "Unrecognized",
    "parse_intent",
    "PendingSession",
    "QuoteResult",
    "SwapRequest",
    "TokenInfo",
    "DEFAULT_CONVERSATION_ID",
    "QuoteSessionStore",
    "resolve_token_address",
    "to_base_units",
    "OKXDexTool",
    "build_default_tool",
    "get_default_tool",
]
