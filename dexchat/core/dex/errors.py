"""
Error Classification

Every failure the DEX tool can report is a DexToolError. Handlers raise them,
the tool boundary renders them as error envelopes; nothing is retried.
"""

from enum import Enum
from typing import Any, Iterable, Optional

from .constants import OPERATIONS


class ErrorCategory(str, Enum):
    """Categories of errors surfaced to the calling agent."""

    MALFORMED_REQUEST = "malformed_request"   # Missing/unknown operation
    MISSING_PARAMETER = "missing_parameter"   # Required swap field absent
    INVALID_AMOUNT = "invalid_amount"         # Amount is not a non-negative decimal
    UNKNOWN_TOKEN = "unknown_token"           # Symbol outside the token table
    UNRECOGNIZED = "unrecognized"             # Natural language matched no intent
    NO_PENDING_QUOTE = "no_pending_quote"     # Confirm without a prior quote
    QUOTE_EXPIRED = "quote_expired"           # Pending quote outlived its TTL
    UPSTREAM = "upstream"                     # OKX / RPC / wallet failure


class DexToolError(Exception):
    """Base class for errors rendered as ``{"status": "error"}`` envelopes."""

    category: ErrorCategory = ErrorCategory.UPSTREAM

    def __init__(
        self,
        message: str,
        *,
        category: Optional[ErrorCategory] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        if category is not None:
            self.category = category
        self.details = details


def _operations_text() -> str:
    return ", ".join(OPERATIONS)


class MissingOperationError(DexToolError):
    category = ErrorCategory.MALFORMED_REQUEST

    def __init__(self) -> None:
        super().__init__(
            f"Missing operation parameter. Available operations: {_operations_text()}."
        )


class UnknownOperationError(DexToolError):
    category = ErrorCategory.MALFORMED_REQUEST

    def __init__(self, operation: Any) -> None:
        super().__init__(
            f"Unknown operation: {operation}. Available operations: {_operations_text()}."
        )
        self.operation = operation


class MissingParameterError(DexToolError):
    category = ErrorCategory.MISSING_PARAMETER

    def __init__(self, missing: Iterable[str] = ()) -> None:
        super().__init__(
            "Required parameters missing. Please provide fromTokenAddress, toTokenAddress, and amount."
        )
        self.missing = list(missing)


class InvalidAmountError(DexToolError):
    category = ErrorCategory.INVALID_AMOUNT

    def __init__(self, amount: Any, reason: str = "must be a non-negative decimal number") -> None:
        super().__init__(f"Invalid amount '{amount}': {reason}.")
        self.amount = amount


class UnknownTokenError(DexToolError):
    category = ErrorCategory.UNKNOWN_TOKEN

    def __init__(self, symbols: Iterable[str], known: Iterable[str]) -> None:
        self.symbols = list(symbols)
        self.known = list(known)
        super().__init__(
            f"Could not find address for one of the tokens: {', '.join(self.symbols)}. "
            f"Available tokens: {', '.join(self.known)}"
        )


class UnrecognizedIntentError(DexToolError):
    category = ErrorCategory.UNRECOGNIZED

    def __init__(self) -> None:
        super().__init__(
            "I couldn't understand your request. You can ask about tokens, liquidity, chains, "
            "get a quote for swapping tokens, or execute a swap."
        )


class NoPendingQuoteError(DexToolError):
    category = ErrorCategory.NO_PENDING_QUOTE

    def __init__(self) -> None:
        super().__init__("No quote has been prepared. Please get a quote first.")


class QuoteExpiredError(DexToolError):
    category = ErrorCategory.QUOTE_EXPIRED

    def __init__(self, age_seconds: float) -> None:
        super().__init__("The prepared quote has expired. Please request a new quote.")
        self.age_seconds = age_seconds


class UpstreamError(DexToolError):
    """OKX, RPC or wallet failure; message and details come from the upstream error."""

    category = ErrorCategory.UPSTREAM
