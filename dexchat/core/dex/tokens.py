"""Token symbol resolution and amount normalization for the static token table."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Any, Dict, List, Optional

from .constants import TOKEN_REGISTRY
from .errors import InvalidAmountError, UnknownTokenError


def known_symbols() -> List[str]:
    return list(TOKEN_REGISTRY.keys())


def resolve_token(symbol: Optional[str]) -> Optional[Dict[str, Any]]:
    """Return registry metadata for ``symbol`` (case-insensitive) or None."""
    if not symbol:
        return None
    return TOKEN_REGISTRY.get(symbol.strip().lower())


def resolve_token_address(symbol: Optional[str]) -> Optional[str]:
    meta = resolve_token(symbol)
    if meta is None:
        return None
    return str(meta['address'])


def resolve_pair(from_symbol: str, to_symbol: str) -> tuple[str, str]:
    """Resolve both sides of a swap, naming every unresolved symbol on failure."""
    from_address = resolve_token_address(from_symbol)
    to_address = resolve_token_address(to_symbol)
    if from_address is None or to_address is None:
        raise UnknownTokenError([from_symbol, to_symbol], known_symbols())
    return from_address, to_address


def token_decimals(symbol: str) -> int:
    meta = resolve_token(symbol)
    if meta is None:
        raise UnknownTokenError([symbol], known_symbols())
    return int(meta['decimals'])  # type: ignore[arg-type]


def parse_amount(raw: Any) -> Decimal:
    """Parse a human-entered amount, rejecting negatives and non-finite values."""
    if raw is None or isinstance(raw, bool):
        raise InvalidAmountError(raw)
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmountError(raw) from None
    if not value.is_finite() or value < 0:
        raise InvalidAmountError(raw)
    return value


def to_base_units(amount: Any, symbol: str) -> str:
    """Scale a human amount by the token's decimal count.

    Fractions of a base unit are truncated, so ``"0.0000000005"`` SOL becomes ``"0"``.
    """
    value = parse_amount(amount)
    decimals = token_decimals(symbol)
    try:
        scaled = (value * (Decimal(10) ** decimals)).quantize(Decimal('1'), rounding=ROUND_DOWN)
    except InvalidOperation:
        raise InvalidAmountError(amount, 'too large to convert to base units') from None
    return str(int(scaled))


def from_base_units(raw: Any, decimals: Any) -> Decimal:
    """Inverse of :func:`to_base_units` using upstream-supplied decimals."""
    try:
        exponent = int(decimals)
    except (TypeError, ValueError):
        raise InvalidAmountError(decimals, 'token decimals must be an integer') from None
    try:
        return Decimal(str(raw)) / (Decimal(10) ** exponent)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmountError(raw) from None
