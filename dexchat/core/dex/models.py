"""Typed models used by the DEX tool."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import REQUIRED_SWAP_FIELDS
from .errors import InvalidAmountError, MissingParameterError


class SwapRequest(BaseModel):
    """Validated swap/quote parameters, addressed by the OKX camelCase wire names."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    from_token_address: str = Field(alias="fromTokenAddress", min_length=1)
    to_token_address: str = Field(alias="toTokenAddress", min_length=1)
    amount: str = Field(min_length=1, description="Integer amount in base units")
    slippage: Optional[str] = None
    auto_slippage: Optional[bool] = Field(default=None, alias="autoSlippage")
    max_auto_slippage_bps: Optional[str] = Field(default=None, alias="maxAutoSlippageBps")

    @field_validator("from_token_address", "to_token_address", "amount", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, bool) or value is None:
            return value
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("slippage", "max_auto_slippage_bps", mode="before")
    @classmethod
    def _optional_string(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]]) -> "SwapRequest":
        """Build from structured params, raising DexToolErrors instead of ValidationError."""
        params = params if isinstance(params, Mapping) else {}
        missing = [
            name for name in REQUIRED_SWAP_FIELDS
            if params.get(name) in (None, "") or (isinstance(params.get(name), str) and not params[name].strip())
        ]
        if missing:
            raise MissingParameterError(missing)
        try:
            request = cls.model_validate(dict(params))
        except ValidationError as exc:
            raise MissingParameterError([str(err["loc"][0]) for err in exc.errors() if err.get("loc")]) from exc
        if not re.fullmatch(r"[0-9]+", request.amount):
            raise InvalidAmountError(request.amount, "must be an integer amount in base units")
        return request

    def to_params(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class TokenInfo:
    symbol: str
    decimals: int

    def to_dict(self) -> Dict[str, Any]:
        return {"symbol": self.symbol, "decimals": self.decimals}


@dataclass(frozen=True)
class QuoteResult:
    """Human-readable view of an upstream quote."""

    from_token: TokenInfo
    to_token: TokenInfo
    from_amount: float
    to_amount: float
    exchange_rate: float
    price_impact: str = "Unknown"

    def to_summary(self) -> Dict[str, Any]:
        return {
            "fromToken": self.from_token.symbol,
            "toToken": self.to_token.symbol,
            "fromAmount": self.from_amount,
            "toAmount": self.to_amount,
            "exchangeRate": self.exchange_rate,
            "priceImpact": self.price_impact,
        }


@dataclass
class PendingSession:
    """Quote awaiting confirmation for one conversation."""

    params: SwapRequest
    result: QuoteResult
    raw_quote: Dict[str, Any] = field(default_factory=dict)
    created_at: float = field(default_factory=time.time)

    def age_seconds(self, now: Optional[float] = None) -> float:
        return (now if now is not None else time.time()) - self.created_at
