"""Reshape OKX DEX aggregator responses into the tool's envelope."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

from ...types.envelope import ResponseEnvelope
from .constants import NETWORK_NAME, TOKEN_SUMMARY_LIMIT
from .errors import InvalidAmountError, UpstreamError
from .models import QuoteResult, TokenInfo
from .tokens import from_base_units


def _first(item: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    # OKX has renamed fields across API versions; take the first one present.
    for key in keys:
        value = item.get(key)
        if value not in (None, ""):
            return value
    return default


def _data_list(response: Any, what: str) -> List[Dict[str, Any]]:
    if isinstance(response, list):
        return [item for item in response if isinstance(item, dict)]
    if not isinstance(response, Mapping):
        raise UpstreamError(f"Malformed {what} response from OKX DEX", details=response)
    data = response.get("data")
    if not isinstance(data, list):
        raise UpstreamError(f"Malformed {what} response from OKX DEX", details=dict(response))
    return [item for item in data if isinstance(item, dict)]


def _token_info(raw: Any) -> TokenInfo:
    raw = raw if isinstance(raw, Mapping) else {}
    decimals = _first(raw, "decimal", "decimals")
    try:
        decimals_int = int(decimals)
    except (TypeError, ValueError):
        raise UpstreamError("OKX DEX quote is missing token decimals", details=dict(raw)) from None
    return TokenInfo(symbol=str(_first(raw, "tokenSymbol", "symbol", default="")), decimals=decimals_int)


def parse_quote(response: Any) -> QuoteResult:
    """Build a QuoteResult from the first route of an OKX quote response."""
    routes = _data_list(response, "quote")
    if not routes:
        raise UpstreamError("OKX DEX returned no quote data", details=response)
    quote = routes[0]

    from_token = _token_info(quote.get("fromToken"))
    to_token = _token_info(quote.get("toToken"))
    try:
        from_amount = float(from_base_units(quote.get("fromTokenAmount"), from_token.decimals))
        to_amount = float(from_base_units(quote.get("toTokenAmount"), to_token.decimals))
    except InvalidAmountError as exc:
        raise UpstreamError(f"OKX DEX quote has an unreadable amount: {exc.message}", details=quote) from exc

    exchange_rate = to_amount / from_amount if from_amount else 0.0
    price_impact = quote.get("priceImpactPercentage")
    return QuoteResult(
        from_token=from_token,
        to_token=to_token,
        from_amount=from_amount,
        to_amount=to_amount,
        exchange_rate=exchange_rate,
        price_impact=str(price_impact) if price_impact not in (None, "") else "Unknown",
    )


def quote_envelope(response: Any, result: Optional[QuoteResult] = None) -> ResponseEnvelope:
    result = result or parse_quote(response)
    return ResponseEnvelope.success(summary=result.to_summary(), data=response)


def swap_envelope(
    swap_result: Mapping[str, Any],
    quote: QuoteResult,
    *,
    explorer_url: Optional[Callable[[str], str]] = None,
) -> ResponseEnvelope:
    tx_id = _first(swap_result, "transactionId", "txId", "signature")
    if not tx_id:
        raise UpstreamError("OKX DEX swap returned no transaction id", details=dict(swap_result))
    fallback_url = explorer_url(str(tx_id)) if explorer_url else None
    summary = {
        "fromToken": quote.from_token.symbol,
        "toToken": quote.to_token.symbol,
        "fromAmount": quote.from_amount,
        "toAmount": quote.to_amount,
        "exchangeRate": quote.exchange_rate,
        "txId": tx_id,
        "explorerUrl": swap_result.get("explorerUrl") or fallback_url,
    }
    return ResponseEnvelope.success(summary=summary, data=dict(swap_result))


def project_token(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "symbol": _first(raw, "tokenSymbol", "symbol"),
        "name": _first(raw, "tokenName", "name"),
        "address": _first(raw, "tokenContractAddress", "address"),
        "decimals": _first(raw, "decimals", "decimal"),
    }


def project_liquidity(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {"name": raw.get("name"), "id": raw.get("id")}


def project_chain(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "name": _first(raw, "chainName", "name"),
        "id": _first(raw, "chainIndex", "chainId", "id"),
        "nativeCurrency": _first(raw, "nativeCurrency", "nativeTokenSymbol"),
    }


def tokens_envelope(response: Any, *, limit: int = TOKEN_SUMMARY_LIMIT) -> ResponseEnvelope:
    tokens = [project_token(item) for item in _data_list(response, "token list")]
    return ResponseEnvelope.success(
        summary=f"Found {len(tokens)} tokens on {NETWORK_NAME} via OKX DEX",
        tokens=tokens[:limit],
        data=response,
    )


def liquidity_envelope(response: Any) -> ResponseEnvelope:
    sources = [project_liquidity(item) for item in _data_list(response, "liquidity")]
    names = ", ".join(str(source["name"]) for source in sources)
    return ResponseEnvelope.success(
        summary=f"OKX DEX aggregates {len(sources)} liquidity sources on {NETWORK_NAME}: {names}",
        data=sources,
    )


def chains_envelope(response: Any) -> ResponseEnvelope:
    chains = [project_chain(item) for item in _data_list(response, "chain")]
    names = ", ".join(str(chain["name"]) for chain in chains)
    return ResponseEnvelope.success(
        summary=f"OKX DEX supports {len(chains)} chains, including: {names}",
        data=chains,
    )
