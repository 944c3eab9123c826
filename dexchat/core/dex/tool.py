"""OKXDexTool turns agent input into OKX DEX calls and response envelopes."""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

import structlog

from ...config import Settings, settings as default_settings
from ...providers.base import DexAggregatorProvider
from ...types.envelope import ResponseEnvelope
from ..chain_types import is_solana_chain
from .constants import (
    OPERATION_EXECUTE_SWAP,
    OPERATION_GET_ALL_TOKENS,
    OPERATION_GET_LIQUIDITY,
    OPERATION_GET_QUOTE,
    OPERATION_GET_SUPPORTED_CHAINS,
    TOKEN_REGISTRY,
)
from .errors import (
    DexToolError,
    MissingOperationError,
    UnknownOperationError,
    UnrecognizedIntentError,
    UpstreamError,
)
from .intents import (
    ConfirmSwap,
    ExecuteSwap,
    GetQuote,
    Intent,
    IntentParser,
    ListChains,
    ListLiquidity,
    ListTokens,
)
from .models import PendingSession, QuoteResult, SwapRequest
from .normalizer import (
    chains_envelope,
    liquidity_envelope,
    parse_quote,
    quote_envelope,
    swap_envelope,
    tokens_envelope,
)
from .session import DEFAULT_CONVERSATION_ID, QuoteSessionStore
from .tokens import resolve_pair, to_base_units

QUOTE_READY_MESSAGE = "Quote obtained. Reply with 'confirm swap' to execute this transaction."


class OKXDexTool:
    """Conversational front-end for OKX DEX on Solana.

    Input is either a JSON object ``{"operation": ..., "params": {...}}`` or
    free-form text. Output is always a JSON envelope string; no exception
    escapes :meth:`run`.

    Natural-language quotes are parked in the session store and only executed
    after "confirm swap". Structured ``getQuote`` is stateless, and
    ``executeSwap`` (structured or "swap 1 sol to usdc") skips the gate.
    """

    name = "okx_dex_tool"
    description = (
        "Access OKX DEX for Solana operations like getting quotes, token information, "
        "and executing swaps. Input is either JSON {\"operation\": getQuote|getAllTokens|"
        "getLiquidity|getSupportedChains|executeSwap, \"params\": {...}} or plain text such as "
        "'quote for 0.5 sol to usdc' followed by 'confirm swap'."
    )

    def __init__(
        self,
        provider: DexAggregatorProvider,
        *,
        wallet_address: Optional[str] = None,
        sessions: Optional[QuoteSessionStore] = None,
        parser: Optional[IntentParser] = None,
        config: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = config or default_settings
        self._provider = provider
        self._logger = logger or logging.getLogger(__name__)
        self.chain_id = self._settings.dex_chain_id
        if not is_solana_chain(self.chain_id):
            self._logger.warning("Chain %s is not Solana; token table and explorer links assume Solana", self.chain_id)
        self.wallet_address = wallet_address or self._settings.solana_wallet_address
        self.sessions = sessions if sessions is not None else QuoteSessionStore(self._settings.quote_ttl_seconds)
        self.parser = parser or IntentParser()
        self._operations: Dict[str, Callable[[Any, str], Awaitable[ResponseEnvelope]]] = {
            OPERATION_GET_QUOTE: lambda params, _cid: self.handle_get_quote(params),
            OPERATION_GET_ALL_TOKENS: lambda _params, _cid: self.handle_get_all_tokens(),
            OPERATION_GET_LIQUIDITY: lambda _params, _cid: self.handle_get_liquidity(),
            OPERATION_GET_SUPPORTED_CHAINS: lambda _params, _cid: self.handle_get_supported_chains(),
            OPERATION_EXECUTE_SWAP: lambda params, _cid: self.handle_execute_swap(params),
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def run(self, raw_input: str, conversation_id: str = DEFAULT_CONVERSATION_ID) -> str:
        envelope = await self.respond(raw_input, conversation_id)
        return envelope.to_json()

    async def respond(self, raw_input: str, conversation_id: str = DEFAULT_CONVERSATION_ID) -> ResponseEnvelope:
        with structlog.contextvars.bound_contextvars(conversation_id=conversation_id):
            try:
                structured = self._parse_structured(raw_input)
                if structured is not None:
                    operation, params = structured
                    return await self.dispatch(operation, params, conversation_id)
                return await self.process_natural_language(raw_input, conversation_id)
            except Exception as exc:
                self._logger.exception("Unhandled error in %s", self.name)
                return ResponseEnvelope.error(str(exc) or "Unknown error occurred")

    def _parse_structured(self, raw_input: Any) -> Optional[Tuple[Any, Any]]:
        if not isinstance(raw_input, str):
            return None
        try:
            payload = json.loads(raw_input)
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None
        return payload.get("operation"), payload.get("params")

    async def dispatch(
        self,
        operation: Any,
        params: Optional[Mapping[str, Any]] = None,
        conversation_id: str = DEFAULT_CONVERSATION_ID,
    ) -> ResponseEnvelope:
        """Route a structured request by exact operation name."""
        if not operation:
            return self._error_envelope(MissingOperationError())
        handler = self._operations.get(operation) if isinstance(operation, str) else None
        if handler is None:
            return self._error_envelope(UnknownOperationError(operation))
        self._logger.info("Dispatching %s", operation)
        return await self._guard(handler(params, conversation_id))

    async def process_natural_language(
        self,
        text: str,
        conversation_id: str = DEFAULT_CONVERSATION_ID,
    ) -> ResponseEnvelope:
        intent = self.parser.parse(text if isinstance(text, str) else "")
        self._logger.info("Parsed intent %s", intent.kind)
        return await self._guard(self._handle_intent(intent, conversation_id))

    async def _handle_intent(self, intent: Intent, conversation_id: str) -> ResponseEnvelope:
        if isinstance(intent, ConfirmSwap):
            return await self.handle_confirm_swap(conversation_id)
        if isinstance(intent, ListTokens):
            return await self.handle_get_all_tokens()
        if isinstance(intent, ListLiquidity):
            return await self.handle_get_liquidity()
        if isinstance(intent, ListChains):
            return await self.handle_get_supported_chains()
        if isinstance(intent, ExecuteSwap):
            request = self._request_from_phrase(
                intent.amount,
                intent.from_token,
                intent.to_token,
                autoSlippage=True,
                maxAutoSlippageBps=self._settings.default_max_auto_slippage_bps,
            )
            return await self._execute_swap(request)
        if isinstance(intent, GetQuote):
            request = self._request_from_phrase(
                intent.amount,
                intent.from_token,
                intent.to_token,
                slippage=self._settings.natural_language_quote_slippage,
            )
            return await self.handle_get_quote_and_prep(request, conversation_id)
        raise UnrecognizedIntentError()

    def _request_from_phrase(self, amount: str, from_token: str, to_token: str, **extra: Any) -> SwapRequest:
        from_address, to_address = resolve_pair(from_token, to_token)
        return SwapRequest.from_params({
            "fromTokenAddress": from_address,
            "toTokenAddress": to_address,
            "amount": to_base_units(amount, from_token),
            **extra,
        })

    # ------------------------------------------------------------------
    # Error boundary
    # ------------------------------------------------------------------

    def _error_envelope(self, error: DexToolError) -> ResponseEnvelope:
        self._logger.info("Returning %s error: %s", error.category.value, error.message)
        return ResponseEnvelope.error(error.message, details=error.details)

    async def _guard(self, pending: Awaitable[ResponseEnvelope]) -> ResponseEnvelope:
        try:
            return await pending
        except DexToolError as exc:
            return self._error_envelope(exc)

    async def _call_upstream(
        self,
        fallback: str,
        call: Callable[[], Awaitable[Any]],
        *,
        log_level: int = logging.WARNING,
    ) -> Any:
        """Await an upstream call, converting any failure into UpstreamError."""
        try:
            return await call()
        except DexToolError:
            raise
        except Exception as exc:
            self._logger.log(log_level, "%s: %s", fallback, exc, exc_info=log_level >= logging.ERROR)
            message = getattr(exc, "message", None) or str(exc) or fallback
            details = getattr(exc, "details", None)
            if details is None:
                response = getattr(exc, "response", None)
                details = getattr(response, "text", None) if response is not None else None
            raise UpstreamError(message, details=details) from exc

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _quote(self, request: SwapRequest, slippage: Optional[str]) -> Tuple[Dict[str, Any], QuoteResult]:
        response = await self._call_upstream(
            "Failed to get quote",
            lambda: self._provider.get_quote(
                self.chain_id,
                request.from_token_address,
                request.to_token_address,
                request.amount,
                slippage,
            ),
        )
        return response, parse_quote(response)

    async def handle_get_quote(self, params: Optional[Mapping[str, Any]]) -> ResponseEnvelope:
        request = SwapRequest.from_params(params)
        response, result = await self._quote(request, request.slippage or self._settings.default_quote_slippage)
        return quote_envelope(response, result)

    async def handle_get_quote_and_prep(self, request: SwapRequest, conversation_id: str) -> ResponseEnvelope:
        response, result = await self._quote(request, request.slippage)
        await self.sessions.put(
            conversation_id,
            PendingSession(params=request, result=result, raw_quote=response),
        )
        return ResponseEnvelope(
            status="quote_ready",
            message=QUOTE_READY_MESSAGE,
            summary=result.to_summary(),
            data=response,
        )

    async def handle_confirm_swap(self, conversation_id: str) -> ResponseEnvelope:
        session = await self.sessions.require(conversation_id)
        envelope = await self._execute_swap(session.params)
        await self.sessions.discard(conversation_id, session)
        return envelope

    async def handle_execute_swap(self, params: Optional[Mapping[str, Any]]) -> ResponseEnvelope:
        return await self._execute_swap(SwapRequest.from_params(params))

    async def _execute_swap(self, request: SwapRequest) -> ResponseEnvelope:
        auto_slippage = True if request.auto_slippage is None else request.auto_slippage
        max_auto_slippage = request.max_auto_slippage_bps or self._settings.default_max_auto_slippage_bps
        slippage = request.slippage or self._settings.default_swap_slippage

        if not self.wallet_address:
            raise UpstreamError("No wallet address configured; cannot execute swaps.")

        # Quote first so the summary can report symbols and amounts.
        _, quote = await self._quote(request, None if auto_slippage else slippage)

        swap_result = await self._call_upstream(
            "Failed to execute swap",
            lambda: self._provider.execute_swap(
                self.chain_id,
                request.from_token_address,
                request.to_token_address,
                request.amount,
                slippage,
                auto_slippage,
                max_auto_slippage,
                self.wallet_address,
            ),
            log_level=logging.ERROR,
        )
        if not isinstance(swap_result, Mapping):
            raise UpstreamError("Malformed swap response from OKX DEX", details=swap_result)
        self._logger.info(
            "Executed swap %s %s -> %s",
            request.amount, quote.from_token.symbol, quote.to_token.symbol,
        )
        return swap_envelope(swap_result, quote, explorer_url=self._settings.explorer_url)

    async def handle_get_all_tokens(self) -> ResponseEnvelope:
        response = await self._call_upstream(
            "Failed to get tokens",
            lambda: self._provider.get_tokens(self.chain_id),
        )
        return tokens_envelope(response)

    async def handle_get_liquidity(self) -> ResponseEnvelope:
        response = await self._call_upstream(
            "Failed to get liquidity",
            lambda: self._provider.get_liquidity(self.chain_id),
        )
        return liquidity_envelope(response)

    async def handle_get_supported_chains(self) -> ResponseEnvelope:
        response = await self._call_upstream(
            "Failed to get supported chains",
            lambda: self._provider.get_supported_chains(self.chain_id),
        )
        return chains_envelope(response)

    async def close(self) -> None:
        await self.sessions.clear()
        close = getattr(self._provider, "close", None)
        if close is not None:
            await close()

    @staticmethod
    def known_tokens() -> List[Dict[str, Any]]:
        return [dict(meta) for meta in TOKEN_REGISTRY.values()]
