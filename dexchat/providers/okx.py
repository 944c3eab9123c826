"""Async client for the OKX DEX aggregator (Web3 API v5)."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json as jsonlib
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlencode

import httpx

from ..config import Settings, settings as default_settings
from ..core.execution.solana_executor import (
    SolanaExecutor,
    SolanaExecutorError,
    SolanaRpcConfig,
    SolanaTransactionStatus,
)
from ..core.execution.wallet import SolanaWallet, WalletError, decode_base58
from .base import DexAggregatorProvider

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v5/dex/aggregator"


class OKXDexError(Exception):
    """OKX rejected a request or returned an unusable payload."""

    def __init__(self, message: str, *, code: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def sign_request(secret_key: str, timestamp: str, method: str, request_path: str, body: str = "") -> str:
    """OKX signature: base64(HMAC-SHA256(timestamp + METHOD + path[?query] + body))."""
    prehash = f"{timestamp}{method.upper()}{request_path}{body}"
    digest = hmac.new(secret_key.encode("utf-8"), prehash.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


class OKXDexProvider(DexAggregatorProvider):
    """
    OKX DEX aggregator provider.

    Read endpoints (quote, tokens, liquidity, chains) only need API credentials.
    ``execute_swap`` also needs a wallet and a Solana executor: it fetches the
    swap transaction, signs it locally and broadcasts it over RPC.
    """

    name = "okx_dex"

    def __init__(
        self,
        *,
        config: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        wallet: Optional[SolanaWallet] = None,
        executor: Optional[SolanaExecutor] = None,
        timestamp_fn: Callable[[], str] = _utc_timestamp,
    ) -> None:
        self._settings = config or default_settings
        self.base_url = self._settings.okx_base_url.rstrip("/")
        self.timeout_s = self._settings.request_timeout_seconds
        self._client = client
        self._wallet = wallet
        self._executor = executor
        self._timestamp_fn = timestamp_fn

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout_s)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._executor is not None:
            await self._executor.close()

    def _wallet_or_raise(self) -> SolanaWallet:
        if self._wallet is None:
            if not self._settings.solana_private_key:
                raise OKXDexError("No Solana private key configured; cannot sign swaps")
            try:
                self._wallet = SolanaWallet.from_secret(self._settings.solana_private_key)
            except WalletError as exc:
                raise OKXDexError(f"Invalid Solana private key: {exc}") from exc
        return self._wallet

    def _executor_or_default(self) -> SolanaExecutor:
        if self._executor is None:
            self._executor = SolanaExecutor(SolanaRpcConfig(
                rpc_url=self._settings.solana_rpc_url,
                timeout_s=float(self.timeout_s),
            ))
        return self._executor

    def _headers(self, method: str, request_path: str, body: str = "") -> Dict[str, str]:
        timestamp = self._timestamp_fn()
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "OK-ACCESS-KEY": self._settings.okx_api_key,
            "OK-ACCESS-SIGN": sign_request(self._settings.okx_secret_key, timestamp, method, request_path, body),
            "OK-ACCESS-TIMESTAMP": timestamp,
            "OK-ACCESS-PASSPHRASE": self._settings.okx_api_passphrase,
        }
        if self._settings.okx_project_id:
            headers["OK-ACCESS-PROJECT"] = self._settings.okx_project_id
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        query = {key: value for key, value in (params or {}).items() if value is not None}
        request_path = f"{API_PREFIX}{path}"
        if query:
            request_path = f"{request_path}?{urlencode(query)}"
        body = jsonlib.dumps(json) if json is not None else ""

        client = await self._get_client()
        try:
            response = await client.request(
                method,
                request_path,
                content=body or None,
                headers=self._headers(method, request_path, body),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail: Any
            try:
                detail = exc.response.json()
            except ValueError:
                detail = exc.response.text
            logger.warning("OKX %s %s failed with HTTP %s", method, path, exc.response.status_code)
            raise OKXDexError(
                f"OKX DEX request failed with HTTP {exc.response.status_code}",
                code=str(exc.response.status_code),
                details=detail,
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise OKXDexError("OKX DEX returned a non-JSON response", details=response.text) from exc

        if not isinstance(payload, dict):
            raise OKXDexError("OKX DEX returned an unexpected payload", details=payload)
        code = str(payload.get("code", "0"))
        if code != "0":
            raise OKXDexError(payload.get("msg") or f"OKX DEX error code {code}", code=code, details=payload)
        return payload

    async def ready(self) -> bool:
        return self._settings.has_okx_credentials

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {"status": "unavailable", "reason": "OKX API credentials not configured"}
        try:
            chains = await self.get_supported_chains(self._settings.dex_chain_id)
            return {"status": "healthy", "chains": len(chains.get("data") or [])}
        except (OKXDexError, httpx.HTTPError) as exc:
            return {"status": "error", "reason": str(exc)}

    async def get_quote(
        self,
        chain_id: str,
        from_token_address: str,
        to_token_address: str,
        amount: str,
        slippage: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._request("GET", "/quote", params={
            "chainId": chain_id,
            "fromTokenAddress": from_token_address,
            "toTokenAddress": to_token_address,
            "amount": amount,
            "slippage": slippage,
        })

    async def get_swap_data(
        self,
        chain_id: str,
        from_token_address: str,
        to_token_address: str,
        amount: str,
        slippage: str,
        auto_slippage: bool,
        max_auto_slippage: str,
        user_wallet_address: str,
    ) -> Dict[str, Any]:
        return await self._request("GET", "/swap", params={
            "chainId": chain_id,
            "fromTokenAddress": from_token_address,
            "toTokenAddress": to_token_address,
            "amount": amount,
            "slippage": slippage,
            "autoSlippage": "true" if auto_slippage else "false",
            "maxAutoSlippage": max_auto_slippage if auto_slippage else None,
            "userWalletAddress": user_wallet_address,
        })

    async def execute_swap(
        self,
        chain_id: str,
        from_token_address: str,
        to_token_address: str,
        amount: str,
        slippage: str,
        auto_slippage: bool,
        max_auto_slippage: str,
        user_wallet_address: str,
    ) -> Dict[str, Any]:
        wallet = self._wallet_or_raise()
        if user_wallet_address != wallet.address:
            raise OKXDexError("Swap wallet address does not match the configured signing key")

        swap_data = await self.get_swap_data(
            chain_id,
            from_token_address,
            to_token_address,
            amount,
            slippage,
            auto_slippage,
            max_auto_slippage,
            user_wallet_address,
        )
        routes = swap_data.get("data") or []
        tx_payload = (routes[0].get("tx") or {}) if routes and isinstance(routes[0], dict) else {}
        encoded_tx = tx_payload.get("data")
        if not encoded_tx:
            raise OKXDexError("OKX DEX swap response has no transaction data", details=swap_data)

        try:
            signed = wallet.sign_transaction(decode_base58(encoded_tx))
        except WalletError as exc:
            raise OKXDexError(f"Could not sign swap transaction: {exc}", details=tx_payload) from exc

        executor = self._executor_or_default()
        try:
            sent = await executor.send_transaction(base64.b64encode(signed).decode("ascii"))
            confirmed = await executor.wait_for_confirmation(
                sent.signature,
                timeout_s=float(self._settings.confirm_timeout_seconds),
            )
        except SolanaExecutorError as exc:
            raise OKXDexError(f"Swap broadcast failed: {exc}") from exc

        if confirmed.status in (SolanaTransactionStatus.FAILED, SolanaTransactionStatus.EXPIRED):
            raise OKXDexError(
                f"Swap transaction {confirmed.status.value}: {confirmed.error}",
                details=confirmed.to_dict(),
            )

        logger.info("Swap %s %s", confirmed.signature, confirmed.status.value)
        return {
            "success": True,
            "transactionId": confirmed.signature,
            "explorerUrl": self._settings.explorer_url(confirmed.signature),
            "details": {
                "status": confirmed.status.value,
                "slot": confirmed.slot,
                "route": routes[0].get("routerResult") if isinstance(routes[0], dict) else None,
            },
        }

    async def get_tokens(self, chain_id: str) -> Dict[str, Any]:
        return await self._request("GET", "/all-tokens", params={"chainId": chain_id})

    async def get_liquidity(self, chain_id: str) -> Dict[str, Any]:
        return await self._request("GET", "/get-liquidity", params={"chainId": chain_id})

    async def get_supported_chains(self, chain_id: str) -> Dict[str, Any]:
        return await self._request("GET", "/supported/chain", params={"chainId": chain_id})
