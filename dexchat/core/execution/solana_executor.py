"""
Solana RPC broadcaster for signed swap transactions.

OKX returns an unsigned swap transaction; the wallet signs it and this module
pushes it through ``sendTransaction`` and polls ``getSignatureStatuses`` until
it lands, fails or the deadline passes. Broadcasts are single-shot: a failed
RPC call surfaces as SolanaExecutorError and the caller decides what to do.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class SolanaTransactionStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"
    FAILED = "failed"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self is not SolanaTransactionStatus.PENDING


@dataclass
class SolanaTransactionResult:
    signature: str
    status: SolanaTransactionStatus
    slot: Optional[int] = None
    error: Optional[str] = None
    confirmations: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass
class SolanaRpcConfig:
    rpc_url: str
    commitment: str = "confirmed"
    timeout_s: float = 30.0


class SolanaExecutorError(Exception):
    """RPC transport failure or a JSON-RPC error object."""

    def __init__(self, message: str, *, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


def status_from_rpc(signature: str, value: Optional[Dict[str, Any]], commitment: str) -> SolanaTransactionResult:
    """Map one ``getSignatureStatuses`` entry onto a SolanaTransactionResult.

    ``None`` means the cluster has not seen the signature yet.
    """
    if value is None:
        return SolanaTransactionResult(signature, SolanaTransactionStatus.PENDING)

    slot = value.get("slot")
    if value.get("err") is not None:
        return SolanaTransactionResult(
            signature, SolanaTransactionStatus.FAILED, slot=slot, error=str(value["err"]),
        )

    reached = value.get("confirmationStatus")
    if reached == "finalized":
        status = SolanaTransactionStatus.FINALIZED
    elif reached == "confirmed" or (reached == "processed" and commitment == "processed"):
        status = SolanaTransactionStatus.CONFIRMED
    else:
        status = SolanaTransactionStatus.PENDING
    return SolanaTransactionResult(signature, status, slot=slot, confirmations=value.get("confirmations"))


class SolanaExecutor:
    """
    JSON-RPC client for broadcasting and tracking swap transactions.

    Usage:
        executor = SolanaExecutor(SolanaRpcConfig(rpc_url=settings.solana_rpc_url))
        sent = await executor.send_transaction(signed_tx_base64)
        landed = await executor.wait_for_confirmation(sent.signature, timeout_s=60)
    """

    def __init__(self, config: SolanaRpcConfig, client: Optional[httpx.AsyncClient] = None):
        self._config = config
        self._client = client
        self._ids = itertools.count(1)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._config.timeout_s)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def rpc(self, method: str, *params: Any) -> Any:
        """Call ``method`` and return the JSON-RPC ``result`` member."""
        client = await self._get_client()
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": list(params)}
        try:
            response = await client.post(self._config.rpc_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise SolanaExecutorError(
                f"Solana RPC {method} returned HTTP {exc.response.status_code}",
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise SolanaExecutorError(f"Solana RPC {method} failed: {exc}") from exc

        error = body.get("error") if isinstance(body, dict) else None
        if error:
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            code = error.get("code") if isinstance(error, dict) else None
            raise SolanaExecutorError(f"Solana RPC {method} error: {message}", code=code)
        return body.get("result") if isinstance(body, dict) else None

    async def send_transaction(self, signed_transaction: str, *, skip_preflight: bool = False) -> SolanaTransactionResult:
        """Broadcast a base64 signed transaction; the result is PENDING with its signature."""
        signature = await self.rpc(
            "sendTransaction",
            signed_transaction,
            {
                "encoding": "base64",
                "skipPreflight": skip_preflight,
                "preflightCommitment": self._config.commitment,
            },
        )
        if not signature:
            raise SolanaExecutorError("sendTransaction returned no signature")
        logger.info("Broadcast transaction %s", signature)
        return SolanaTransactionResult(signature, SolanaTransactionStatus.PENDING)

    async def get_signature_status(self, signature: str) -> SolanaTransactionResult:
        result = await self.rpc(
            "getSignatureStatuses",
            [signature],
            {"searchTransactionHistory": False},
        )
        values = (result or {}).get("value") or [None]
        return status_from_rpc(signature, values[0], self._config.commitment)

    async def wait_for_confirmation(
        self,
        signature: str,
        timeout_s: float = 60.0,
        poll_interval_s: float = 1.0,
        max_interval_s: float = 5.0,
    ) -> SolanaTransactionResult:
        """Poll until the transaction is confirmed, finalized or failed.

        The interval grows by half each round up to ``max_interval_s``. Past the
        deadline the result is EXPIRED; the transaction may still land later.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_s
        interval = poll_interval_s

        while True:
            current = await self.get_signature_status(signature)
            if current.status.is_terminal:
                return current
            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            await asyncio.sleep(min(interval, remaining))
            interval = min(interval * 1.5, max_interval_s)

        logger.warning("Transaction %s not confirmed within %.0fs", signature, timeout_s)
        return SolanaTransactionResult(
            signature,
            SolanaTransactionStatus.EXPIRED,
            error="Transaction confirmation timed out",
        )
