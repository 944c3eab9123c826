"""
Tests for SolanaExecutor against a mocked JSON-RPC endpoint.
"""

import json

import httpx
import pytest

from dexchat.core.execution.solana_executor import (
    SolanaExecutor,
    SolanaExecutorError,
    SolanaRpcConfig,
    SolanaTransactionStatus,
)


RPC_URL = "https://rpc.test"


def make_executor(handler, **config):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SolanaExecutor(SolanaRpcConfig(rpc_url=RPC_URL, **config), client=client)


def rpc_result(request, result):
    body = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


def status_value(**status):
    return {"context": {"slot": 1}, "value": [status or None]}


class TestSendTransaction:

    @pytest.mark.asyncio
    async def test_sends_base64_with_preflight_commitment(self):
        seen = {}

        def handler(request):
            seen.update(json.loads(request.content))
            return rpc_result(request, "sig123")

        executor = make_executor(handler)
        result = await executor.send_transaction("AQID")

        assert result.signature == "sig123"
        assert result.status == SolanaTransactionStatus.PENDING
        assert seen["method"] == "sendTransaction"
        assert seen["params"][0] == "AQID"
        assert seen["params"][1] == {
            "encoding": "base64",
            "skipPreflight": False,
            "preflightCommitment": "confirmed",
        }

    @pytest.mark.asyncio
    async def test_rpc_error(self):
        def handler(request):
            return httpx.Response(200, json={
                "jsonrpc": "2.0",
                "id": 1,
                "error": {"code": -32002, "message": "Transaction simulation failed"},
            })

        executor = make_executor(handler)

        with pytest.raises(SolanaExecutorError, match="simulation failed"):
            await executor.send_transaction("AQID")

    @pytest.mark.asyncio
    async def test_http_error(self):
        executor = make_executor(lambda request: httpx.Response(503))

        with pytest.raises(SolanaExecutorError, match="503"):
            await executor.send_transaction("AQID")

    @pytest.mark.asyncio
    async def test_missing_signature(self):
        executor = make_executor(lambda request: rpc_result(request, None))

        with pytest.raises(SolanaExecutorError):
            await executor.send_transaction("AQID")


class TestTransactionStatus:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value,expected", [
        (status_value(), SolanaTransactionStatus.PENDING),
        (status_value(slot=5, confirmationStatus="processed", err=None), SolanaTransactionStatus.PENDING),
        (status_value(slot=5, confirmationStatus="confirmed", err=None), SolanaTransactionStatus.CONFIRMED),
        (status_value(slot=5, confirmationStatus="finalized", err=None), SolanaTransactionStatus.FINALIZED),
        (
            status_value(slot=5, confirmationStatus="confirmed", err={"InstructionError": [0, "Custom"]}),
            SolanaTransactionStatus.FAILED,
        ),
    ])
    async def test_maps_signature_status(self, value, expected):
        executor = make_executor(lambda request: rpc_result(request, value))

        result = await executor.get_signature_status("sig123")

        assert result.status == expected

    @pytest.mark.asyncio
    async def test_failure_keeps_error_text(self):
        value = status_value(slot=9, confirmationStatus="confirmed", err={"InstructionError": [0, "Custom"]})
        executor = make_executor(lambda request: rpc_result(request, value))

        result = await executor.get_signature_status("sig123")

        assert result.slot == 9
        assert "InstructionError" in result.error


class TestWaitForConfirmation:

    @pytest.mark.asyncio
    async def test_polls_until_confirmed(self):
        responses = [
            status_value(),
            status_value(slot=7, confirmationStatus="processed", err=None),
            status_value(slot=7, confirmationStatus="confirmed", err=None, confirmations=1),
        ]

        def handler(request):
            return rpc_result(request, responses.pop(0))

        executor = make_executor(handler)
        result = await executor.wait_for_confirmation("sig123", timeout_s=5, poll_interval_s=0)

        assert result.status == SolanaTransactionStatus.CONFIRMED
        assert result.slot == 7
        assert responses == []

    @pytest.mark.asyncio
    async def test_timeout_marks_expired(self):
        executor = make_executor(lambda request: rpc_result(request, status_value()))

        result = await executor.wait_for_confirmation("sig123", timeout_s=0)

        assert result.status == SolanaTransactionStatus.EXPIRED
        assert result.to_dict()["error"] == "Transaction confirmation timed out"

    @pytest.mark.asyncio
    async def test_close_releases_client(self):
        executor = make_executor(lambda request: rpc_result(request, "sig"))
        await executor.close()

        assert executor._client is None
