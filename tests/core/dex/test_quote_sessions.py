"""Tests for the per-conversation pending quote store."""

import asyncio

import pytest

from dexchat.core.dex.errors import NoPendingQuoteError, QuoteExpiredError
from dexchat.core.dex.models import PendingSession, QuoteResult, SwapRequest, TokenInfo
from dexchat.core.dex.session import QuoteSessionStore
from tests.okx_payloads import SOL_ADDRESS, USDC_ADDRESS


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def make_session(amount="1000000"):
    request = SwapRequest.from_params({
        "fromTokenAddress": SOL_ADDRESS,
        "toTokenAddress": USDC_ADDRESS,
        "amount": amount,
    })
    result = QuoteResult(
        from_token=TokenInfo("SOL", 9),
        to_token=TokenInfo("USDC", 6),
        from_amount=0.001,
        to_amount=0.15,
        exchange_rate=150.0,
    )
    return PendingSession(params=request, result=result)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return QuoteSessionStore(ttl_seconds=300, clock=clock)


class TestQuoteSessionStore:

    @pytest.mark.asyncio
    async def test_require_without_quote(self, store):
        with pytest.raises(NoPendingQuoteError):
            await store.require("chat-1")

    @pytest.mark.asyncio
    async def test_put_stamps_creation_time(self, store, clock):
        session = make_session()
        await store.put("chat-1", session)

        assert session.created_at == 1000.0
        assert await store.require("chat-1") is session

    @pytest.mark.asyncio
    async def test_put_overwrites(self, store):
        await store.put("chat-1", make_session("1"))
        await store.put("chat-1", make_session("2"))

        assert (await store.require("chat-1")).params.amount == "2"
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_conversations_do_not_share_quotes(self, store):
        await store.put("alice", make_session())

        assert await store.get("bob") is None
        with pytest.raises(NoPendingQuoteError):
            await store.require("bob")

    @pytest.mark.asyncio
    async def test_quote_within_ttl(self, store, clock):
        await store.put("chat-1", make_session())
        clock.now += 300

        assert await store.require("chat-1") is not None

    @pytest.mark.asyncio
    async def test_expired_quote_is_dropped(self, store, clock):
        await store.put("chat-1", make_session())
        clock.now += 301

        with pytest.raises(QuoteExpiredError) as excinfo:
            await store.require("chat-1")

        assert excinfo.value.age_seconds == pytest.approx(301)
        assert len(store) == 0
        with pytest.raises(NoPendingQuoteError):
            await store.require("chat-1")

    @pytest.mark.asyncio
    async def test_get_hides_expired_quote(self, store, clock):
        await store.put("chat-1", make_session())
        clock.now += 1000

        assert await store.get("chat-1") is None

    @pytest.mark.asyncio
    async def test_zero_ttl_never_expires(self, clock):
        store = QuoteSessionStore(ttl_seconds=0, clock=clock)
        await store.put("chat-1", make_session())
        clock.now += 10 ** 6

        assert await store.require("chat-1") is not None

    @pytest.mark.asyncio
    async def test_discard_only_removes_matching_session(self, store):
        first = make_session("1")
        await store.put("chat-1", first)
        await store.put("chat-1", make_session("2"))

        assert await store.discard("chat-1", first) is False
        assert len(store) == 1
        assert await store.discard("chat-1") is True
        assert await store.discard("chat-1") is False

    @pytest.mark.asyncio
    async def test_clear(self, store):
        await store.put("a", make_session())
        await store.put("b", make_session())
        await store.clear()

        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_concurrent_writers(self, store):
        await asyncio.gather(*(store.put(f"chat-{i}", make_session(str(i))) for i in range(20)))

        assert len(store) == 20
        assert (await store.require("chat-7")).params.amount == "7"
