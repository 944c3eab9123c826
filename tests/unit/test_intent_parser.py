"""
Tests for natural-language intent classification.

Covers:
- Each rule in isolation
- First-match-wins priority between rules
- Amount/token extraction for swap and quote phrasing
"""

import pytest

from dexchat.core.dex.intents import (
    DEFAULT_RULES,
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


class TestSingleRules:

    @pytest.mark.parametrize("text", [
        "Confirm swap",
        "please confirm the transaction",
        "CONFIRM SWAP NOW",
    ])
    def test_confirm(self, text):
        assert parse_intent(text) == ConfirmSwap()

    @pytest.mark.parametrize("text", ["list tokens", "what are the available tokens?", "Tokens"])
    def test_list_tokens(self, text):
        assert parse_intent(text) == ListTokens()

    @pytest.mark.parametrize("text", ["show liquidity", "which sources do you use"])
    def test_list_liquidity(self, text):
        assert parse_intent(text) == ListLiquidity()

    @pytest.mark.parametrize("text", ["supported chains", "which network is this"])
    def test_list_chains(self, text):
        assert parse_intent(text) == ListChains()

    @pytest.mark.parametrize("text,expected", [
        ("swap 1 sol to usdc", ExecuteSwap("1", "sol", "usdc")),
        ("Swap 0.5 SOL into USDC", ExecuteSwap("0.5", "sol", "usdc")),
        ("execute swap 2.5 usdc for sol", ExecuteSwap("2.5", "usdc", "sol")),
        ("swap for 3 usdc to sol", ExecuteSwap("3", "usdc", "sol")),
        ("send 10 usdc to sol", ExecuteSwap("10", "usdc", "sol")),
        ("transfer 1 sol into usdt", ExecuteSwap("1", "sol", "usdt")),
    ])
    def test_execute_swap(self, text, expected):
        assert parse_intent(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("quote for 1 sol to usdc", GetQuote("1", "sol", "usdc")),
        ("price 2 usdc into sol", GetQuote("2", "usdc", "sol")),
        ("Get me a quote for swapping 0.001 SOL to USDC", GetQuote("0.001", "sol", "usdc")),
        ("quote 5 usdc for sol", GetQuote("5", "usdc", "sol")),
    ])
    def test_get_quote(self, text, expected):
        assert parse_intent(text) == expected

    @pytest.mark.parametrize("text", [
        "hello",
        "what's the price of sol",
        "confirm",
        "swap sol to usdc",
        "exchange 3 usdc to sol",
        "",
    ])
    def test_unrecognized(self, text):
        assert isinstance(parse_intent(text), Unrecognized)


class TestPriority:

    def test_confirm_beats_swap_pattern(self):
        assert parse_intent("confirm swap 1 sol to usdc") == ConfirmSwap()

    def test_tokens_beat_swap_pattern(self):
        assert parse_intent("token swap 1 sol to usdc") == ListTokens()

    def test_liquidity_beats_chains(self):
        assert parse_intent("liquidity on this chain") == ListLiquidity()

    def test_execute_checked_before_quote(self):
        # Both patterns match; direct execution phrasing wins.
        assert parse_intent("quote then swap 1 sol to usdc") == ExecuteSwap("1", "sol", "usdc")

    def test_gerund_does_not_trigger_execute(self):
        assert isinstance(parse_intent("price for swapping 1 sol to usdc"), GetQuote)

    def test_rule_order_is_explicit(self):
        parser = IntentParser()
        assert parser.rule_names == (
            "confirm_swap",
            "list_tokens",
            "list_liquidity",
            "list_chains",
            "execute_swap",
            "get_quote",
        )

    def test_custom_rule_list(self):
        quote_first = IntentParser(rules=[DEFAULT_RULES[5], DEFAULT_RULES[4]])
        assert isinstance(quote_first.parse("quote then swap 1 sol to usdc"), ExecuteSwap)
        assert isinstance(quote_first.parse("quote 1 sol to usdc"), GetQuote)
        assert isinstance(quote_first.parse("list tokens"), Unrecognized)


class TestIntentShape:

    def test_kinds(self):
        assert ConfirmSwap().kind == "confirm_swap"
        assert GetQuote("1", "sol", "usdc").kind == "get_quote"
        assert Unrecognized().kind == "unrecognized"

    def test_unrecognized_keeps_normalized_text(self):
        intent = parse_intent("  Hello   THERE ")
        assert intent == Unrecognized(text="hello there")
