"""
Natural-language intent parsing for the DEX tool.

Text is lower-cased and run through an ordered list of rules. The first rule
that returns an intent wins, so the list order is the ambiguity policy:
confirmations beat listings, listings beat swap phrases, and direct-execute
phrasing is checked before quote phrasing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class ConfirmSwap:
    kind = 'confirm_swap'


@dataclass(frozen=True)
class ListTokens:
    kind = 'list_tokens'


@dataclass(frozen=True)
class ListLiquidity:
    kind = 'list_liquidity'


@dataclass(frozen=True)
class ListChains:
    kind = 'list_chains'


@dataclass(frozen=True)
class ExecuteSwap:
    amount: str
    from_token: str
    to_token: str
    kind = 'execute_swap'


@dataclass(frozen=True)
class GetQuote:
    amount: str
    from_token: str
    to_token: str
    kind = 'get_quote'


@dataclass(frozen=True)
class Unrecognized:
    text: str = ''
    kind = 'unrecognized'


Intent = Union[ConfirmSwap, ListTokens, ListLiquidity, ListChains, ExecuteSwap, GetQuote, Unrecognized]

# A rule inspects lower-cased text and returns an intent or None.
IntentRule = Tuple[str, Callable[[str], Optional[Intent]]]

_PAIR = r'(?P<amount>\d+(?:\.\d+)?)\s+(?P<from_token>[a-z]+)\s+(?:to|into|for)\s+(?P<to_token>[a-z]+)'

SWAP_PATTERN = re.compile(
    rf'(?:swap|exchange|execute\s+swap|send|transfer)\s+(?:for\s+)?{_PAIR}'
)
QUOTE_PATTERN = re.compile(
    rf'(?:quote|price)\s+(?:for\s+)?(?:(?:swapping|exchanging|converting|selling)\s+)?{_PAIR}'
)

EXECUTE_KEYWORDS = ('execute', 'swap', 'send', 'transfer')


def _contains_any(text: str, words: Sequence[str]) -> bool:
    return any(word in text for word in words)


def _confirm_rule(text: str) -> Optional[Intent]:
    if 'confirm' in text and _contains_any(text, ('swap', 'transaction')):
        return ConfirmSwap()
    return None


def _tokens_rule(text: str) -> Optional[Intent]:
    # "list token" and "available token" both contain "token".
    if 'token' in text:
        return ListTokens()
    return None


def _liquidity_rule(text: str) -> Optional[Intent]:
    if _contains_any(text, ('liquidity', 'sources')):
        return ListLiquidity()
    return None


def _chains_rule(text: str) -> Optional[Intent]:
    if _contains_any(text, ('chain', 'network')):
        return ListChains()
    return None


def _execute_rule(text: str) -> Optional[Intent]:
    match = SWAP_PATTERN.search(text)
    if match and _contains_any(text, EXECUTE_KEYWORDS):
        return ExecuteSwap(
            amount=match.group('amount'),
            from_token=match.group('from_token'),
            to_token=match.group('to_token'),
        )
    return None


def _quote_rule(text: str) -> Optional[Intent]:
    match = QUOTE_PATTERN.search(text)
    if match:
        return GetQuote(
            amount=match.group('amount'),
            from_token=match.group('from_token'),
            to_token=match.group('to_token'),
        )
    return None


DEFAULT_RULES: Tuple[IntentRule, ...] = (
    ('confirm_swap', _confirm_rule),
    ('list_tokens', _tokens_rule),
    ('list_liquidity', _liquidity_rule),
    ('list_chains', _chains_rule),
    ('execute_swap', _execute_rule),
    ('get_quote', _quote_rule),
)


class IntentParser:
    """Classify free-form text with an ordered, first-match-wins rule list."""

    def __init__(self, rules: Sequence[IntentRule] = DEFAULT_RULES) -> None:
        self._rules = tuple(rules)

    @property
    def rule_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self._rules)

    def normalize(self, text: str) -> str:
        return re.sub(r'\s+', ' ', (text or '').lower()).strip()

    def parse(self, text: str) -> Intent:
        normalized = self.normalize(text)
        for _, rule in self._rules:
            intent = rule(normalized)
            if intent is not None:
                return intent
        return Unrecognized(text=normalized)


_default_parser = IntentParser()


def parse_intent(text: str) -> Intent:
    return _default_parser.parse(text)
