"""Intent classification for chat messages.

A small ordered-rule classifier: each rule is a regex plus an extractor that
turns the match into a session-name fragment. The first rule that matches
anywhere in the message wins. Anything that matches no rule is a general
query for the text backend.

This is a best-effort front end, not a parser. A message that happens to fit
a rule ("open the risk session notes") is always treated as a switch attempt.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

__all__ = [
    "DEFAULT_RULES",
    "Intent",
    "IntentKind",
    "IntentRouter",
    "IntentRule",
    "clean_session_fragment",
]


class IntentKind(str, Enum):
    SESSION_SWITCH = "session_switch"
    GENERAL_QUERY = "general_query"


@dataclass(frozen=True)
class Intent:
    kind: IntentKind
    session_name_fragment: str | None = None

    @property
    def is_switch(self) -> bool:
        return self.kind is IntentKind.SESSION_SWITCH


_LEADING_ARTICLE = re.compile(r"^the\s+", re.IGNORECASE)
_TRAILING_SESSION = re.compile(r"\s+session$", re.IGNORECASE)
_EDGE_JUNK = " \t\r\n.,!?;:\"'`"


def clean_session_fragment(match: re.Match) -> str:
    """Trim punctuation, quotes, a leading "the" and a trailing "session"."""
    text = match.group(1).strip(_EDGE_JUNK)
    text = _LEADING_ARTICLE.sub("", text)
    text = _TRAILING_SESSION.sub("", text)
    return text.strip(_EDGE_JUNK)


@dataclass(frozen=True)
class IntentRule:
    pattern: re.Pattern
    extractor: Callable[[re.Match], str] = field(default=clean_session_fragment)
    kind: IntentKind = IntentKind.SESSION_SWITCH

    @classmethod
    def from_regex(cls, regex: str, **kwargs) -> "IntentRule":
        return cls(pattern=re.compile(regex, re.IGNORECASE), **kwargs)


DEFAULT_RULES: tuple[IntentRule, ...] = (
    IntentRule.from_regex(r"\bload\s+(?:the\s+)?(.+?)\s+session\b"),
    IntentRule.from_regex(r"\bswitch\s+to\s+(.+)"),
    IntentRule.from_regex(r"\bopen\s+(?:the\s+)?(.+?)\s+session\b"),
)


class IntentRouter:
    def __init__(self, rules: tuple[IntentRule, ...] | list[IntentRule] = DEFAULT_RULES):
        self.rules = list(rules)

    def add_rule(self, rule: IntentRule) -> None:
        """Append a rule; it is tried after every existing rule."""
        self.rules.append(rule)

    def classify(self, text: str) -> Intent:
        for rule in self.rules:
            match = rule.pattern.search(text)
            if match is None:
                continue
            fragment = rule.extractor(match)
            if fragment:
                return Intent(kind=rule.kind, session_name_fragment=fragment)
        return Intent(kind=IntentKind.GENERAL_QUERY)
