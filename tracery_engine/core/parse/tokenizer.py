from __future__ import annotations

import re
from typing import Callable, Iterator, Literal, Optional

from tracery_engine.core.model import ActionToken, RuleToken, TextToken, Token
from tracery_engine.core.parse.cursor import (
    Cursor,
    backtrack,
    cut,
    is_exhausted,
    peek,
    save,
    take,
)


RULE_RE = re.compile(r"#([^#]+)#")
ACTION_RE = re.compile(r"\[([^:]+):([^\]]+)\]")

RULE_DELIM = "#"
ACTION_OPEN = "["
ACTION_CLOSE = "]"

DropKind = Literal["rule", "action"]
DropFn = Callable[[DropKind, str], None]


def tokenize(rule: str, on_drop: Optional[DropFn] = None) -> Iterator[Token]:
    """Lazily split one rule string into text, rule and action tokens.

    Never raises on malformed input:

    - an unterminated `#...` or `[...` is rewound and re-read as plain text;
    - a closed `[...]` whose body is not `key:value` (or an empty `##`) is
      claimed and dropped. `on_drop(kind, span)` is told about each one.
    """

    cur = Cursor(text=rule)
    while not is_exhausted(cur):
        char = take(cur)
        if char == RULE_DELIM:
            yield from _consume_rule(cur, on_drop)
        elif char == ACTION_OPEN:
            yield from _consume_action(cur, on_drop)
        else:
            yield from _consume_text(cur)


def _consume_rule(cur: Cursor, on_drop: Optional[DropFn]) -> Iterator[Token]:
    save(cur)
    while not is_exhausted(cur):
        if take(cur) == RULE_DELIM:
            span = cut(cur)
            m = RULE_RE.search(span)
            if m is None:
                if on_drop is not None:
                    on_drop("rule", span)
                return
            key, *modifiers = m.group(1).split(".")
            yield RuleToken(key=key, modifiers=modifiers)
            return
    yield from _rewind(cur)


def _consume_action(cur: Cursor, on_drop: Optional[DropFn]) -> Iterator[Token]:
    save(cur)
    while not is_exhausted(cur):
        if take(cur) == ACTION_CLOSE:
            span = cut(cur)
            m = ACTION_RE.search(span)
            if m is None:
                if on_drop is not None:
                    on_drop("action", span)
                return
            yield ActionToken(key=m.group(1), value=m.group(2))
            return
    yield from _rewind(cur)


def _rewind(cur: Cursor) -> Iterator[Token]:
    """Give up on an unterminated opener.

    Normally the text consumer picks the opener up with what follows it. When
    nothing follows, or another opener does, the opener goes out on its own.
    """
    backtrack(cur)
    if is_exhausted(cur) or peek(cur) in (RULE_DELIM, ACTION_OPEN):
        yield TextToken(value=cut(cur))


def _consume_text(cur: Cursor) -> Iterator[Token]:
    while not is_exhausted(cur):
        if peek(cur) in (RULE_DELIM, ACTION_OPEN):
            break
        take(cur)
    yield TextToken(value=cut(cur))
