from __future__ import annotations

from collections import deque
from typing import Iterator, Optional

from tracery_engine.core.errors import GrammarValidationError, sort_errors
from tracery_engine.core.expand.engine import DEFAULT_ORIGIN
from tracery_engine.core.model import ActionToken, Grammar, ModifierMap, RuleToken, Token
from tracery_engine.core.parse.tokenizer import DropFn, tokenize


# Grammar lint rules. None of these change what expansion produces; they point
# at places where expansion silently degrades.
# - L_EMPTY_SYMBOL: symbol has no candidates (always expands to "")
# - L_UNKNOWN_SYMBOL: rule references a symbol nothing defines or binds
# - L_UNKNOWN_MODIFIER: modifier not in the registry (acts as identity)
# - L_DROPPED_ACTION: bracketed span the tokenizer claims and drops
# - L_UNREACHABLE_SYMBOL: symbol never referenced from the origin

# (symbol, candidate index, rule string); the origin text has no symbol.
_Source = tuple[Optional[str], Optional[int], str]


def lint_grammar(
    grammar: Grammar,
    *,
    origin: str = DEFAULT_ORIGIN,
    modifiers: Optional[ModifierMap] = None,
    file: Optional[str] = None,
) -> list[GrammarValidationError]:
    """Lint a validated grammar (best effort, static)."""

    errors: list[GrammarValidationError] = []

    def report(code: str, message: str, symbol: Optional[str], index: Optional[int] = None) -> None:
        errors.append(
            GrammarValidationError(code=code, message=message, file=file, symbol=symbol, index=index)
        )

    sources: list[_Source] = [(None, None, origin)]
    for key, candidates in grammar.items():
        if not candidates:
            report("L_EMPTY_SYMBOL", f"symbol '{key}' has no candidates", key)
        for i, rule in enumerate(candidates):
            sources.append((key, i, rule))

    # Symbols bound by actions count as defined wherever they are referenced.
    bound: set[str] = set(grammar)
    for _, _, rule in sources:
        for tok in _walk(rule):
            if isinstance(tok, ActionToken):
                bound.add(tok.key)

    for symbol, index, rule in sources:
        where = "" if symbol is not None else "origin: "

        def on_drop(kind: str, span: str) -> None:
            if kind == "action":
                report("L_DROPPED_ACTION", f"{where}malformed action {span} (expected [key:value])", symbol, index)

        for tok in _walk(rule, on_drop):
            if not isinstance(tok, RuleToken):
                continue
            if tok.key not in bound:
                report("L_UNKNOWN_SYMBOL", f"{where}reference to undefined symbol: {tok.source}", symbol, index)
            if modifiers is not None:
                for name in tok.modifiers:
                    if name not in modifiers:
                        report(
                            "L_UNKNOWN_MODIFIER",
                            f"{where}unknown modifier '{name}' in {tok.source}",
                            symbol,
                            index,
                        )

    reachable = _reachable_from(origin, grammar)
    for key in sorted(set(grammar) - reachable):
        report("L_UNREACHABLE_SYMBOL", f"symbol '{key}' is not reachable from {origin}", key)

    return sort_errors(errors)


def _walk(rule: str, on_drop: Optional[DropFn] = None) -> Iterator[Token]:
    """Tokens of `rule`, descending into action values."""
    for tok in tokenize(rule, on_drop):
        yield tok
        if isinstance(tok, ActionToken):
            yield from _walk(tok.value, on_drop)


def _referenced(rule: str) -> set[str]:
    return {tok.key for tok in _walk(rule) if isinstance(tok, RuleToken)}


def _reachable_from(origin: str, grammar: Grammar) -> set[str]:
    q: deque[str] = deque(_referenced(origin))
    seen: set[str] = set()
    while q:
        cur = q.popleft()
        if cur in seen or cur not in grammar:
            continue
        seen.add(cur)
        for rule in grammar[cur]:
            for nxt in _referenced(rule):
                if nxt not in seen:
                    q.append(nxt)
    return seen
