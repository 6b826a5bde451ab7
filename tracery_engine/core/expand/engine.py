from __future__ import annotations

import logging
import math
import random as _random
from dataclasses import dataclass, field
from typing import Callable, Iterator, Mapping, Optional, Sequence, TypeVar, Union

from tracery_engine.core.model import (
    ActionToken,
    ModifierMap,
    RandomFn,
    RuleToken,
    TextToken,
    Token,
)
from tracery_engine.core.parse.tokenizer import tokenize


logger = logging.getLogger(__name__)

DEFAULT_ORIGIN = "#origin#"
MAX_DEPTH = 999

rand: RandomFn = _random.random

T = TypeVar("T")

FlattenFn = Callable[..., str]


def seeded_random(seed: Union[int, str, None]) -> RandomFn:
    """Return a deterministic random source for `seed`."""
    return _random.Random(seed).random


def choose_with(random: RandomFn, items: Sequence[T]) -> Optional[T]:
    """Pick one item uniformly; None when the list is empty."""
    i = math.floor(random() * len(items))
    if 0 <= i < len(items):
        return items[i]
    return None


def apply_modifiers(text: str, names: Sequence[str], modifiers: ModifierMap) -> str:
    for name in names:
        fn = modifiers.get(name)
        if fn is not None:
            text = fn(text)
    return text


@dataclass
class _Frame:
    tokens: Iterator[Token]
    modifiers: Sequence[str] = ()
    parts: list[str] = field(default_factory=list)


def expand(
    grammar: Mapping[str, Sequence[str]],
    origin: str = DEFAULT_ORIGIN,
    modifiers: Optional[ModifierMap] = None,
    random: RandomFn = rand,
) -> str:
    """Expand `origin` against `grammar` and return the generated text.

    The grammar is copied once per call; actions rebind symbols in that copy
    only. Every nested expansion shares one depth counter, and once it passes
    MAX_DEPTH the text being expanded is returned as-is. Unknown symbols come
    back verbatim. Nothing in the grammar content can make this raise.

    Expansion runs on an explicit stack so cyclic grammars never hit the
    interpreter's recursion limit.
    """

    state: dict[str, Sequence[str]] = dict(grammar)
    mods: ModifierMap = modifiers if modifiers is not None else {}
    # The origin itself counts as the first level.
    depth = 1

    stack: list[_Frame] = [_Frame(tokens=tokenize(origin))]
    while True:
        frame = stack[-1]
        token = next(frame.tokens, None)

        if token is None:
            stack.pop()
            text = apply_modifiers("".join(frame.parts), frame.modifiers, mods)
            if not stack:
                return text
            stack[-1].parts.append(text)
            continue

        if isinstance(token, TextToken):
            frame.parts.append(token.value)
        elif isinstance(token, ActionToken):
            state[token.key] = [token.value]
        elif isinstance(token, RuleToken):
            candidates = state.get(token.key)
            if candidates is None:
                frame.parts.append(token.source)
                continue
            chosen = choose_with(random, candidates) or ""
            depth += 1
            if depth > MAX_DEPTH:
                if depth == MAX_DEPTH + 1:
                    logger.debug("depth ceiling %d reached at #%s#", MAX_DEPTH, token.key)
                frame.parts.append(apply_modifiers(chosen, token.modifiers, mods))
                continue
            stack.append(_Frame(tokens=tokenize(chosen), modifiers=token.modifiers))
        else:
            raise TypeError(f"unexpected token: {token!r}")


def parser(
    *,
    modifiers: Optional[ModifierMap] = None,
    random: RandomFn = rand,
) -> FlattenFn:
    """Bind a modifier registry and random source into a reusable expander.

    The returned `flatten(grammar, origin="#origin#")` can be called many
    times; each call gets its own working copy and depth counter.
    """

    def flatten(grammar: Mapping[str, Sequence[str]], origin: str = DEFAULT_ORIGIN) -> str:
        return expand(grammar, origin, modifiers=modifiers, random=random)

    return flatten
