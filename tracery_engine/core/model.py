from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping, Union


Grammar = dict[str, list[str]]
ModifierFn = Callable[[str], str]
ModifierMap = Mapping[str, ModifierFn]
RandomFn = Callable[[], float]


@dataclass(frozen=True)
class TextToken:
    value: str


@dataclass(frozen=True)
class RuleToken:
    key: str
    modifiers: list[str] = field(default_factory=list)

    @property
    def source(self) -> str:
        """The literal `#key.mod#` text this token was read from."""
        return "#" + ".".join([self.key, *self.modifiers]) + "#"


@dataclass(frozen=True)
class ActionToken:
    key: str
    value: str


Token = Union[TextToken, RuleToken, ActionToken]
