from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, TypeVar


@dataclass(frozen=True)
class GrammarError(Exception):
    """A problem found while loading, validating or linting a grammar.

    `symbol` and `index` point at the offending candidate (`animal[2]`); both
    are None for problems with the file as a whole or with the origin text.
    Only the file-facing layers produce these; expansion never does.
    """

    code: str
    message: str
    file: Optional[str] = None
    symbol: Optional[str] = None
    index: Optional[int] = None

    @property
    def location(self) -> Optional[str]:
        if self.symbol is None:
            return None
        if self.index is None:
            return self.symbol
        return f"{self.symbol}[{self.index}]"

    def sort_key(self) -> tuple[str, str, int, str]:
        return (
            self.file or "",
            self.symbol or "",
            -1 if self.index is None else self.index,
            self.code,
        )

    def __str__(self) -> str:
        where = self.file or "<grammar>"
        if self.location:
            where = f"{where} ({self.location})"
        return f"{where}: {self.code}: {self.message}"


class GrammarLoadError(GrammarError):
    pass


class GrammarValidationError(GrammarError):
    pass


E = TypeVar("E", bound=GrammarError)


def sort_errors(errors: Iterable[E]) -> list[E]:
    return sorted(errors, key=GrammarError.sort_key)
