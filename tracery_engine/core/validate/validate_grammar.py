from __future__ import annotations

from typing import Any, Optional

from tracery_engine.core.errors import GrammarValidationError, sort_errors
from tracery_engine.core.model import Grammar


def validate_grammar(
    raw: dict[Any, Any], file: Optional[str] = None
) -> tuple[Optional[Grammar], list[GrammarValidationError]]:
    """Validate a loaded grammar mapping.

    Returns (grammar, errors). Grammar is None when errors exist. A bare
    string value is accepted as a one-candidate list.
    """

    errors: list[GrammarValidationError] = []
    grammar: Grammar = {}

    for key, value in raw.items():
        if not isinstance(key, str) or not key.strip():
            errors.append(
                GrammarValidationError(
                    code="E_INVALID_KEY",
                    message=f"symbol names must be non-empty strings, got {key!r}",
                    file=file,
                    symbol=str(key),
                )
            )
            continue

        if isinstance(value, str):
            grammar[key] = [value]
            continue

        if not isinstance(value, list):
            errors.append(
                GrammarValidationError(
                    code="E_INVALID_TYPE",
                    message=f"candidates must be an array of strings, got {type(value).__name__}",
                    file=file,
                    symbol=key,
                )
            )
            continue

        bad = [i for i, item in enumerate(value) if not isinstance(item, str)]
        for i in bad:
            errors.append(
                GrammarValidationError(
                    code="E_INVALID_TYPE",
                    message=f"candidate must be a string, got {type(value[i]).__name__}",
                    file=file,
                    symbol=key,
                    index=i,
                )
            )
        if not bad:
            grammar[key] = list(value)

    if errors:
        return None, sort_errors(errors)
    return grammar, []


def summarize_grammar(grammar: Grammar) -> str:
    rule_count = sum(len(v) for v in grammar.values())
    return f"OK: {len(grammar)} symbols, {rule_count} rules"
