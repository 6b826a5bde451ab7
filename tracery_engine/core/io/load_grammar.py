from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

import yaml

from tracery_engine.core.errors import GrammarLoadError


logger = logging.getLogger(__name__)


class _DuplicateSymbol(ValueError):
    def __init__(self, key: Any, line: int | None = None) -> None:
        where = f" (line {line})" if line is not None else ""
        super().__init__(f"symbol defined more than once: {key}{where}")
        self.key = key


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that refuses repeated mapping keys instead of keeping the last."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if isinstance(key, (str, int)):
                if key in seen:
                    raise _DuplicateSymbol(key, key_node.start_mark.line + 1)
                seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _parse_yaml(text: str) -> Any:
    return yaml.load(text, Loader=_UniqueKeyLoader)


def _reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in pairs:
        if k in out:
            raise _DuplicateSymbol(k)
        out[k] = v
    return out


def _parse_json(text: str) -> Any:
    return json.loads(text, object_pairs_hook=_reject_duplicates)


_PARSERS: dict[str, tuple[str, Callable[[str], Any]]] = {
    ".yaml": ("E_YAML_PARSE", _parse_yaml),
    ".yml": ("E_YAML_PARSE", _parse_yaml),
    ".json": ("E_JSON_PARSE", _parse_json),
}


def load_grammar(path: str) -> dict[Any, Any]:
    """Read a grammar file into a symbol -> candidates mapping.

    Symbols written as bare integers (`1:` in YAML) are turned into strings.
    A symbol defined twice is an error rather than a silent overwrite.
    Candidate shapes are left for validate_grammar to check.
    """

    p = Path(path)
    if not p.exists():
        raise GrammarLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=str(p))

    entry = _PARSERS.get(p.suffix.lower())
    if entry is None:
        raise GrammarLoadError(
            code="E_UNSUPPORTED_FORMAT",
            message=f"supported formats are {', '.join(sorted(_PARSERS))}",
            file=str(p),
        )
    parse_code, parse = entry

    try:
        data = parse(p.read_text(encoding="utf-8"))
    except OSError as e:  # pragma: no cover
        raise GrammarLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e
    except _DuplicateSymbol as e:
        raise GrammarLoadError(
            code="E_DUPLICATE_SYMBOL", message=str(e), file=str(p), symbol=str(e.key)
        ) from e
    except (yaml.YAMLError, ValueError) as e:
        raise GrammarLoadError(code=parse_code, message=str(e), file=str(p)) from e

    if not isinstance(data, dict):
        raise GrammarLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="top-level document must map symbol names to candidates",
            file=str(p),
        )

    grammar: dict[Any, Any] = {}
    for key, value in data.items():
        if isinstance(key, int) and not isinstance(key, bool):
            key = str(key)
        if key in grammar:
            raise GrammarLoadError(
                code="E_DUPLICATE_SYMBOL",
                message=f"symbol defined more than once: {key}",
                file=str(p),
                symbol=key,
            )
        grammar[key] = value

    logger.debug("loaded %s (%d symbols)", p, len(grammar))
    return grammar
