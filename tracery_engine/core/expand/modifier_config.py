from __future__ import annotations

from pathlib import Path
from typing import Callable

import yaml

from tracery_engine.core.model import ModifierFn, ModifierMap
from tracery_engine.core.modifiers.eng import ENG_MODIFIERS


DEFAULT_MODIFIERS: ModifierMap = ENG_MODIFIERS


class ModifierConfigError(ValueError):
    pass


def load_modifier_file(path: str | Path) -> dict[str, list[str]]:
    """Load modifier aliases from a YAML file.

    Format:
      <alias>: ["modifier1", "modifier2", ...]

    Returns a mapping of alias name -> modifier names applied left to right.
    Names are checked against the defaults and aliases defined earlier in
    the file.
    """
    p = Path(path)
    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ModifierConfigError("modifier file must be a mapping of alias -> list[str]")

    known = set(DEFAULT_MODIFIERS)
    out: dict[str, list[str]] = {}
    for k, v in raw.items():
        if not isinstance(k, str) or not k.strip():
            raise ModifierConfigError("modifier aliases must be non-empty strings")
        if not isinstance(v, list) or not v:
            raise ModifierConfigError(f"alias '{k}' must be a non-empty list")
        names: list[str] = []
        for item in v:
            if not isinstance(item, str) or not item.strip():
                raise ModifierConfigError(f"alias '{k}' items must be non-empty strings")
            if item.strip() not in known:
                raise ModifierConfigError(f"alias '{k}' references unknown modifier: {item.strip()}")
            names.append(item.strip())
        out[k.strip()] = names
        known.add(k.strip())
    return out


def merged_modifiers(aliases: dict[str, list[str]] | None = None) -> dict[str, ModifierFn]:
    """Return DEFAULT_MODIFIERS plus composed aliases.

    Aliases replace modifiers of the same name and may build on aliases
    defined before them.
    """
    merged: dict[str, ModifierFn] = dict(DEFAULT_MODIFIERS)
    if aliases:
        for k, names in aliases.items():
            merged[k] = _compose([merged[n] for n in names])
    return merged


def load_and_merge(modifier_file: str | None) -> dict[str, ModifierFn]:
    if not modifier_file:
        return merged_modifiers()
    aliases = load_modifier_file(modifier_file)
    return merged_modifiers(aliases)


def _compose(fns: list[ModifierFn]) -> Callable[[str], str]:
    def run(text: str) -> str:
        for fn in fns:
            text = fn(text)
        return text

    return run
