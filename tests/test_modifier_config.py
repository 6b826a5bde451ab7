from pathlib import Path

import pytest

from tracery_engine.core.expand.modifier_config import (
    DEFAULT_MODIFIERS,
    ModifierConfigError,
    load_and_merge,
    load_modifier_file,
    merged_modifiers,
)


def test_defaults_without_file():
    mods = load_and_merge(None)
    assert set(mods) == set(DEFAULT_MODIFIERS)


def test_load_modifier_file():
    aliases = load_modifier_file("examples/modifiers.yaml")
    assert aliases == {
        "title": ["lowercase", "capitalizeAll"],
        "plural_title": ["s", "title"],
    }


def test_aliases_compose_left_to_right():
    mods = load_and_merge("examples/modifiers.yaml")
    assert mods["title"]("hELLO wORLD") == "Hello World"
    assert mods["plural_title"]("blue fox") == "Blue Foxes"


def test_alias_overrides_builtin():
    mods = merged_modifiers({"a": ["capitalize"]})
    assert mods["a"]("owl") == "Owl"


def test_unknown_modifier_in_alias():
    with pytest.raises(ModifierConfigError):
        load_modifier_file("examples/modifiers-invalid.yaml")


def test_alias_must_be_list(tmp_path: Path):
    p = tmp_path / "mods.yaml"
    p.write_text("shout: capitalize\n", encoding="utf-8")
    with pytest.raises(ModifierConfigError):
        load_modifier_file(p)


def test_empty_file(tmp_path: Path):
    p = tmp_path / "mods.yaml"
    p.write_text("", encoding="utf-8")
    assert load_modifier_file(p) == {}


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_and_merge("examples/does-not-exist.yaml")
