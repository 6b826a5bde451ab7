from tracery_engine.core.expand.modifier_config import DEFAULT_MODIFIERS
from tracery_engine.core.io.load_grammar import load_grammar
from tracery_engine.core.lint.lint_grammar import lint_grammar
from tracery_engine.core.validate.validate_grammar import validate_grammar


def _load(path: str):
    grammar, errors = validate_grammar(load_grammar(path), file=path)
    assert errors == []
    assert grammar is not None
    return grammar


def test_lint_clean_grammar():
    assert lint_grammar(_load("examples/story.yaml"), modifiers=DEFAULT_MODIFIERS) == []


def test_lint_reports_problems():
    errors = lint_grammar(_load("examples/lint-problems.yaml"), modifiers=DEFAULT_MODIFIERS)
    got = {(e.code, e.location) for e in errors}
    assert ("L_UNKNOWN_MODIFIER", "origin[0]") in got
    assert ("L_UNKNOWN_SYMBOL", "origin[0]") in got
    assert ("L_DROPPED_ACTION", "origin[0]") in got
    assert ("L_EMPTY_SYMBOL", "empty") in got
    assert ("L_UNREACHABLE_SYMBOL", "orphan") in got
    assert ("L_UNREACHABLE_SYMBOL", "empty") in got
    assert ("L_UNREACHABLE_SYMBOL", "animal") not in got


def test_lint_skips_modifier_check_without_registry():
    grammar = {"origin": ["#x.whatever#"], "x": ["y"]}
    assert lint_grammar(grammar) == []


def test_action_bound_symbols_are_known():
    grammar = {"origin": ["[hero:#name#]#hero#"], "name": ["ann"]}
    assert lint_grammar(grammar) == []


def test_custom_origin_reachability():
    grammar = {"greeting": ["hi #who#"], "who": ["you"], "other": ["x"]}
    errors = lint_grammar(grammar, origin="#greeting#")
    assert [(e.code, e.location) for e in errors] == [("L_UNREACHABLE_SYMBOL", "other")]


def test_brackets_inside_rule_reference_are_not_dropped():
    grammar = {"origin": ["#a[b]#"], "a[b]": ["x"]}
    assert lint_grammar(grammar) == []


def test_dropped_action_matches_tokenizer():
    grammar = {"origin": ["[broken] [k:v] #k# ##"]}
    errors = lint_grammar(grammar)
    assert [(e.code, e.location) for e in errors] == [("L_DROPPED_ACTION", "origin[0]")]
    assert "[broken]" in errors[0].message


def test_origin_text_problems_have_no_symbol():
    errors = lint_grammar({"x": ["y"]}, origin="#nope# [bad] #x#")
    got = [(e.code, e.symbol) for e in errors]
    assert ("L_UNKNOWN_SYMBOL", None) in got
    assert ("L_DROPPED_ACTION", None) in got
    assert all(e.message.startswith("origin: ") for e in errors)
