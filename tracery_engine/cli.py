from __future__ import annotations

import json
import logging
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from tracery_engine.core.errors import (
    GrammarError,
    GrammarLoadError,
    GrammarValidationError,
    sort_errors,
)
from tracery_engine.core.expand.engine import DEFAULT_ORIGIN, expand as expand_grammar, rand, seeded_random
from tracery_engine.core.expand.modifier_config import ModifierConfigError, load_and_merge
from tracery_engine.core.io.load_grammar import load_grammar
from tracery_engine.core.lint.lint_grammar import lint_grammar
from tracery_engine.core.model import ActionToken, Grammar, ModifierMap, RuleToken, TextToken
from tracery_engine.core.parse.tokenizer import tokenize
from tracery_engine.core.validate.validate_grammar import summarize_grammar, validate_grammar

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


@app.callback()
def _callback() -> None:
    """Tracery grammar CLI."""
    return


@app.command("expand")
def expand(
    path: str = typer.Argument(..., help="Path to a grammar file (.yaml/.yml/.json)"),
    origin: str = typer.Option(DEFAULT_ORIGIN, "--origin", help="Text to expand"),
    seed: Optional[str] = typer.Option(None, "--seed", help="Seed for repeatable output"),
    count: int = typer.Option(1, "--count", "-n", min=1, help="Number of expansions"),
    modifier_file: Optional[str] = typer.Option(
        None,
        "--modifier-file",
        help="Optional YAML file of modifier aliases",
    ),
    no_modifiers: bool = typer.Option(False, "--no-modifiers", help="Disable all modifiers"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
) -> None:
    """Expand a grammar file, printing one result per line."""
    _configure_logging(verbose)
    _check_format(format, "E_EXPAND_UNKNOWN_FORMAT")

    grammar = _load_valid(path)
    modifiers: ModifierMap = {} if no_modifiers else _load_modifiers(modifier_file)
    random = seeded_random(seed) if seed is not None else rand

    results = [
        expand_grammar(grammar, origin, modifiers=modifiers, random=random) for _ in range(count)
    ]

    if format == "json":
        payload = {
            "tool": "tracery",
            "command": "expand",
            "ok": True,
            "origin": origin,
            "seed": seed,
            "results": results,
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    for r in results:
        typer.echo(r)


@app.command("validate")
def validate(
    path: str = typer.Argument(..., help="Path to a grammar file (.yaml/.yml/.json)"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Check that a grammar file maps symbol names to lists of strings."""
    _check_format(format, "E_VALIDATE_UNKNOWN_FORMAT")

    def _emit_json(
        ok: bool,
        *,
        exit_code: int,
        errors: list[GrammarError],
        summary: dict | None,
    ) -> None:
        payload = {
            "tool": "tracery",
            "command": "validate",
            "ok": ok,
            "error_count": len(errors),
            "errors": [_to_item(e) for e in errors],
            "summary": summary,
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        raise typer.Exit(code=exit_code)

    try:
        raw = load_grammar(path)
    except GrammarLoadError as e:
        if format == "json":
            _emit_json(False, exit_code=1, errors=[e], summary=None)
        _print_errors([e])
        raise typer.Exit(code=1)

    grammar, errors = validate_grammar(raw, file=path)
    if errors or grammar is None:
        if format == "json":
            _emit_json(False, exit_code=2, errors=list(errors), summary=None)
        _print_errors(list(errors))
        raise typer.Exit(code=2)

    if format == "text":
        typer.echo(summarize_grammar(grammar))
        return

    summary = {
        "symbol_count": len(grammar),
        "rule_count": sum(len(v) for v in grammar.values()),
        "symbols": sorted(grammar),
    }
    _emit_json(True, exit_code=0, errors=[], summary=summary)


@app.command("lint")
def lint(
    path: str = typer.Argument(..., help="Path to a grammar file (.yaml/.yml/.json)"),
    origin: str = typer.Option(DEFAULT_ORIGIN, "--origin", help="Text expansion starts from"),
    modifier_file: Optional[str] = typer.Option(
        None,
        "--modifier-file",
        help="Optional YAML file of modifier aliases",
    ),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Lint a grammar file for references that would silently degrade."""
    _check_format(format, "E_LINT_UNKNOWN_FORMAT")

    def _emit_json(ok: bool, errors: list[GrammarError], exit_code: int) -> None:
        payload = {
            "tool": "tracery",
            "command": "lint",
            "ok": ok,
            "error_count": len(errors),
            "errors": [_to_item(e) for e in errors],
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        raise typer.Exit(code=exit_code)

    try:
        raw = load_grammar(path)
    except GrammarLoadError as e:
        if format == "json":
            _emit_json(False, [e], 1)
        _print_errors([e])
        raise typer.Exit(code=1)

    grammar, validation_errors = validate_grammar(raw, file=path)
    errors: list[GrammarError] = list(validation_errors)
    if grammar is not None:
        modifiers = _load_modifiers(modifier_file)
        errors += lint_grammar(grammar, origin=origin, modifiers=modifiers, file=path)

    if format == "text":
        if errors:
            _print_errors(errors)
            raise typer.Exit(code=2)
        typer.echo("OK: lint passed")
        return

    if errors:
        _emit_json(False, errors, 2)
    _emit_json(True, [], 0)


@app.command("tokens")
def tokens(
    rule: str = typer.Argument(..., help="A single rule string, e.g. 'Hello #name.capitalize#'"),
) -> None:
    """Show how a rule string is tokenized."""
    table = Table(title="tokens")
    table.add_column("Kind")
    table.add_column("Key")
    table.add_column("Value")
    for tok in tokenize(rule):
        if isinstance(tok, TextToken):
            table.add_row("text", "", repr(tok.value))
        elif isinstance(tok, RuleToken):
            table.add_row("rule", tok.key, ".".join(tok.modifiers))
        elif isinstance(tok, ActionToken):
            table.add_row("action", tok.key, repr(tok.value))
    console.print(table)


@app.command("modifiers")
def modifiers(
    modifier_file: Optional[str] = typer.Option(
        None,
        "--modifier-file",
        help="Optional YAML file of modifier aliases",
    ),
) -> None:
    """List available modifiers."""
    mods = _load_modifiers(modifier_file)
    typer.echo("Modifiers:")
    for name in sorted(mods):
        typer.echo(f"- {name}")


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _check_format(format: str, code: str) -> None:
    if format not in ("text", "json"):
        err = GrammarValidationError(
            code=code,
            message=f"unknown --format: {format} (choose one of: text, json)",
        )
        _print_errors([err])
        raise typer.Exit(code=2)


def _load_valid(path: str) -> Grammar:
    try:
        raw = load_grammar(path)
    except GrammarLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)

    grammar, errors = validate_grammar(raw, file=path)
    if errors or grammar is None:
        _print_errors(list(errors))
        raise typer.Exit(code=2)
    return grammar


def _load_modifiers(modifier_file: str | None) -> ModifierMap:
    try:
        return load_and_merge(modifier_file)
    except FileNotFoundError:
        _print_errors(
            [
                GrammarLoadError(
                    code="E_MODIFIER_FILE_NOT_FOUND",
                    message="modifier file not found",
                    file=modifier_file,
                )
            ]
        )
        raise typer.Exit(code=1)
    except ModifierConfigError as e:
        _print_errors(
            [
                GrammarValidationError(
                    code="E_MODIFIER_FILE_INVALID",
                    message=str(e),
                    file=modifier_file,
                )
            ]
        )
        raise typer.Exit(code=2)


def _to_item(e: GrammarError) -> dict[str, Any]:
    code = e.code
    if isinstance(e, GrammarLoadError):
        source = "load"
    elif code.startswith("L_"):
        source = "lint"
    else:
        source = "validate"
    return {
        "code": code,
        "message": e.message,
        "file": e.file,
        "symbol": e.symbol,
        "index": e.index,
        "severity": "error",
        "source": source,
    }


def _print_errors(errors: list[GrammarError]) -> None:
    for e in sort_errors(errors):
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="tracery")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
