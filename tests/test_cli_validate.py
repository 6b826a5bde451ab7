import json

from typer.testing import CliRunner

from tracery_engine.cli import app


runner = CliRunner()


def test_cli_validate_success():
    r = runner.invoke(app, ["validate", "examples/story.yaml"])
    assert r.exit_code == 0
    assert "OK: 5 symbols" in r.stdout


def test_cli_validate_failure():
    r = runner.invoke(app, ["validate", "examples/invalid-bad-type.yaml"])
    assert r.exit_code == 2
    assert "examples/invalid-bad-type.yaml (animal): E_INVALID_TYPE" in r.output


def test_cli_validate_json_success():
    r = runner.invoke(app, ["validate", "examples/story.json", "--format", "json"])
    assert r.exit_code == 0
    payload = json.loads(r.stdout)
    assert payload["ok"] is True
    assert payload["error_count"] == 0
    assert payload["summary"]["symbols"] == ["greeting", "origin", "place"]


def test_cli_validate_json_load_error():
    r = runner.invoke(app, ["validate", "examples/missing.json", "--format", "json"])
    assert r.exit_code == 1
    payload = json.loads(r.stdout)
    assert payload["ok"] is False
    assert payload["errors"][0]["code"] == "E_FILE_NOT_FOUND"
    assert payload["errors"][0]["source"] == "load"


def test_cli_validate_json_errors_carry_symbol():
    r = runner.invoke(app, ["validate", "examples/invalid-bad-type.yaml", "--format", "json"])
    assert r.exit_code == 2
    item = json.loads(r.stdout)["errors"][0]
    assert (item["code"], item["symbol"], item["index"]) == ("E_INVALID_TYPE", "animal", None)
    assert "path" not in item
