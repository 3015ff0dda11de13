import json

import pytest
from click.testing import CliRunner

from amenity_translator import cli as cli_module
from amenity_translator.cli import cli
from amenity_translator.translation.clients.openai_client import UNAVAILABLE, CompletionResult

from .helpers import ScriptedClient, is_validation_prompt, validation_response


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def env(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-key")
    monkeypatch.setenv("TARGET_LANGUAGES", "es,fr")


@pytest.fixture
def amenities_file(tmp_path):
    path = tmp_path / "amenities.json"
    path.write_text(json.dumps([
        {"id": 1, "en": "Free WiFi", "nameAll": {"es": "WiFi gratuito", "fr": "WiFi gratuit"}},
        {"id": 2, "en": "Safe", "nameAll": {}},
    ]), encoding="utf-8")
    return path


@pytest.fixture
def fake_client(monkeypatch):
    """Replace the OpenAI client with a scripted one shared by both roles."""
    scripted = ScriptedClient(responder=lambda prompt: (
        validation_response(9) if is_validation_prompt(prompt) else "1. Coffre-fort"
    ))

    def factory(config, model=None):
        return scripted

    monkeypatch.setattr(cli_module, "OpenAIClient", factory)
    return scripted


def test_stats_shows_coverage(runner, amenities_file):
    result = runner.invoke(cli, ["stats", "-i", str(amenities_file)])

    assert result.exit_code == 0, result.output
    assert "Total amenities" in result.output
    assert "1/2 (50.0%)" in result.output


def test_missing_lists_untranslated(runner, amenities_file):
    result = runner.invoke(cli, ["missing", "-i", str(amenities_file), "-l", "es"])

    assert result.exit_code == 0, result.output
    assert "1 total" in result.output
    assert "Safe" in result.output


def test_missing_reports_complete_language(runner, tmp_path):
    path = tmp_path / "done.json"
    path.write_text(json.dumps([{"id": 1, "en": "Safe", "nameAll": {"es": "Caja fuerte"}}]), encoding="utf-8")

    result = runner.invoke(cli, ["missing", "-i", str(path), "-l", "es"])

    assert "All amenities are translated" in result.output


def test_estimate_prints_costs(runner, amenities_file):
    result = runner.invoke(cli, ["estimate", "-i", str(amenities_file)])

    assert result.exit_code == 0, result.output
    assert "Total missing" in result.output
    assert "gpt-3.5-turbo" in result.output


def test_translate_requires_api_key(runner, amenities_file, monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "")

    result = runner.invoke(cli, ["translate", "-i", str(amenities_file)])

    assert result.exit_code != 0
    assert "OPENROUTER_API_KEY is not set" in result.output


def test_translate_writes_outputs(runner, amenities_file, tmp_path, fake_client):
    out = tmp_path / "out"

    result = runner.invoke(cli, ["translate", "-i", str(amenities_file), "-l", "fr", "-o", str(out)])

    assert result.exit_code == 0, result.output
    snapshot = json.loads((out / "translated_amenities.json").read_text(encoding="utf-8"))
    assert snapshot[1]["nameAll"] == {"fr": "Coffre-fort"}
    assert snapshot[0]["nameAll"] == {"es": "WiFi gratuito", "fr": "WiFi gratuit"}
    assert (out / "translated_amenities.csv").read_text(encoding="utf-8").startswith("id,en,fr")
    report = json.loads((out / "validation_report.json").read_text(encoding="utf-8"))
    assert report["languageResults"][0]["status"] == "ACCEPTABLE"


def test_translate_dry_run_saves_nothing(runner, amenities_file, tmp_path, fake_client):
    out = tmp_path / "out"

    result = runner.invoke(
        cli, ["translate", "-i", str(amenities_file), "-l", "fr", "-o", str(out), "--dry-run", "--skip-validation"]
    )

    assert result.exit_code == 0, result.output
    assert "Dry run" in result.output
    assert not out.exists()
    assert not any(is_validation_prompt(p) for p in fake_client.prompts)


def test_validate_writes_report(runner, amenities_file, tmp_path, fake_client):
    report_path = tmp_path / "report.json"

    result = runner.invoke(cli, ["validate", "-i", str(amenities_file), "-l", "es", "-r", str(report_path)])

    assert result.exit_code == 0, result.output
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["totalValidations"] == 1
    assert all(is_validation_prompt(p) for p in fake_client.prompts)


def test_check_reports_successful_call(runner, fake_client):
    result = runner.invoke(cli, ["check"])

    assert result.exit_code == 0, result.output
    assert "API test successful" in result.output
    assert "Coffre-fort" in result.output
    assert fake_client.prompts == ["Say 'Hello World'"]
    assert fake_client.calls == [(0.0, 10)]


def test_check_reports_failed_call(runner, fake_client):
    fake_client.responder = lambda prompt: CompletionResult.failure(UNAVAILABLE, "Connection error.")

    result = runner.invoke(cli, ["check"])

    assert result.exit_code != 0
    assert "API test failed (unavailable)" in result.output
    assert "Connection error." in result.output
