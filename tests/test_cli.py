import json
from pathlib import Path

import pytest
from pytest import MonkeyPatch
from typer.testing import CliRunner

from prose_lens.cli import app
from prose_lens.evaluation import CallableEvaluator
from prose_lens.llm.providers import get_registry
from tests.utils import write_sample_corpus

runner = CliRunner()


@pytest.fixture(autouse=True)
def fresh_registry():
    get_registry().reset()
    yield
    get_registry().reset()


def test_cli_analyze_directory_outputs_summary(tmp_path: Path):
    """analyze walks a directory and reports each markdown/text document."""
    corpus_dir = write_sample_corpus(tmp_path)
    result = runner.invoke(app, ["analyze", "--input-path", str(corpus_dir)])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    doc_ids = [doc["doc_id"] for doc in payload["documents"]]
    assert doc_ids == ["intro.md", "notes/draft.txt"]
    intro = payload["documents"][0]
    assert intro["analysis"]["paragraphCount"] == 2
    assert "difficulty" in intro
    issue_texts = [issue["text"] for issue in intro["analysis"]["issues"]]
    assert issue_texts == ["quickly", "carefully", "I think", "kind of"]


def test_cli_analyze_filters_issue_types(tmp_path: Path):
    """--issue-type restricts the listed issues without changing the metrics."""
    corpus_dir = write_sample_corpus(tmp_path)
    result = runner.invoke(
        app,
        [
            "analyze",
            "--input-path",
            str(corpus_dir / "intro.md"),
            "--issue-type",
            "qualifier",
            "--max-issues",
            "1",
        ],
    )

    assert result.exit_code == 0
    document = json.loads(result.stdout)["documents"][0]
    assert document["doc_id"] == "intro.md"
    assert document["analysis"]["issues"] == [
        {
            "type": "qualifier",
            "text": "I think",
            "position": 39,
            "suggestion": "Use stronger language",
        }
    ]


def test_cli_analyze_rejects_unknown_issue_type(tmp_path: Path):
    corpus_dir = write_sample_corpus(tmp_path)
    result = runner.invoke(
        app,
        ["analyze", "--input-path", str(corpus_dir), "--issue-type", "cliche"],
    )

    assert result.exit_code != 0


def test_cli_analyze_respects_config_file(tmp_path: Path):
    corpus_dir = write_sample_corpus(tmp_path)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "include_difficulty_note: false\nissue_types: [passive]\n", encoding="utf-8"
    )
    result = runner.invoke(
        app,
        [
            "analyze",
            "--input-path",
            str(corpus_dir / "notes" / "draft.txt"),
            "--config",
            str(config_path),
        ],
    )

    assert result.exit_code == 0
    document = json.loads(result.stdout)["documents"][0]
    assert "difficulty" not in document
    assert [issue["text"] for issue in document["analysis"]["issues"]] == ["was eaten"]


def test_cli_analyze_empty_issue_types_key_uses_defaults(tmp_path: Path):
    corpus_dir = write_sample_corpus(tmp_path)
    config_path = tmp_path / "config.yaml"
    config_path.write_text("issue_types:\n", encoding="utf-8")
    result = runner.invoke(
        app,
        [
            "analyze",
            "--input-path",
            str(corpus_dir / "intro.md"),
            "--config",
            str(config_path),
        ],
    )

    assert result.exit_code == 0
    document = json.loads(result.stdout)["documents"][0]
    issue_texts = [issue["text"] for issue in document["analysis"]["issues"]]
    assert issue_texts == ["quickly", "carefully", "I think", "kind of"]


def test_cli_analyze_rejects_scalar_issue_types_in_config(tmp_path: Path):
    corpus_dir = write_sample_corpus(tmp_path)
    config_path = tmp_path / "config.yaml"
    config_path.write_text("issue_types: 5\n", encoding="utf-8")
    result = runner.invoke(
        app,
        [
            "analyze",
            "--input-path",
            str(corpus_dir / "intro.md"),
            "--config",
            str(config_path),
        ],
    )

    assert result.exit_code == 2


def test_cli_print_config():
    """print-config dumps the default configuration values."""
    result = runner.invoke(app, ["print-config"])

    assert result.exit_code == 0
    assert "issue_types" in result.stdout
    assert "evaluation" in result.stdout


def test_cli_providers_secure_only():
    result = runner.invoke(app, ["providers", "--secure-only"])

    assert result.exit_code == 0
    ids = [provider["id"] for provider in json.loads(result.stdout)["providers"]]
    assert ids == ["openai", "anthropic", "openrouter"]


def test_cli_evaluate_with_stubbed_evaluator(monkeypatch: MonkeyPatch, tmp_path: Path):
    """evaluate wires CLI overrides into the evaluator settings."""
    corpus_dir = write_sample_corpus(tmp_path)
    seen: dict = {}

    def fake_build(settings):
        seen["settings"] = settings
        return CallableEvaluator(
            lambda prompt: "Grammar: 88\nClarity: 77\nOverall: 80\nSuggestions:\n- Fewer adverbs"
        )

    monkeypatch.setattr("prose_lens.cli._build_evaluator", fake_build)
    result = runner.invoke(
        app,
        [
            "evaluate",
            "--input-path",
            str(corpus_dir / "intro.md"),
            "--provider",
            "anthropic",
            "--model",
            "claude-3-haiku",
            "--temperature",
            "0.2",
        ],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["doc_id"] == "intro.md"
    assert payload["scores"] == {"grammar": 88, "clarity": 77, "overall": 80}
    assert payload["suggestions"] == ["Fewer adverbs"]
    assert seen["settings"].provider == "anthropic"
    assert seen["settings"].model == "claude-3-haiku"
    assert seen["settings"].temperature == 0.2


def test_cli_evaluate_reports_missing_api_key(monkeypatch: MonkeyPatch, tmp_path: Path):
    corpus_dir = write_sample_corpus(tmp_path)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    result = runner.invoke(
        app, ["evaluate", "--input-path", str(corpus_dir / "intro.md")]
    )

    assert result.exit_code == 1


def test_cli_test_connection(monkeypatch: MonkeyPatch):
    calls: dict = {}

    def fake_test_connection(provider, api_key=None, base_url=None):
        calls["provider"] = provider.id
        calls["api_key"] = api_key
        return True

    monkeypatch.setattr("prose_lens.cli.test_connection", fake_test_connection)
    result = runner.invoke(
        app, ["test-connection", "--provider", "openrouter", "--api-key", "k"]
    )

    assert result.exit_code == 0
    assert "ok" in result.stdout
    assert calls == {"provider": "openrouter", "api_key": "k"}


def test_cli_test_connection_failure_and_unknown_provider(monkeypatch: MonkeyPatch):
    monkeypatch.setattr(
        "prose_lens.cli.test_connection", lambda provider, api_key=None, base_url=None: False
    )

    assert runner.invoke(app, ["test-connection", "--provider", "ollama"]).exit_code == 1
    assert runner.invoke(app, ["test-connection", "--provider", "nope"]).exit_code == 2
