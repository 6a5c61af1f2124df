from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, TypedDict

import typer
import yaml

from .analysis import analyze_text
from .config import EvaluationSettings, ProseLensConfig, load_config
from .evaluation import Evaluator, build_evaluator
from .llm import EvaluationError, get_provider, initialize_providers, test_connection
from .models import AnalysisResult, Document, IssueType
from .readability import difficulty_note

app = typer.Typer(help="Prose Lens writing analysis CLI.", no_args_is_help=True)

# File types the CLI knows how to expand into Document instances.
SUPPORTED_INPUT_EXTENSIONS = {".md", ".markdown", ".txt"}


class DocumentSummary(TypedDict, total=False):
    doc_id: str
    analysis: Dict[str, Any]
    difficulty: str


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log debug output to stderr."
    ),
) -> None:
    """Readability metrics, style issues and optional LLM evaluation."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


@app.command()
def analyze(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=True, file_okay=True
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    issue_type: List[str] | None = typer.Option(
        None,
        "--issue-type",
        "-t",
        help="Only report issues of this type (repeatable): adverb, passive, complex, qualifier.",
    ),
    max_issues: int | None = typer.Option(
        None, "--max-issues", help="Cap the number of issues listed per document."
    ),
) -> None:
    """Analyze markdown or text files and emit a JSON summary."""
    cfg = _load_config_or_exit(config)
    _apply_analysis_overrides(cfg, issue_type, max_issues)
    documents = _load_documents(input_path)
    summary = [_summarize(doc, analyze_text(doc.text), cfg) for doc in documents]
    typer.echo(json.dumps({"documents": summary}, indent=2))


@app.command()
def evaluate(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, file_okay=True
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    provider: str | None = typer.Option(
        None, "--provider", "-p", help="Provider id (e.g., openai, anthropic, ollama)."
    ),
    model: str | None = typer.Option(None, "--model", "-m", help="Model identifier."),
    api_key: str | None = typer.Option(
        None, "--api-key", help="Explicit API key (prefer env vars)."
    ),
    api_key_env: str | None = typer.Option(
        None, "--api-key-env", help="Environment variable to read the API key from."
    ),
    base_url: str | None = typer.Option(
        None, "--base-url", help="Override the provider base URL."
    ),
    temperature: float | None = typer.Option(
        None, "--temperature", help="Sampling temperature."
    ),
    max_tokens: int | None = typer.Option(
        None, "--max-tokens", help="Max tokens the evaluation can emit."
    ),
) -> None:
    """Send a document to an LLM provider and print its scores as JSON."""
    cfg = _load_config_or_exit(config)
    _apply_evaluation_overrides(
        cfg.evaluation,
        provider,
        model,
        api_key,
        api_key_env,
        base_url,
        temperature,
        max_tokens,
    )
    document = _document_from_file(input_path, input_path.name)
    try:
        evaluator = _build_evaluator(cfg.evaluation)
        result = evaluator.evaluate(document.text)
    except (EvaluationError, ValueError) as exc:
        typer.echo(f"Evaluation failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    payload = {"doc_id": document.doc_id, **result.to_dict()}
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def providers(
    secure_only: bool = typer.Option(
        False, "--secure-only", help="Hide providers reachable only over plain HTTP."
    ),
) -> None:
    """List the available evaluation providers as JSON."""
    listed = initialize_providers(secure_only=secure_only)
    typer.echo(
        json.dumps({"providers": [provider.to_dict() for provider in listed]}, indent=2)
    )


@app.command("test-connection")
def test_connection_command(
    provider: str = typer.Option(..., "--provider", "-p"),
    api_key: str | None = typer.Option(None, "--api-key"),
    base_url: str | None = typer.Option(None, "--base-url"),
) -> None:
    """Check that a provider accepts requests with the given credentials."""
    try:
        target = get_provider(provider)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if test_connection(target, api_key=api_key, base_url=base_url):
        typer.echo("ok")
        return
    typer.echo("failed", err=True)
    raise typer.Exit(code=1)


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = ProseLensConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


def main() -> None:
    app()


def _build_evaluator(settings: EvaluationSettings) -> Evaluator:
    return build_evaluator(settings)


def _load_config_or_exit(path: Path | None) -> ProseLensConfig:
    try:
        return load_config(path)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _apply_analysis_overrides(
    config: ProseLensConfig,
    issue_types: List[str] | None,
    max_issues: int | None,
) -> None:
    """Apply CLI overrides to analysis output settings when provided."""
    if issue_types:
        try:
            config.issue_types = [IssueType(value.lower()).value for value in issue_types]
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--issue-type") from exc
    if max_issues is not None:
        config.max_listed_issues = max_issues


def _apply_evaluation_overrides(
    settings: EvaluationSettings,
    provider: str | None,
    model: str | None,
    api_key: str | None,
    api_key_env: str | None,
    base_url: str | None,
    temperature: float | None,
    max_tokens: int | None,
) -> None:
    """Override evaluation settings from CLI flags."""
    if provider:
        settings.provider = provider
    if model:
        settings.model = model
    if api_key:
        settings.api_key = api_key
    if api_key_env:
        settings.api_key_env = api_key_env
    if base_url:
        settings.base_url = base_url
    if temperature is not None:
        settings.temperature = temperature
    if max_tokens is not None:
        settings.max_tokens = max_tokens


def _load_documents(input_path: Path) -> List[Document]:
    """Expand the input path into documents keyed by relative path."""
    if input_path.is_file():
        return [_document_from_file(input_path, input_path.name)]

    files = sorted(
        p
        for p in input_path.rglob("*")
        if p.is_file() and p.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
    )
    # Relative paths keep doc ids stable across machines.
    return [
        _document_from_file(file, file.relative_to(input_path).as_posix())
        for file in files
    ]


def _document_from_file(path: Path, doc_id: str) -> Document:
    """Read a text file from disk and wrap it in a Document."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid UTF-8 text.") from exc
    return Document(doc_id=doc_id, text=text)


def _summarize(
    document: Document, result: AnalysisResult, config: ProseLensConfig
) -> DocumentSummary:
    """Create a JSON-serializable summary for one analyzed document."""
    payload = result.to_dict()
    wanted = set(config.issue_types)
    issues = [issue for issue in payload["issues"] if issue["type"] in wanted]
    if config.max_listed_issues is not None:
        issues = issues[: max(0, config.max_listed_issues)]
    payload["issues"] = issues
    summary: DocumentSummary = {"doc_id": document.doc_id, "analysis": payload}
    if config.include_difficulty_note:
        summary["difficulty"] = difficulty_note(result.flesch_score)
    return summary


if __name__ == "__main__":
    main()
