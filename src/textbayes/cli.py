"""Command-line interface for the textbayes classifier.

Provides ``learn``, ``categorize``, ``inspect`` and ``evaluate`` commands
with rich terminal output using the ``click`` and ``rich`` libraries.
Models are stored as JSON files.

Usage::

    textbayes learn --model model.json positive --text "I love cats"
    textbayes learn --model model.json negative reviews/bad/*.txt
    textbayes categorize --model model.json "I love rain"
    textbayes inspect --model model.json
    textbayes evaluate labelled.jsonl --folds 5
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .classifier import Classifier
from .errors import FormatError
from .metrics import ClassificationMetrics, cross_validate

console = Console()
err_console = Console(stderr=True)

_model_option = click.option(
    "--model",
    "-m",
    "model_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TEXTBAYES_MODEL",
    required=True,
    help="Path of the JSON model file (or set TEXTBAYES_MODEL).",
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    logging.captureWarnings(True)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[bold red]Error:[/] {escape(message)}")
    sys.exit(1)


def _load_model(path: Path, *, must_exist: bool) -> Classifier:
    if not path.exists() and not must_exist:
        return Classifier()
    try:
        return Classifier.load(path)
    except (FileNotFoundError, FormatError) as exc:
        _fail(str(exc))


@click.group()
@click.version_option(package_name="textbayes")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Naive Bayes text classifier with Laplace smoothing.

    Teach it labelled text, then ask it to categorize new text.
    """
    _configure_logging(verbose)


@main.command()
@_model_option
@click.argument("category")
@click.argument("files", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--text", "-t", "texts", multiple=True, help="Literal text to learn (repeatable).")
def learn(model_path: Path, category: str, files: tuple[Path, ...], texts: tuple[str, ...]) -> None:
    """Learn documents under CATEGORY and save the model.

    The model file is created if it does not exist yet.

    Example: textbayes learn -m model.json spam --text "win a free prize"
    """
    if not files and not texts:
        _fail("Nothing to learn: pass FILES or --text.")

    classifier = _load_model(model_path, must_exist=False)

    documents = list(texts)
    for path in files:
        try:
            documents.append(path.read_text(encoding="utf-8"))
        except UnicodeDecodeError as exc:
            _fail(f"Cannot read {path} as UTF-8: {exc}")

    for document in documents:
        classifier.learn(document, category)
    classifier.save(model_path)

    console.print(
        f"Learned [bold]{len(documents)}[/] document(s) as [cyan]{escape(category)}[/] "
        f"[dim]({classifier.total_documents} total, "
        f"vocabulary {classifier.vocabulary_size})[/]"
    )


@main.command()
@_model_option
@click.argument("text", required=False)
@click.option("--file", "-f", "file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="Read the text to categorize from a file.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def categorize(model_path: Path, text: str | None, file: Path | None, output: str) -> None:
    """Categorize TEXT (or the contents of --file).

    Example: textbayes categorize -m model.json "I love rain"
    """
    if file is not None:
        try:
            text = file.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            _fail(f"Cannot read {file} as UTF-8: {exc}")
    if text is None:
        _fail("Nothing to categorize: pass TEXT or --file.")

    classifier = _load_model(model_path, must_exist=True)
    result = classifier.categorize(text)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.chosen_category is None:
        console.print("[yellow]The model has no categories yet.[/]")
        return

    posteriors = result.probabilities()
    table = Table(title="Categories")
    table.add_column("#", justify="right", width=4)
    table.add_column("Category", style="cyan")
    table.add_column("Log-probability", justify="right")
    table.add_column("Posterior", justify="right")
    for rank, item in enumerate(result.category_results, 1):
        style = "bold green" if rank == 1 else ""
        table.add_row(
            str(rank),
            escape(item.name),
            f"{item.probability:.4f}",
            f"{posteriors[item.name]:.1%}",
            style=style,
        )
    console.print(table)


@main.command()
@_model_option
@click.option("--top", "-n", default=10, show_default=True,
              help="Informative tokens to show per category.")
def inspect(model_path: Path, top: int) -> None:
    """Show categories, counts and the most informative tokens."""
    classifier = _load_model(model_path, must_exist=True)

    console.print(
        f"[bold]{model_path.name}[/]: {classifier.total_documents} documents, "
        f"{len(classifier.categories)} categories, vocabulary {classifier.vocabulary_size}"
    )

    table = Table(title="Categories", show_lines=True)
    table.add_column("Category", style="cyan")
    table.add_column("Documents", justify="right")
    table.add_column("Words", justify="right")
    table.add_column("Informative tokens", style="white", max_width=60)
    for name in classifier.categories:
        tokens = ", ".join(token for token, _ in classifier.most_informative_tokens(name, top))
        table.add_row(
            escape(name),
            str(classifier.doc_count[name]),
            str(classifier.word_count[name]),
            escape(tokens) or "-",
        )
    console.print(table)


@main.command()
@click.argument("dataset", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--folds", "-k", default=5, show_default=True, help="Number of folds.")
@click.option("--seed", default=42, show_default=True, help="Random seed for fold assignment.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def evaluate(dataset: Path, folds: int, seed: int, output: str) -> None:
    """Cross-validate on DATASET, a JSON Lines file of {"text", "category"} rows.

    Example: textbayes evaluate labelled.jsonl --folds 5
    """
    try:
        documents, labels = _read_dataset(dataset)
        results = cross_validate(documents, labels, k=folds, seed=seed)
    except ValueError as exc:
        _fail(str(exc))

    if output == "json":
        click.echo(json.dumps([metrics.to_dict() for metrics in results], indent=2))
        return

    _render_folds(results)


def _read_dataset(path: Path) -> tuple[list[str], list[str]]:
    documents: list[str] = []
    labels: list[str] = []
    with path.open(encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, 1):
            if not line.strip():
                continue
            try:
                row = json.loads(line)
                documents.append(str(row["text"]))
                labels.append(str(row["category"]))
            except (json.JSONDecodeError, KeyError, TypeError) as exc:
                raise ValueError(f"invalid row at {path}:{line_number} ({exc})") from exc
    if not documents:
        raise ValueError(f"{path} contains no rows")
    return documents, labels


def _render_folds(results: list[ClassificationMetrics]) -> None:
    table = Table(title="Cross-validation")
    table.add_column("Fold", justify="right", width=6)
    table.add_column("Accuracy", justify="right")
    table.add_column("Macro F1", justify="right")
    table.add_column("Weighted F1", justify="right")

    for fold, metrics in enumerate(results, 1):
        table.add_row(
            str(fold),
            f"{metrics.accuracy:.2%}",
            f"{metrics.macro_f1:.4f}",
            f"{metrics.weighted_f1:.4f}",
        )

    if results:
        count = len(results)
        table.add_row(
            "mean",
            f"{sum(m.accuracy for m in results) / count:.2%}",
            f"{sum(m.macro_f1 for m in results) / count:.4f}",
            f"{sum(m.weighted_f1 for m in results) / count:.4f}",
            style="bold",
        )
    console.print(table)

    f1_by_category: dict[str, list[float]] = {}
    support_by_category: dict[str, int] = {}
    for metrics in results:
        for name, _precision, _recall, f1, support in metrics.category_rows():
            f1_by_category.setdefault(name, []).append(f1)
            support_by_category[name] = support_by_category.get(name, 0) + support

    if f1_by_category:
        per_category = Table(title="Per category")
        per_category.add_column("Category", style="cyan")
        per_category.add_column("Mean F1", justify="right")
        per_category.add_column("Documents", justify="right")
        for name, scores in f1_by_category.items():
            per_category.add_row(
                escape(name),
                f"{sum(scores) / len(scores):.4f}",
                str(support_by_category[name]),
            )
        console.print(per_category)


if __name__ == "__main__":
    main()
