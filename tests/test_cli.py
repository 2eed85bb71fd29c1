"""Tests for the textbayes command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from textbayes import Classifier
from textbayes.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def model_path(tmp_path: Path, trained: Classifier) -> Path:
    path = tmp_path / "model.json"
    trained.save(path)
    return path


class TestLearnCommand:
    def test_creates_model(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "new" / "model.json"
        result = runner.invoke(
            main, ["learn", "--model", str(path), "positive", "--text", "I love cats"]
        )
        assert result.exit_code == 0, result.output
        assert "Learned" in result.output
        model = Classifier.load(path)
        assert model.doc_count == {"positive": 1}
        assert model.vocabulary_size == 3

    def test_appends_to_existing_model(self, runner: CliRunner, model_path: Path) -> None:
        result = runner.invoke(
            main, ["learn", "-m", str(model_path), "negative", "-t", "gloomy", "-t", "dreary"]
        )
        assert result.exit_code == 0, result.output
        model = Classifier.load(model_path)
        assert model.doc_count["negative"] == 5
        assert model.total_documents == 11

    def test_learns_files(self, runner: CliRunner, tmp_path: Path) -> None:
        doc = tmp_path / "doc.txt"
        doc.write_text("rocket orbit launch", encoding="utf-8")
        path = tmp_path / "model.json"
        result = runner.invoke(main, ["learn", "-m", str(path), "space", str(doc)])
        assert result.exit_code == 0, result.output
        assert Classifier.load(path).word_frequency_count["space"] == {
            "rocket": 1,
            "orbit": 1,
            "launch": 1,
        }

    def test_requires_input(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["learn", "-m", str(tmp_path / "m.json"), "space"])
        assert result.exit_code == 1
        assert "Nothing to learn" in result.output

    def test_model_from_environment(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "env.json"
        result = runner.invoke(
            main, ["learn", "greeting", "-t", "hello"], env={"TEXTBAYES_MODEL": str(path)}
        )
        assert result.exit_code == 0, result.output
        assert path.is_file()

    def test_corrupt_model(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("not json", encoding="utf-8")
        result = runner.invoke(main, ["learn", "-m", str(path), "x", "-t", "y"])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestCategorizeCommand:
    def test_json_output(self, runner: CliRunner, model_path: Path) -> None:
        result = runner.invoke(
            main, ["categorize", "-m", str(model_path), "amazing great day", "-o", "json"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["chosenCategory"] == "positive"
        assert len(data["categoryResults"]) == 3

    def test_rich_output(self, runner: CliRunner, model_path: Path) -> None:
        result = runner.invoke(main, ["categorize", "-m", str(model_path), "awful horrible"])
        assert result.exit_code == 0, result.output
        assert "negative" in result.output

    def test_from_file(self, runner: CliRunner, model_path: Path, tmp_path: Path) -> None:
        doc = tmp_path / "doc.txt"
        doc.write_text("terrible awful horrible", encoding="utf-8")
        result = runner.invoke(
            main, ["categorize", "-m", str(model_path), "--file", str(doc), "-o", "json"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["chosenCategory"] == "negative"

    def test_missing_model(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["categorize", "-m", str(tmp_path / "none.json"), "hi"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_requires_text(self, runner: CliRunner, model_path: Path) -> None:
        result = runner.invoke(main, ["categorize", "-m", str(model_path)])
        assert result.exit_code == 1
        assert "Nothing to categorize" in result.output

    def test_file_not_utf8(self, runner: CliRunner, model_path: Path, tmp_path: Path) -> None:
        doc = tmp_path / "latin1.txt"
        doc.write_bytes(b"\xff\xfe\x80abc")
        result = runner.invoke(main, ["categorize", "-m", str(model_path), "--file", str(doc)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Cannot read" in result.output

    def test_empty_model(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "empty.json"
        Classifier().save(path)
        result = runner.invoke(main, ["categorize", "-m", str(path), "hello"])
        assert result.exit_code == 0, result.output
        assert "no categories" in result.output


class TestInspectCommand:
    def test_lists_categories(self, runner: CliRunner, model_path: Path) -> None:
        result = runner.invoke(main, ["inspect", "-m", str(model_path), "--top", "3"])
        assert result.exit_code == 0, result.output
        for name in ("positive", "negative", "neutral"):
            assert name in result.output
        assert "9 documents" in result.output


class TestEvaluateCommand:
    def test_json_output(self, runner: CliRunner, dataset_file: Path) -> None:
        result = runner.invoke(main, ["evaluate", str(dataset_file), "-k", "3", "-o", "json"])
        assert result.exit_code == 0, result.output
        folds = json.loads(result.output)
        assert len(folds) == 3
        assert all(0.0 <= fold["accuracy"] <= 1.0 for fold in folds)

    def test_rich_output(self, runner: CliRunner, dataset_file: Path) -> None:
        result = runner.invoke(main, ["evaluate", str(dataset_file), "--folds", "3"])
        assert result.exit_code == 0, result.output
        assert "mean" in result.output
        assert "Per category" in result.output
        assert "positive" in result.output

    def test_invalid_dataset(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.jsonl"
        path.write_text('{"text": "no label"}\n', encoding="utf-8")
        result = runner.invoke(main, ["evaluate", str(path)])
        assert result.exit_code == 1
        assert "invalid row" in result.output


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
