"""Shared test fixtures for textbayes tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from textbayes import Classifier

POSITIVE_DOCS = [
    "amazing, awesome movie!! Yeah!! Oh boy.",
    "Sweet, this is incredibly, amazing, perfect, great!!",
    "I love cats and sunny days, wonderful and great.",
]

NEGATIVE_DOCS = [
    "terrible, awful thing. Ugh. Sucks!!",
    "I hate rain, awful weather and a horrible commute.",
    "boring and bad, what a waste of time",
]

NEUTRAL_DOCS = [
    "I dont really know what to make of this.",
    "The meeting is scheduled for Tuesday at noon.",
    "It was fine I guess, nothing special either way.",
]


@pytest.fixture
def classifier() -> Classifier:
    """An empty classifier with the default tokenizer."""
    return Classifier()


@pytest.fixture
def trained() -> Classifier:
    """Classifier trained on a small sentiment corpus."""
    model = Classifier()
    for doc in POSITIVE_DOCS:
        model.learn(doc, "positive")
    for doc in NEGATIVE_DOCS:
        model.learn(doc, "negative")
    for doc in NEUTRAL_DOCS:
        model.learn(doc, "neutral")
    return model


@pytest.fixture
def labelled_corpus() -> tuple[list[str], list[str]]:
    """Documents and labels for evaluation tests."""
    docs = POSITIVE_DOCS + NEGATIVE_DOCS + NEUTRAL_DOCS
    labels = (
        ["positive"] * len(POSITIVE_DOCS)
        + ["negative"] * len(NEGATIVE_DOCS)
        + ["neutral"] * len(NEUTRAL_DOCS)
    )
    return docs, labels


@pytest.fixture
def dataset_file(tmp_path: Path, labelled_corpus) -> Path:
    """JSON Lines dataset file built from ``labelled_corpus``."""
    docs, labels = labelled_corpus
    path = tmp_path / "dataset.jsonl"
    path.write_text(
        "\n".join(json.dumps({"text": d, "category": c}) for d, c in zip(docs, labels)) + "\n",
        encoding="utf-8",
    )
    return path
