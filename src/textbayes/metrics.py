"""Evaluation helpers: classification metrics and stratified cross-validation."""

from __future__ import annotations

import random
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Optional

from .classifier import Classifier
from .tokenizers import Tokenizer


@dataclass
class ClassificationMetrics:
    """Evaluation metrics for a set of predictions.

    Attributes:
        accuracy: Fraction of predictions that matched the true label.
        per_class: Precision, recall and F1 for each label.
        macro_precision: Unweighted mean precision across labels.
        macro_recall: Unweighted mean recall across labels.
        macro_f1: Unweighted mean F1 across labels.
        weighted_f1: F1 averaged by the support of each label.
        confusion_matrix: ``{true_label: {predicted_label: count}}``.
        support: Number of true samples per label.
    """

    accuracy: float = 0.0
    per_class: dict[str, dict[str, float]] = field(default_factory=dict)
    macro_precision: float = 0.0
    macro_recall: float = 0.0
    macro_f1: float = 0.0
    weighted_f1: float = 0.0
    confusion_matrix: dict[str, dict[str, int]] = field(default_factory=dict)
    support: dict[str, int] = field(default_factory=dict)

    def category_rows(self) -> list[tuple[str, float, float, float, int]]:
        """Return ``(category, precision, recall, f1, support)`` rows.

        Rows are ordered by support, largest first, then by name.
        """
        ordered = sorted(self.per_class, key=lambda name: (-self.support.get(name, 0), name))
        return [
            (
                name,
                self.per_class[name]["precision"],
                self.per_class[name]["recall"],
                self.per_class[name]["f1"],
                self.support.get(name, 0),
            )
            for name in ordered
        ]

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 4),
            "macro": {
                "precision": round(self.macro_precision, 4),
                "recall": round(self.macro_recall, 4),
                "f1": round(self.macro_f1, 4),
            },
            "weighted_f1": round(self.weighted_f1, 4),
            "categories": {
                name: {
                    "precision": round(precision, 4),
                    "recall": round(recall, 4),
                    "f1": round(f1, 4),
                    "support": support,
                }
                for name, precision, recall, f1, support in self.category_rows()
            },
            "confusion_matrix": self.confusion_matrix,
        }

    def summary(self) -> str:
        """One line per category under an accuracy headline."""
        documents = sum(self.support.values())
        lines = [
            f"accuracy {self.accuracy:.1%} on {documents} document(s), "
            f"macro F1 {self.macro_f1:.3f}"
        ]
        for name, precision, recall, f1, support in self.category_rows():
            lines.append(f"  {name}: P={precision:.3f} R={recall:.3f} F1={f1:.3f} (n={support})")
        return "\n".join(lines)


def _safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def compute_metrics(y_true: list[str], y_pred: list[str]) -> ClassificationMetrics:
    """Compute accuracy, per-class and averaged scores for predictions.

    Args:
        y_true: Ground truth labels.
        y_pred: Predicted labels, aligned with ``y_true``.

    Raises:
        ValueError: If the two lists differ in length.
    """
    if len(y_true) != len(y_pred):
        raise ValueError(
            f"y_true ({len(y_true)}) and y_pred ({len(y_pred)}) must have the same length"
        )

    labels = sorted(set(y_true) | set(y_pred))
    matrix = {actual: {predicted: 0 for predicted in labels} for actual in labels}
    for actual, predicted in zip(y_true, y_pred):
        matrix[actual][predicted] += 1

    support = Counter(y_true)
    per_class: dict[str, dict[str, float]] = {}
    for label in labels:
        true_positives = matrix[label][label]
        predicted_total = sum(matrix[other][label] for other in labels)
        actual_total = sum(matrix[label].values())

        precision = _safe_ratio(true_positives, predicted_total)
        recall = _safe_ratio(true_positives, actual_total)
        per_class[label] = {
            "precision": precision,
            "recall": recall,
            "f1": _safe_ratio(2 * precision * recall, precision + recall),
        }

    correct = sum(1 for actual, predicted in zip(y_true, y_pred) if actual == predicted)
    count = len(labels)

    return ClassificationMetrics(
        accuracy=_safe_ratio(correct, len(y_true)),
        per_class=per_class,
        macro_precision=_safe_ratio(sum(s["precision"] for s in per_class.values()), count),
        macro_recall=_safe_ratio(sum(s["recall"] for s in per_class.values()), count),
        macro_f1=_safe_ratio(sum(s["f1"] for s in per_class.values()), count),
        weighted_f1=_safe_ratio(
            sum(per_class[label]["f1"] * support[label] for label in labels),
            sum(support.values()),
        ),
        confusion_matrix=matrix,
        support=dict(support),
    )


def stratified_k_fold(
    labels: list[str],
    k: int = 5,
    seed: int = 42,
) -> list[tuple[list[int], list[int]]]:
    """Split sample indices into ``k`` folds with similar label distributions.

    Indices of each label are shuffled with a seeded RNG and dealt round-robin
    across folds, so results are reproducible for a given ``seed``.

    Returns:
        List of (train_indices, test_indices) tuples, one per fold.

    Raises:
        ValueError: If ``k`` is less than 2.
    """
    if k < 2:
        raise ValueError("k must be at least 2")

    rng = random.Random(seed)
    by_label: dict[str, list[int]] = defaultdict(list)
    for index, label in enumerate(labels):
        by_label[label].append(index)

    assignment = [0] * len(labels)
    for indices in by_label.values():
        rng.shuffle(indices)
        for position, index in enumerate(indices):
            assignment[index] = position % k

    folds = []
    for fold in range(k):
        test = [i for i, assigned in enumerate(assignment) if assigned == fold]
        train = [i for i, assigned in enumerate(assignment) if assigned != fold]
        folds.append((train, test))
    return folds


def cross_validate(
    documents: list[str],
    labels: list[str],
    k: int = 5,
    seed: int = 42,
    tokenizer: Optional[Tokenizer] = None,
) -> list[ClassificationMetrics]:
    """Run stratified k-fold cross-validation of a fresh ``Classifier`` per fold.

    Folds with an empty test split are skipped.

    Raises:
        ValueError: If ``documents`` and ``labels`` differ in length.
    """
    if len(documents) != len(labels):
        raise ValueError(
            f"documents ({len(documents)}) and labels ({len(labels)}) must have same length"
        )

    results: list[ClassificationMetrics] = []
    for train, test in stratified_k_fold(labels, k=k, seed=seed):
        if not test:
            continue

        classifier = Classifier(tokenizer=tokenizer)
        for index in train:
            classifier.learn(documents[index], labels[index])

        predictions = [
            str(classifier.categorize(documents[index]).chosen_category) for index in test
        ]
        results.append(compute_metrics([labels[index] for index in test], predictions))

    return results


__all__ = [
    "ClassificationMetrics",
    "compute_metrics",
    "cross_validate",
    "stratified_k_fold",
]
