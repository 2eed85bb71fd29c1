"""Result types returned by ``Classifier.categorize``."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class CategoryResult:
    """Log-probability score of one category for a piece of text."""

    name: str
    probability: float

    def to_dict(self) -> dict:
        return {"name": self.name, "probability": self.probability}


@dataclass
class CategoryResults:
    """Outcome of categorizing a single text.

    Attributes:
        chosen_category: Highest scoring category, or ``None`` when the
            classifier has no categories yet.
        probability: Log-probability of ``chosen_category`` (``-inf`` when
            there is nothing to choose from).
        category_results: Every known category, sorted by score, best first.
    """

    chosen_category: Optional[str] = None
    probability: float = -math.inf
    category_results: list[CategoryResult] = field(default_factory=list)

    def probabilities(self) -> dict[str, float]:
        """Normalize the log scores into posterior probabilities summing to 1.

        Uses log-sum-exp for numerical stability.
        """
        if not self.category_results:
            return {}

        max_score = max(result.probability for result in self.category_results)
        if max_score == -math.inf:
            # every category is impossible; no meaningful posterior
            return {result.name: 0.0 for result in self.category_results}

        exp_scores = {
            result.name: math.exp(result.probability - max_score)
            for result in self.category_results
        }
        total = sum(exp_scores.values())
        return {name: score / total for name, score in exp_scores.items()}

    def to_dict(self) -> dict:
        return {
            "chosenCategory": self.chosen_category,
            "probability": self.probability,
            "categoryResults": [result.to_dict() for result in self.category_results],
        }


__all__ = ["CategoryResult", "CategoryResults"]
