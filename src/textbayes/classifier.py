"""Multinomial Naive Bayes text classifier with Laplace (add-one) smoothing.

The classifier learns incrementally: every ``learn()`` call updates a set of
plain count tables (documents per category, tokens per category, token
frequencies per category, and the global vocabulary). Inference reads the
same tables, so there is no separate fitting step and a model can keep
learning after it has been saved and restored.

Scores are accumulated in log space to avoid floating-point underflow:

    score(c) = ln P(c) + sum_t f(t) * ln P(t | c)

    P(c)     = docCount[c] / totalDocuments
    P(t | c) = (count(t, c) + 1) / (wordCount[c] + vocabularySize)

Model state persists as JSON with camelCase keys (``docCount``,
``wordFrequencyCount``, ...) and ``{name: true}`` presence maps for
categories and vocabulary.

Example::

    classifier = Classifier()
    classifier.learn("I love cats", "positive").learn("I hate rain", "negative")

    result = classifier.categorize("I love cats too")
    print(result.chosen_category)   # "positive"

    restored = Classifier.deserialize(classifier.serialize())
"""

from __future__ import annotations

import json
import logging
import math
import warnings
from collections import Counter
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Optional, Union

from .errors import DegenerateStateWarning, FormatError
from .models import CategoryResult, CategoryResults
from .tokenizers import Tokenizer, default_tokenizer, frequency_table

LOGGER = logging.getLogger(__name__)


class Classifier:
    """Naive Bayes classifier over token frequencies.

    Args:
        state: Optional existing state to start from: either another
            ``Classifier`` or a mapping in the serialized shape returned by
            ``to_dict()``. Counts are copied, never shared.
        tokenizer: Callable mapping text to a sequence of tokens. Defaults
            to ``default_tokenizer``. Tokenizers are not persisted and must
            be supplied again on restore.

    Raises:
        FormatError: If ``state`` is a mapping with an invalid shape.
    """

    def __init__(
        self,
        state: Union["Classifier", Mapping[str, Any], None] = None,
        *,
        tokenizer: Optional[Tokenizer] = None,
    ) -> None:
        self.tokenizer: Tokenizer = tokenizer or default_tokenizer

        self.doc_count: dict[str, int] = {}
        self.word_count: dict[str, int] = {}
        self.word_frequency_count: dict[str, dict[str, int]] = {}
        self.vocabulary: dict[str, bool] = {}
        self.vocabulary_size = 0
        self.total_documents = 0
        self._categories: dict[str, bool] = {}

        if state is None:
            return
        if isinstance(state, Classifier):
            state = state.to_dict()
        self._adopt(_parse_state(state))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(categories={len(self._categories)}, "
            f"documents={self.total_documents}, vocabulary={self.vocabulary_size})"
        )

    # ------------------------------------------------------------------
    # Category store
    # ------------------------------------------------------------------

    @property
    def categories(self) -> list[str]:
        """Known category names, in the order they were first seen."""
        return list(self._categories)

    @property
    def is_trained(self) -> bool:
        """Whether at least one document has been learned."""
        return self.total_documents > 0

    def ensure_category(self, name: Any) -> "Classifier":
        """Create empty count tables for ``name`` unless it already exists."""
        name = str(name)
        if name not in self._categories:
            self.doc_count[name] = 0
            self.word_count[name] = 0
            self.word_frequency_count[name] = {}
            self._categories[name] = True
            LOGGER.debug("Initialized category %r", name)
        return self

    # alias
    initialize_category = ensure_category

    @staticmethod
    def frequency_table(tokens: Iterable[str]) -> Counter[str]:
        """Map each token to its number of occurrences in ``tokens``."""
        return frequency_table(tokens)

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------

    def learn(self, text: str, category: Any) -> "Classifier":
        """Train the classifier with one document labelled ``category``.

        The category is stored as ``str(category)`` and created on first
        use. Empty text is accepted: it only bumps the document counts.

        Returns:
            Self (for method chaining).
        """
        category = str(category)
        self.ensure_category(category)

        self.doc_count[category] += 1
        self.total_documents += 1

        frequencies = self.frequency_table(self.tokenizer(text))
        category_frequencies = self.word_frequency_count[category]

        for token, frequency in frequencies.items():
            if token not in self.vocabulary:
                self.vocabulary[token] = True
                self.vocabulary_size += 1

            category_frequencies[token] = category_frequencies.get(token, 0) + frequency
            self.word_count[category] += frequency

        return self

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    def categorize(self, text: str) -> CategoryResults:
        """Score ``text`` against every known category.

        Returns:
            CategoryResults with the best category, its log-probability and
            all categories ranked best first. With no categories learned the
            result is empty (``chosen_category`` is ``None``, ``probability``
            is ``-inf``) and a ``DegenerateStateWarning`` is emitted.
        """
        results = CategoryResults()

        if not self._categories:
            _warn_degenerate("categorize() called on a classifier with no categories")
            return results

        frequencies = self.frequency_table(self.tokenizer(text))

        if self.total_documents == 0:
            _warn_degenerate("no documents learned; using a uniform category prior")
        if self.vocabulary_size == 0 and frequencies:
            _warn_degenerate("empty vocabulary; token evidence is ignored")

        for category in self._categories:
            log_probability = self._log_prior(category)

            for token, frequency in frequencies.items():
                log_probability += frequency * math.log(
                    self.token_probability(token, category)
                )

            results.category_results.append(CategoryResult(category, log_probability))

            # strict comparison: ties keep the first category seen
            if results.chosen_category is None or log_probability > results.probability:
                results.chosen_category = category
                results.probability = log_probability

        results.category_results.sort(key=lambda result: result.probability, reverse=True)
        return results

    def token_probability(self, token: str, category: str) -> float:
        """Return the Laplace-smoothed probability P(token | category).

        Always strictly positive once the vocabulary is non-empty. When both
        the vocabulary and the category are empty the ratio is undefined and
        1.0 is returned, so the token adds nothing to a log score.

        Raises:
            KeyError: If ``category`` has never been seen.
        """
        try:
            token_counts = self.word_frequency_count[category]
        except KeyError as exc:
            raise KeyError(f"Unknown category: {category!r}") from exc

        frequency = token_counts.get(token, 0)
        denominator = self.word_count[category] + self.vocabulary_size
        if denominator == 0:
            return 1.0
        return (frequency + 1) / denominator

    def most_informative_tokens(
        self,
        category: str,
        top_n: int = 20,
    ) -> list[tuple[str, float]]:
        """Return the tokens that most strongly point towards ``category``.

        Each vocabulary token is scored by how much more likely it is under
        the target category than on average under the other categories
        (difference of log-probabilities).

        Args:
            category: Target category name.
            top_n: Number of tokens to return.

        Returns:
            List of (token, log_likelihood_ratio) tuples, most
            discriminative first.

        Raises:
            ValueError: If ``category`` is unknown.
        """
        if category not in self._categories:
            raise ValueError(f"Unknown category: {category}. Known: {self.categories}")

        others = [name for name in self._categories if name != category]
        scored: list[tuple[str, float]] = []
        for token in self.vocabulary:
            target = math.log(self.token_probability(token, category))
            if others:
                rest = [math.log(self.token_probability(token, name)) for name in others]
                target -= sum(rest) / len(rest)
            scored.append((token, round(target, 4)))

        scored.sort(key=lambda item: item[1], reverse=True)
        return scored[:top_n]

    def _log_prior(self, category: str) -> float:
        if self.total_documents == 0:
            return -math.log(len(self._categories))
        documents = self.doc_count[category]
        if documents <= 0:
            return -math.inf
        return math.log(documents / self.total_documents)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Return the full count state as plain JSON-compatible data.

        The tokenizer is behaviour, not data, and is never included.
        """
        return {
            "docCount": dict(self.doc_count),
            "wordCount": dict(self.word_count),
            "wordFrequencyCount": {
                category: dict(counts)
                for category, counts in self.word_frequency_count.items()
            },
            "categories": dict(self._categories),
            "totalDocuments": self.total_documents,
            "vocabulary": dict(self.vocabulary),
            "vocabularySize": self.vocabulary_size,
            "options": {},
        }

    def serialize(self) -> str:
        """Dump the classifier state as a JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    to_json = serialize

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        tokenizer: Optional[Tokenizer] = None,
    ) -> "Classifier":
        """Build a classifier from a mapping produced by ``to_dict()``.

        Raises:
            FormatError: If ``data`` is not a mapping or has the wrong shape.
        """
        classifier = cls(tokenizer=tokenizer)
        classifier._adopt(_parse_state(data))
        return classifier

    @classmethod
    def deserialize(
        cls,
        representation: Union[str, bytes, bytearray, Mapping[str, Any]],
        tokenizer: Optional[Tokenizer] = None,
    ) -> "Classifier":
        """Restore a classifier from ``serialize()`` output.

        Args:
            representation: JSON text (or bytes), or an already parsed mapping.
            tokenizer: Tokenizer to attach; defaults to ``default_tokenizer``.

        Raises:
            FormatError: If the input is not valid JSON or has the wrong shape.
        """
        if isinstance(representation, (str, bytes, bytearray)):
            try:
                representation = json.loads(representation)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise FormatError(
                    "Classifier.deserialize expects a valid JSON string."
                ) from exc
        return cls.from_dict(representation, tokenizer=tokenizer)

    from_json = deserialize

    def save(self, path: Union[str, Path]) -> None:
        """Write the classifier state to a UTF-8 JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.serialize(), encoding="utf-8")
        LOGGER.debug("Saved %r to %s", self, path)

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        tokenizer: Optional[Tokenizer] = None,
    ) -> "Classifier":
        """Read a classifier previously written with ``save()``.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            FormatError: If the file does not hold valid classifier state.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Model file not found: {path}")
        classifier = cls.deserialize(path.read_text(encoding="utf-8"), tokenizer=tokenizer)
        LOGGER.debug("Loaded %r from %s", classifier, path)
        return classifier

    def _adopt(self, state: dict[str, Any]) -> None:
        self.doc_count = state["doc_count"]
        self.word_count = state["word_count"]
        self.word_frequency_count = state["word_frequency_count"]
        self.vocabulary = state["vocabulary"]
        self.vocabulary_size = state["vocabulary_size"]
        self.total_documents = state["total_documents"]
        self._categories = {}
        for name in state["categories"]:
            self.doc_count.setdefault(name, 0)
            self.word_count.setdefault(name, 0)
            self.word_frequency_count.setdefault(name, {})
            self._categories[name] = True


# ---------------------------------------------------------------------------
# State validation
# ---------------------------------------------------------------------------


def _warn_degenerate(message: str) -> None:
    LOGGER.debug("Degenerate scoring: %s", message)
    warnings.warn(message, DegenerateStateWarning, stacklevel=3)


def _parse_state(data: Any) -> dict[str, Any]:
    """Validate serialized state and return fresh copies of every table."""
    if not isinstance(data, Mapping):
        raise FormatError(
            f"Classifier state must be a JSON object, got {type(data).__name__}"
        )

    frequency_data = data.get("wordFrequencyCount")
    if frequency_data is None:
        frequency_data = {}
    if not isinstance(frequency_data, Mapping):
        raise FormatError("'wordFrequencyCount' must be an object")
    word_frequency_count = {
        str(category): _count_map(counts, f"wordFrequencyCount.{category}")
        for category, counts in frequency_data.items()
    }

    vocabulary = {token: True for token in _presence_keys(data.get("vocabulary"), "vocabulary")}
    vocabulary_size = data.get("vocabularySize")
    if vocabulary_size is None:
        vocabulary_size = len(vocabulary)
    vocabulary_size = _as_count(vocabulary_size, "vocabularySize")
    if vocabulary_size != len(vocabulary):
        raise FormatError(
            f"'vocabularySize' is {vocabulary_size} but the vocabulary "
            f"holds {len(vocabulary)} tokens"
        )

    return {
        "doc_count": _count_map(data.get("docCount"), "docCount"),
        "word_count": _count_map(data.get("wordCount"), "wordCount"),
        "word_frequency_count": word_frequency_count,
        "categories": _presence_keys(data.get("categories"), "categories"),
        "vocabulary": vocabulary,
        "vocabulary_size": vocabulary_size,
        "total_documents": _as_count(data.get("totalDocuments", 0), "totalDocuments"),
    }


def _count_map(value: Any, name: str) -> dict[str, int]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise FormatError(f"'{name}' must be an object")
    return {str(key): _as_count(count, f"{name}.{key}") for key, count in value.items()}


def _presence_keys(value: Any, name: str) -> list[str]:
    """Accept ``{name: true}`` presence maps or plain lists."""
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [str(key) for key, present in value.items() if present]
    if isinstance(value, list):
        return [str(key) for key in value]
    raise FormatError(f"'{name}' must be an object or a list")


def _as_count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatError(f"'{name}' must be a number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise FormatError(f"'{name}' must be a whole number, got {value!r}")
    if value < 0:
        raise FormatError(f"'{name}' must not be negative, got {value!r}")
    return int(value)


__all__ = ["Classifier"]
