"""textbayes -- incremental Naive Bayes text classification with Laplace smoothing."""

__version__ = "0.1.0"

from .classifier import Classifier
from .errors import DegenerateStateWarning, FormatError
from .metrics import (
    ClassificationMetrics,
    compute_metrics,
    cross_validate,
    stratified_k_fold,
)
from .models import CategoryResult, CategoryResults
from .tokenizers import Tokenizer, default_tokenizer, frequency_table

__all__ = [
    # Core
    "Classifier",
    "CategoryResult",
    "CategoryResults",
    # Tokenization
    "Tokenizer",
    "default_tokenizer",
    "frequency_table",
    # Errors
    "FormatError",
    "DegenerateStateWarning",
    # Evaluation
    "ClassificationMetrics",
    "compute_metrics",
    "cross_validate",
    "stratified_k_fold",
]
