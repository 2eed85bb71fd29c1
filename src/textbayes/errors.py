"""Exceptions and warnings raised by the classifier."""

from __future__ import annotations


class FormatError(ValueError):
    """Serialized classifier state is not valid structured data."""


class DegenerateStateWarning(UserWarning):
    """Scoring ran against a classifier with too little data to be meaningful.

    Emitted instead of raising: the returned scores are still well defined,
    just uninformative.
    """


__all__ = ["DegenerateStateWarning", "FormatError"]
