"""Tests for the default tokenizer and frequency counting."""

from __future__ import annotations

from textbayes.tokenizers import default_tokenizer, frequency_table


class TestDefaultTokenizer:
    def test_strips_punctuation(self) -> None:
        assert default_tokenizer("Hello, world! 123") == ["Hello", "world", "123"]

    def test_no_empty_tokens_from_surrounding_whitespace(self) -> None:
        tokens = default_tokenizer("   leading and trailing   ")
        assert tokens == ["leading", "and", "trailing"]
        assert "" not in tokens

    def test_punctuation_only_yields_nothing(self) -> None:
        assert default_tokenizer("?!... ,,, ;;") == []

    def test_empty_string(self) -> None:
        assert default_tokenizer("") == []

    def test_preserves_case(self) -> None:
        assert default_tokenizer("Cat cat CAT") == ["Cat", "cat", "CAT"]

    def test_keeps_underscore_and_digits(self) -> None:
        assert default_tokenizer("snake_case v2") == ["snake_case", "v2"]

    def test_cyrillic_words(self) -> None:
        assert default_tokenizer("Привет, мир!") == ["Привет", "мир"]

    def test_newlines_and_tabs_split(self) -> None:
        assert default_tokenizer("one\ttwo\nthree") == ["one", "two", "three"]

    def test_parentheses_are_stripped(self) -> None:
        assert default_tokenizer("(a+b)") == ["a", "b"]


class TestFrequencyTable:
    def test_counts_duplicates(self) -> None:
        table = frequency_table(["a", "b", "a", "c", "a"])
        assert table == {"a": 3, "b": 1, "c": 1}

    def test_empty_input(self) -> None:
        assert frequency_table([]) == {}

    def test_case_sensitive(self) -> None:
        assert frequency_table(["Cat", "cat"]) == {"Cat": 1, "cat": 1}

    def test_drops_empty_tokens(self) -> None:
        assert frequency_table(["", "a", ""]) == {"a": 1}

    def test_accepts_generators(self) -> None:
        assert frequency_table(t for t in "abba") == {"a": 2, "b": 2}
