"""Tests for filename normalization."""
import pytest

from mediaplacer.services.normalizer import normalize, textilize


class TestTextilize:
    """Tests for single-string cleanup."""

    def test_lowercases_and_joins_words(self):
        assert textilize("Unknown Album") == "unknown-album"

    def test_folds_accents(self):
        assert textilize("Café Niño") == "cafe-nino"
        assert textilize("ÁÉÍÓÚ") == "aeiou"

    def test_punctuation_becomes_separator(self):
        assert textilize("AC/DC") == "ac-dc"
        assert textilize("Rock & Roll!!") == "rock-roll"

    def test_collapses_space_runs(self):
        assert textilize("  a    b  ") == "a-b"

    def test_unfolded_characters_are_dropped(self):
        assert textilize("garçon") == "gar-on"

    def test_nothing_left(self):
        assert textilize("!!!") == ""


class TestNormalize:
    """Tests for multi-part normalization."""

    def test_joins_parts(self):
        assert normalize("Hello", "World") == "hello-world"

    def test_skips_blank_parts(self):
        assert normalize("", "  ", "Band") == "band"

    def test_default_when_empty(self):
        assert normalize("", default="Unknown Artist") == "unknown-artist"

    def test_default_when_nothing_survives(self):
        assert normalize("???", default="Unknown Title") == "unknown-title"

    def test_no_default(self):
        assert normalize("") == ""

    def test_none_part_is_ignored(self):
        assert normalize(None, "x") == "x"

    @pytest.mark.parametrize("value", [
        "Unknown Album",
        "Café del Mar - Volumen Único",
        "  Tabs\tand\nnewlines ",
        "already-normal-123",
    ])
    def test_idempotent(self, value):
        once = normalize(value)
        assert normalize(once) == once

    def test_output_alphabet(self):
        result = normalize("Ça va? Très bien, merci! 100%")
        assert all(c.isdigit() or ("a" <= c <= "z") or c == "-" for c in result)
        assert not result.startswith("-")
        assert not result.endswith("-")
        assert "--" not in result
