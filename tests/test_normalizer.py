"""Tests for inkwell.services.normalizer.generate_slug."""

import pytest

from inkwell.services.normalizer import generate_slug

_SAMPLES = [
    "Müller & Co. — Über uns!",
    "  Hello,   World  ",
    "ÄÖÜ äöü",
    "Café crème brûlée",
    "Straße 42",
    "---already-a-slug---",
    "日本語のタイトル",
    "",
    "a—b",
    "Mu\u0308ller",
    "C++ & C# in 2024?",
]


class TestGenerateSlugExamples:
    def test_umlauts_and_punctuation(self):
        assert generate_slug("Müller & Co. — Über uns!") == "mueller-co-ueber-uns"

    def test_uppercase_umlauts_become_digraphs(self):
        assert generate_slug("ÄÖÜ") == "aeoeue"

    def test_eszett(self):
        assert generate_slug("Straße") == "strasse"

    def test_decomposed_umlaut_matches_precomposed(self):
        assert generate_slug("Mu\u0308ller") == generate_slug("Müller") == "mueller"

    def test_other_accents_fold_to_base_letter(self):
        assert generate_slug("Café crème") == "cafe-creme"

    def test_non_latin_dash_separates_words(self):
        assert generate_slug("a—b") == "a-b"

    def test_runs_of_separators_collapse(self):
        assert generate_slug("Hello,   World!!  Again") == "hello-world-again"

    def test_leading_and_trailing_separators_stripped(self):
        assert generate_slug("  --Hello World--  ") == "hello-world"

    def test_digits_kept(self):
        assert generate_slug("Top 10 Tips for 2024") == "top-10-tips-for-2024"

    def test_valid_slug_unchanged(self):
        assert generate_slug("already-a-slug-42") == "already-a-slug-42"


class TestGenerateSlugEdgeCases:
    def test_empty_string(self):
        assert generate_slug("") == ""

    def test_only_punctuation_yields_empty(self):
        assert generate_slug("!!! ??? ...") == ""

    def test_non_latin_script_yields_empty(self):
        assert generate_slug("日本語") == ""


class TestGenerateSlugProperties:
    @pytest.mark.parametrize("text", _SAMPLES)
    def test_idempotent(self, text):
        slug = generate_slug(text)
        assert generate_slug(slug) == slug

    @pytest.mark.parametrize("text", _SAMPLES)
    def test_deterministic(self, text):
        assert generate_slug(text) == generate_slug(text)

    @pytest.mark.parametrize("text", _SAMPLES)
    def test_output_alphabet(self, text):
        slug = generate_slug(text)
        assert all(ch in "abcdefghijklmnopqrstuvwxyz0123456789-" for ch in slug)
        assert not slug.startswith("-")
        assert not slug.endswith("-")
        assert "--" not in slug
