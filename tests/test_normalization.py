"""
Tests for question normalization.
"""

import pytest

from answer_cache.exceptions import InvalidInputError
from answer_cache.normalization import clean_text, normalize_question


def test_trims_casefolds_and_collapses_whitespace():
    """Test the key is trimmed, case-folded and single-spaced."""
    assert normalize_question("  ¿Cuál es   el HORARIO\tde la\nbiblioteca?  ") == (
        "¿cuál es el horario de la biblioteca?"
    )


def test_equivalent_questions_share_a_key():
    """Test differently typed versions of a question get one key."""
    assert normalize_question("¿Dónde queda el bloque 14?") == normalize_question(
        "¿DÓNDE  queda el bloque 14? "
    )


def test_decomposed_accents_match_composed():
    """Test combining accents normalize to their composed form."""
    decomposed = "Cua\u0301l es el horario"
    assert normalize_question(decomposed) == normalize_question("Cu\u00e1l es el horario")


def test_punctuation_is_significant():
    """Test punctuation is part of the key."""
    assert normalize_question("horario?") != normalize_question("horario")


@pytest.mark.parametrize("question", ["", "   ", "\n\t"])
def test_blank_question_rejected(question):
    """Test blank questions are rejected."""
    with pytest.raises(InvalidInputError):
        normalize_question(question)


@pytest.mark.parametrize("question", [None, 42, ["hola"]])
def test_non_string_question_rejected(question):
    """Test non-string questions are rejected."""
    with pytest.raises(InvalidInputError):
        normalize_question(question)


def test_clean_text_keeps_case_and_inner_spacing():
    """Test clean_text only trims the ends."""
    assert clean_text("  Abierto 8am  -  8pm ", "answer") == "Abierto 8am  -  8pm"


def test_clean_text_rejects_blank():
    """Test clean_text names the field it rejects."""
    with pytest.raises(InvalidInputError, match="answer"):
        clean_text("  ", "answer")
