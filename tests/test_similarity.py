"""Tests for similarity scorers and text normalization."""

import pytest

from archivist.analysis.similarity import (
    DimensionMismatch,
    cosine_similarity,
    jaccard_similarity,
    similarity_matrix,
)
from archivist.analysis.text import title_words, tokenize, topic_keywords, unit_phrase


def test_cosine_self_is_one():
    v = [1.0, 2.0, 3.0]
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_cosine_symmetric():
    a = [1.0, 0.0, 2.0]
    b = [0.5, -1.0, 3.0]
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_cosine_orthogonal_and_opposite():
    assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
    assert cosine_similarity([1, 2], [-1, -2]) == pytest.approx(-1.0)


def test_cosine_zero_vector_scores_zero():
    assert cosine_similarity([0, 0, 0], [1, 2, 3]) == 0.0
    assert cosine_similarity([0, 0], [0, 0]) == 0.0


def test_cosine_dimension_mismatch():
    with pytest.raises(DimensionMismatch):
        cosine_similarity([1, 2, 3], [1, 2])
    assert issubclass(DimensionMismatch, ValueError)


def test_jaccard():
    a = {"alpha", "beta"}
    assert jaccard_similarity(a, a) == 1.0
    assert jaccard_similarity(set(), set()) == 0.0
    assert jaccard_similarity({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
    assert jaccard_similarity({"a"}, set()) == 0.0


def test_similarity_matrix_zero_rows():
    sims = similarity_matrix([[1, 0], [0, 1], [0, 0]])
    assert sims.shape == (3, 3)
    assert sims[0, 0] == pytest.approx(1.0)
    assert sims[0, 1] == pytest.approx(0.0)
    assert sims[2, 2] == 0.0


def test_similarity_matrix_mismatch():
    with pytest.raises(DimensionMismatch):
        similarity_matrix([[1, 0], [1, 0, 0]])


def test_tokenize_strips_punctuation_and_stopwords():
    assert tokenize("Hello, World! The end.", drop_stopwords=True) == ["hello", "world", "end"]
    assert tokenize("a bb ccc", min_length=2) == ["bb", "ccc"]


def test_title_words():
    assert title_words("Sales: Q1 plan for the team") == {"sales", "plan", "team"}


def test_topic_keywords_dedup_in_order():
    assert topic_keywords("Sales sales Q1 Revenue") == ["sales", "revenue"]


def test_unit_phrase():
    assert unit_phrase("  Percent   Margin ") == "percent margin"
