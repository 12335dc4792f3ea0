"""Tests for the note embedder and embedding cache."""

import tempfile

import numpy as np
import pytest

from archivist.embeddings.embedder import NoteEmbedder
from archivist.models import Note


class FakeModel:
    def __init__(self):
        self.seen = []

    def encode(self, texts):
        self.seen.extend(texts)
        return np.array([[float(len(t)), 1.0] for t in texts])


class DictCache:
    def __init__(self, stored=None):
        self.stored = dict(stored or {})

    def get_many(self, notes):
        return {n.id: self.stored[n.id] for n in notes if n.id in self.stored}

    def put_many(self, notes, vectors):
        for n in notes:
            self.stored[n.id] = vectors[n.id]


def _notes():
    return [Note(id="a", title="A", content="alpha"), Note(id="b", title="B", content="beta")]


def test_embed_all_notes():
    embedder = NoteEmbedder({"embedding_model": "test-model"})
    embedder._model = FakeModel()
    vectors = embedder.embed(_notes())
    assert set(vectors) == {"a", "b"}
    assert vectors["a"] == [float(len("A\nalpha")), 1.0]


def test_e5_prefix():
    embedder = NoteEmbedder({"embedding_model": "intfloat/e5-large-v2"})
    embedder._model = FakeModel()
    embedder.embed(_notes()[:1])
    assert embedder._model.seen == ["passage: A\nalpha"]


def test_cache_consulted_and_filled():
    cache = DictCache({"a": [9.0, 9.0]})
    embedder = NoteEmbedder({"embedding_model": "test-model"}, cache=cache)
    embedder._model = FakeModel()
    vectors = embedder.embed(_notes())
    assert vectors["a"] == [9.0, 9.0]
    assert embedder._model.seen == ["B\nbeta"]
    assert "b" in cache.stored


def test_chroma_cache_roundtrip_and_invalidation():
    pytest.importorskip("chromadb")
    from archivist.embeddings.store import EmbeddingCache

    with tempfile.TemporaryDirectory() as tmpdir:
        cache = EmbeddingCache(tmpdir)
        notes = _notes()
        cache.put_many(notes, {"a": [1.0, 0.0], "b": [0.0, 1.0]})
        assert cache.count() == 2

        cached = cache.get_many(notes)
        assert cached["a"] == pytest.approx([1.0, 0.0])

        edited = [Note(id="a", title="A", content="alpha, edited"), notes[1]]
        assert set(cache.get_many(edited)) == {"b"}


def test_collection_name_per_model():
    pytest.importorskip("chromadb")
    from archivist.embeddings.store import collection_name

    assert collection_name("note_embeddings", None) == "note_embeddings"
    name = collection_name("note_embeddings", "intfloat/e5-large-v2")
    assert name.startswith("note_embeddings_intfloat_e5_large_v2_")
    assert name != collection_name("note_embeddings", "intfloat/e5-large-v1")
    assert len(collection_name("note_embeddings", "org/" + "x" * 200)) <= 63


def test_changing_model_uses_separate_cache():
    pytest.importorskip("chromadb")
    from archivist.embeddings.store import EmbeddingCache

    with tempfile.TemporaryDirectory() as tmpdir:
        notes = _notes()
        old = NoteEmbedder({"embedding_model": "old-model"}, cache=EmbeddingCache(tmpdir, model_name="old-model"))
        old._model = FakeModel()
        old.embed(notes[:1])

        class WideModel(FakeModel):
            def encode(self, texts):
                self.seen.extend(texts)
                return np.array([[1.0, 2.0, 3.0] for _ in texts])

        new = NoteEmbedder({"embedding_model": "new-model"}, cache=EmbeddingCache(tmpdir, model_name="new-model"))
        new._model = WideModel()
        vectors = new.embed(notes)

        # Nothing from the old model's collection is reused
        assert new._model.seen == ["A\nalpha", "B\nbeta"]
        assert all(len(v) == 3 for v in vectors.values())
        assert len(EmbeddingCache(tmpdir, model_name="old-model").get_many(notes)[notes[0].id]) == 2
