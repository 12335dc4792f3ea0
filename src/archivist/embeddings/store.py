"""ChromaDB-backed cache of note embeddings."""

import hashlib
import re
from pathlib import Path
from typing import Any, Sequence

import chromadb

from ..models import Note

# Chroma collection names: 3-63 chars of [a-zA-Z0-9._-]
MAX_COLLECTION_NAME = 63


def content_hash(note: Note) -> str:
    """SHA256 of the text that gets embedded."""
    return hashlib.sha256(f"{note.title}\n{note.content}".encode("utf-8")).hexdigest()


def collection_name(base: str, model_name: str | None) -> str:
    """Per-model collection name, so vectors from different models never mix."""
    if not model_name:
        return base
    slug = re.sub(r"[^a-z0-9]+", "_", model_name.casefold()).strip("_")
    digest = hashlib.sha256(model_name.encode("utf-8")).hexdigest()[:8]
    room = MAX_COLLECTION_NAME - len(base) - len(digest) - 2
    return f"{base}_{slug[:room]}_{digest}"


class EmbeddingCache:
    """One vector per note id, invalidated when the note's content changes.

    Each embedding model gets its own collection.
    """

    def __init__(self, chroma_path: str, model_name: str | None = None, collection: str = "note_embeddings"):
        self.chroma_path = Path(chroma_path)
        self.chroma_path.mkdir(parents=True, exist_ok=True)
        self.client = chromadb.PersistentClient(path=str(self.chroma_path))
        self.model_name = model_name
        self.collection_name = collection_name(collection, model_name)

    def _collection(self) -> Any:
        return self.client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def get_many(self, notes: Sequence[Note]) -> dict[str, list[float]]:
        """Cached vectors for notes whose content is unchanged."""
        if not notes:
            return {}
        wanted = {note.id: content_hash(note) for note in notes}
        result = self._collection().get(ids=list(wanted), include=["embeddings", "metadatas"])

        embeddings = result.get("embeddings")
        if embeddings is None:
            return {}
        metadatas = result.get("metadatas") or [{}] * len(result["ids"])

        cached = {}
        for note_id, vector, meta in zip(result["ids"], embeddings, metadatas):
            if (meta or {}).get("content_hash") == wanted.get(note_id):
                cached[note_id] = [float(x) for x in vector]
        return cached

    def put_many(self, notes: Sequence[Note], vectors: dict[str, list[float]]) -> None:
        """Store vectors for the given notes, replacing stale entries."""
        rows = [(note, vectors[note.id]) for note in notes if note.id in vectors]
        if not rows:
            return
        self._collection().upsert(
            ids=[note.id for note, _ in rows],
            embeddings=[list(vector) for _, vector in rows],
            metadatas=[{"content_hash": content_hash(note), "title": note.title} for note, _ in rows],
        )

    def count(self) -> int:
        return self._collection().count()
