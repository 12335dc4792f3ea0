"""Note embedding using sentence-transformers."""

import logging
from typing import Any, Sequence

from rich.progress import Progress

from ..models import Note

logger = logging.getLogger(__name__)

# Embedding models have a context limit; longer notes are truncated
MAX_CHARS = 30000


class NoteEmbedder:
    """Embeds notes with sentence-transformers, optionally through a cache."""

    def __init__(self, config: dict[str, Any], cache=None):
        self.model_name = config.get("embedding_model", "intfloat/e5-large-v2")
        self.cache = cache
        self._model = None

    @property
    def model(self):
        """Lazy-load the embedding model."""
        if self._model is None:
            from sentence_transformers import SentenceTransformer
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def _text(self, note: Note) -> str:
        text = f"{note.title}\n{note.content}"[:MAX_CHARS]
        # e5 models need "passage: " prefix for documents
        if "e5" in self.model_name:
            text = f"passage: {text}"
        return text

    def embed(self, notes: Sequence[Note], batch_size: int = 32) -> dict[str, list[float]]:
        """Embedding vector for every note, keyed by note id."""
        vectors = self.cache.get_many(notes) if self.cache else {}
        missing = [n for n in notes if n.id not in vectors]
        logger.info(f"{len(vectors)} cached embedding(s), {len(missing)} to compute")

        if not missing:
            return vectors

        fresh: dict[str, list[float]] = {}
        with Progress(transient=True) as progress:
            task = progress.add_task("Embedding...", total=len(missing))
            for i in range(0, len(missing), batch_size):
                batch = missing[i:i + batch_size]
                encoded = self.model.encode([self._text(n) for n in batch]).tolist()
                for note, vector in zip(batch, encoded):
                    fresh[note.id] = vector
                progress.advance(task, len(batch))

        if self.cache:
            self.cache.put_many(missing, fresh)
        vectors.update(fresh)
        return vectors
