"""Near-duplicate detection over note embeddings."""

import logging
from collections import Counter
from itertools import combinations
from typing import Mapping, Sequence

from ..models import DuplicatePair, Note
from .similarity import similarity_matrix

logger = logging.getLogger(__name__)


def pair_key(id_a: str, id_b: str) -> tuple[str, str]:
    """Order-independent key for an unordered pair of ids."""
    return (id_a, id_b) if id_a <= id_b else (id_b, id_a)


def select_embedded(
    notes: Sequence[Note],
    embeddings: Mapping[str, Sequence[float]],
    min_content_length: int = 0,
) -> tuple[list[Note], list[Sequence[float]]]:
    """Pick the notes that can be compared, sorted by id.

    Notes that are too short, have no (or an empty) embedding, or whose
    embedding length differs from the most common length are left out.
    """
    candidates = []
    seen = set()
    for note in sorted(notes, key=lambda n: n.id):
        if note.id in seen:
            continue
        seen.add(note.id)
        if len(note.content) < min_content_length:
            continue
        vector = embeddings.get(note.id)
        if vector is None or len(vector) == 0:
            logger.debug(f"No embedding for note {note.id}, skipping")
            continue
        candidates.append((note, vector))

    if not candidates:
        return [], []

    dims = Counter(len(v) for _, v in candidates)
    dim, _ = dims.most_common(1)[0]
    kept = [(n, v) for n, v in candidates if len(v) == dim]
    if len(kept) < len(candidates):
        dropped = [n.id for n, v in candidates if len(v) != dim]
        logger.warning(f"Skipping {len(dropped)} note(s) with embedding dimension != {dim}: {dropped}")

    return [n for n, _ in kept], [v for _, v in kept]


def detect_duplicates(
    notes: Sequence[Note],
    embeddings: Mapping[str, Sequence[float]],
    threshold: float = 0.85,
    min_content_length: int = 50,
) -> list[DuplicatePair]:
    """Find pairs of notes whose embeddings are at least `threshold` similar.

    Args:
        notes: Notes to compare. Input order does not affect the result.
        embeddings: Note id -> embedding vector.
        threshold: Minimum cosine similarity to report.
        min_content_length: Shorter notes are skipped; their embeddings are
            unreliable.

    Returns:
        One DuplicatePair per unordered pair, sorted by descending score.
    """
    kept, vectors = select_embedded(notes, embeddings, min_content_length)
    if len(kept) < 2:
        return []

    sims = similarity_matrix(vectors)
    pairs = []
    for i, j in combinations(range(len(kept)), 2):
        score = float(sims[i, j])
        if score < threshold:
            continue
        a, b = kept[i], kept[j]
        pairs.append(DuplicatePair(
            note_a=a.id,
            note_b=b.id,
            title_a=a.title,
            title_b=b.title,
            score=score,
        ))
        logger.debug(f"Duplicate candidate {a.id} ↔ {b.id} ({score:.3f})")

    pairs.sort(key=lambda p: (-p.score, p.note_a, p.note_b))
    logger.info(f"Compared {len(kept)} notes, found {len(pairs)} duplicate pair(s)")
    return pairs
