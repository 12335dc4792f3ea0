"""Suggest wikilinks between notes that are related but not yet connected."""

import logging
import re
from typing import Mapping, Sequence

import numpy as np

from ..models import LinkSuggestion, Note
from .duplicates import select_embedded
from .similarity import similarity_matrix

logger = logging.getLogger(__name__)

WIKILINK_PATTERN = re.compile(r"\[\[([^\]|]+)(?:\|[^\]]+)?\]\]")


def find_wikilinks(text: str) -> list[str]:
    """Targets of [[Target]] and [[Target|alias]] links, in order."""
    return [t.strip() for t in WIKILINK_PATTERN.findall(text)]


def _links_to(note: Note, title: str) -> bool:
    return title.casefold() in {t.casefold() for t in find_wikilinks(note.content)}


def suggest_connections(
    notes: Sequence[Note],
    embeddings: Mapping[str, Sequence[float]],
    min_content_length: int = 100,
    max_notes: int = 10,
    max_per_note: int = 3,
    min_similarity: float = 0.5,
) -> list[LinkSuggestion]:
    """Rank link targets for notes that have no outgoing wikilinks.

    Only the first `max_notes` unlinked notes (by id) are examined. For each
    one, up to `max_per_note` other notes are suggested, most similar first,
    skipping pairs already linked in either direction.
    """
    kept, vectors = select_embedded(notes, embeddings)
    if len(kept) < 2:
        return []

    sims = similarity_matrix(vectors)
    index = {note.id: i for i, note in enumerate(kept)}

    unlinked = [
        n for n in kept
        if len(n.content) > min_content_length and not find_wikilinks(n.content)
    ]
    logger.info(f"Found {len(unlinked)} note(s) without outgoing links")

    suggestions = []
    for note in unlinked[:max_notes]:
        i = index[note.id]
        # Stable sort keeps id order among equal scores
        order = np.argsort(-sims[i], kind="stable")
        picked = 0
        for j in order:
            if picked >= max_per_note:
                break
            target = kept[j]
            score = float(sims[i, j])
            if target.id == note.id:
                continue
            if score < min_similarity:
                break
            if _links_to(note, target.title) or _links_to(target, note.title):
                continue
            suggestions.append(LinkSuggestion(
                source_id=note.id,
                source_title=note.title,
                target_id=target.id,
                target_title=target.title,
                score=score,
            ))
            picked += 1
    return suggestions
