"""Identify notes that could be combined."""

import logging
import re
from itertools import combinations
from typing import Sequence

from ..models import MergeCandidate, Note
from .similarity import jaccard_similarity
from .text import title_words

logger = logging.getLogger(__name__)

# Text before the first colon, hyphen or en dash, e.g. "Meeting: Q3 plan"
PREFIX_PATTERN = re.compile(r"^([^:–-]+)[:–-]\s*")


def title_prefix(title: str) -> str | None:
    """Case-folded prefix of a 'Prefix: rest' style title, if any."""
    match = PREFIX_PATTERN.match(title)
    if not match:
        return None
    prefix = match.group(1).strip().casefold()
    return prefix or None


def shared_prefix_groups(
    notes: Sequence[Note],
    min_group_size: int = 3,
    short_note_length: int = 500,
) -> list[MergeCandidate]:
    """Groups of short notes that share a title prefix."""
    groups: dict[str, list[Note]] = {}
    for note in notes:
        prefix = title_prefix(note.title)
        if prefix:
            groups.setdefault(prefix, []).append(note)

    candidates = []
    for prefix, group in groups.items():
        if len(group) < min_group_size:
            continue
        short = [n for n in group if len(n.content) < short_note_length]
        if len(short) < min_group_size:
            continue
        candidates.append(MergeCandidate(
            kind="shared_prefix",
            note_ids=[n.id for n in short],
            titles=[n.title for n in short],
            reason=(
                f'{len(short)} short notes share the "{prefix}" prefix. '
                "Consolidating them might make the information easier to find."
            ),
            prefix=prefix,
        ))
        logger.debug(f"Prefix group {prefix!r}: {len(short)} short notes")
    return candidates


def similar_titles(
    notes: Sequence[Note],
    threshold: float = 0.8,
    min_word_length: int = 3,
    drop_stopwords: bool = True,
) -> list[MergeCandidate]:
    """Pairs of notes whose titles share almost all of their words."""
    words = [title_words(n.title, min_word_length, drop_stopwords) for n in notes]
    candidates = []
    for i, j in combinations(range(len(notes)), 2):
        a, b = notes[i], notes[j]
        if a.id == b.id or a.title == b.title:
            continue
        score = jaccard_similarity(words[i], words[j])
        if score <= threshold:
            continue
        candidates.append(MergeCandidate(
            kind="similar_titles",
            note_ids=[a.id, b.id],
            titles=[a.title, b.title],
            reason="These notes have very similar titles and might cover the same topic.",
            score=score,
        ))
        logger.debug(f"Similar titles {a.title!r} / {b.title!r} ({score:.2f})")
    return candidates


def detect_merge_candidates(
    notes: Sequence[Note],
    title_threshold: float = 0.8,
    min_title_word_length: int = 3,
    min_group_size: int = 3,
    short_note_length: int = 500,
    drop_stopwords: bool = True,
) -> list[MergeCandidate]:
    """Prefix groups followed by similar-title pairs.

    The two lists are concatenated as-is: a pair of notes may show up once
    per heuristic.
    """
    results = shared_prefix_groups(notes, min_group_size, short_note_length)
    results += similar_titles(notes, title_threshold, min_title_word_length, drop_stopwords)
    logger.info(f"Found {len(results)} merge candidate(s) across {len(notes)} notes")
    return results
