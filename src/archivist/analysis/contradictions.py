"""Surface conflicting numeric claims between related notes."""

import logging
from itertools import combinations
from typing import Sequence

from ..models import Claim, Contradiction, Note, TopicGroup
from .claims import claims_conflict, extract_claims
from .duplicates import pair_key
from .text import topic_keywords

logger = logging.getLogger(__name__)


def build_topic_groups(
    notes: Sequence[Note],
    min_keyword_length: int = 5,
    drop_stopwords: bool = True,
) -> list[TopicGroup]:
    """Group notes by each of their tags and each long title word.

    A note usually lands in several groups. Within a group every note id
    appears once, in input order.
    """
    groups: dict[str, TopicGroup] = {}

    def _add(key: str, note_id: str) -> None:
        group = groups.setdefault(key, TopicGroup(key=key))
        if note_id not in group.note_ids:
            group.note_ids.append(note_id)

    for note in notes:
        for tag in note.tags or []:
            tag = tag.strip()
            if tag:
                _add(tag, note.id)
        for keyword in topic_keywords(note.title, min_length=min_keyword_length, drop_stopwords=drop_stopwords):
            _add(keyword, note.id)

    return list(groups.values())


def detect_contradictions(
    notes: Sequence[Note],
    min_keyword_length: int = 5,
    min_group_size: int = 2,
    drop_stopwords: bool = True,
) -> list[Contradiction]:
    """Find claims about the same unit that disagree across notes.

    Claims are compared only within a topic group and never against claims
    from the same note. The same disagreement seen through several groups
    is reported once, with every group key listed in `topics`.
    """
    by_id = {note.id: note for note in notes}
    claims_by_note: dict[str, list[Claim]] = {}
    found: dict[tuple, Contradiction] = {}

    for group in build_topic_groups(notes, min_keyword_length, drop_stopwords):
        if len(group.note_ids) < min_group_size:
            continue

        claims: list[Claim] = []
        for note_id in group.note_ids:
            if note_id not in claims_by_note:
                claims_by_note[note_id] = extract_claims(by_id[note_id])
            claims.extend(claims_by_note[note_id])

        for c1, c2 in combinations(claims, 2):
            if not claims_conflict(c1, c2):
                continue

            if c1.note_id > c2.note_id:
                c1, c2 = c2, c1
            key = (*pair_key(c1.note_id, c2.note_id), c1.unit, c1.raw_text, c2.raw_text)
            if key in found:
                if group.key not in found[key].topics:
                    found[key].topics.append(group.key)
                continue

            a, b = by_id[c1.note_id], by_id[c2.note_id]
            found[key] = Contradiction(
                note_a=a.id,
                title_a=a.title,
                claim_a=c1.raw_text,
                note_b=b.id,
                title_b=b.title,
                claim_b=c2.raw_text,
                unit=c1.unit,
                topics=[group.key],
            )
            logger.debug(f"Possible contradiction about {c1.unit} between {a.title!r} and {b.title!r}")

    results = list(found.values())
    logger.info(f"Found {len(results)} possible contradiction(s) across {len(notes)} notes")
    return results
