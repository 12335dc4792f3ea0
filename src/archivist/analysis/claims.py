"""Extract numeric claims ('50 percent', '1,200 users') from note text.

The unit vocabulary is fixed. Matching is approximate: it finds a number
followed by a unit word, nothing more.
"""

import re
from decimal import Decimal, InvalidOperation

from ..models import Claim, Note
from .text import unit_phrase

UNITS = (
    "percent", "%", "dollars?", r"\$", "euros?", "pounds?", "users?",
    "customers?", "employees?", "people", "items?", "hours?", "days?",
    "weeks?", "months?", "years?",
)

CLAIM_PATTERN = re.compile(
    r"(\d+(?:,\d{3})*(?:\.\d+)?)\s+(" + "|".join(UNITS) + r")(?![a-z])",
    re.IGNORECASE,
)


def extract_claims(note: Note) -> list[Claim]:
    """Numeric claims in a note's content, in text order."""
    claims = []
    for match in CLAIM_PATTERN.finditer(note.content):
        raw = match.group(0)
        value = match.group(1)
        claims.append(Claim(
            note_id=note.id,
            raw_text=raw,
            numeric_value=value,
            unit=unit_phrase(raw.replace(value, "", 1)),
        ))
    return claims


def _as_number(value: str) -> Decimal | None:
    try:
        return Decimal(value.replace(",", ""))
    except InvalidOperation:
        return None


def claims_conflict(a: Claim, b: Claim) -> bool:
    """True when two claims from different notes disagree about one unit."""
    if a.note_id == b.note_id:
        return False
    if a.unit != b.unit:
        return False
    num_a, num_b = _as_number(a.numeric_value), _as_number(b.numeric_value)
    if num_a is None or num_b is None:
        return a.numeric_value != b.numeric_value
    return num_a != num_b
