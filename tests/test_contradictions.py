"""Tests for claim extraction and contradiction detection."""

from archivist.analysis.claims import claims_conflict, extract_claims
from archivist.analysis.contradictions import build_topic_groups, detect_contradictions
from archivist.models import Claim, Note


def _sales_notes():
    return [
        Note(id="n1", title="Sales Q1", tags=["revenue"], content="We made 50 percent margin"),
        Note(id="n2", title="Sales Q2", tags=["revenue"], content="We made 65 percent margin"),
    ]


def test_extract_claims():
    note = Note(id="n", title="t", content="We have 1,200 users and spent 3.5 hours on it.")
    claims = extract_claims(note)
    assert [c.numeric_value for c in claims] == ["1,200", "3.5"]
    assert [c.unit for c in claims] == ["users", "hours"]
    assert claims[0].raw_text == "1,200 users"
    assert all(c.note_id == "n" for c in claims)


def test_extract_claims_case_insensitive():
    claims = extract_claims(Note(id="n", title="t", content="About 40 Users signed up"))
    assert len(claims) == 1
    assert claims[0].unit == "users"


def test_extract_claims_unit_must_end_word():
    assert extract_claims(Note(id="n", title="t", content="a 5 percentage point rise")) == []


def test_claims_conflict_rules():
    a = Claim(note_id="a", raw_text="50 percent", numeric_value="50", unit="percent")
    b = Claim(note_id="b", raw_text="65 percent", numeric_value="65", unit="percent")
    same_note = Claim(note_id="a", raw_text="65 percent", numeric_value="65", unit="percent")
    other_unit = Claim(note_id="b", raw_text="65 users", numeric_value="65", unit="users")
    assert claims_conflict(a, b)
    assert not claims_conflict(a, same_note)
    assert not claims_conflict(a, other_unit)


def test_topic_groups():
    groups = {g.key: g.note_ids for g in build_topic_groups(_sales_notes())}
    assert groups["revenue"] == ["n1", "n2"]
    assert groups["sales"] == ["n1", "n2"]
    assert "q1" not in groups


def test_topic_groups_note_listed_once():
    note = Note(id="n1", title="Sales report", tags=["sales"], content="")
    groups = {g.key: g.note_ids for g in build_topic_groups([note])}
    assert groups["sales"] == ["n1"]


def test_sales_margin_contradiction():
    found = detect_contradictions(_sales_notes())
    assert len(found) == 1
    c = found[0]
    assert c.unit == "percent"
    assert (c.note_a, c.note_b) == ("n1", "n2")
    assert (c.claim_a, c.claim_b) == ("50 percent", "65 percent")
    assert set(c.topics) == {"revenue", "sales"}


def test_no_self_contradiction():
    notes = [
        Note(id="n1", title="Budget", tags=["ops"], content="We had 50 percent then 65 percent"),
        Note(id="n2", title="Other", tags=["ops"], content="No numbers here"),
    ]
    assert detect_contradictions(notes) == []


def test_equal_values_not_flagged():
    notes = [
        Note(id="n1", title="A", tags=["growth"], content="We reached 1,000 users"),
        Note(id="n2", title="B", tags=["growth"], content="Now at 1000 users"),
    ]
    assert detect_contradictions(notes) == []


def test_notes_in_different_groups_not_compared():
    notes = [
        Note(id="n1", title="Alpha", tags=["a"], content="50 percent"),
        Note(id="n2", title="Gamma", tags=["b"], content="65 percent"),
    ]
    assert detect_contradictions(notes) == []


def test_idempotent():
    notes = _sales_notes()
    assert detect_contradictions(notes) == detect_contradictions(notes)


def test_topic_groups_with_stopwords():
    notes = [
        Note(id="n1", title="Thoughts about pricing", content=""),
        Note(id="n2", title="About the launch", content=""),
    ]
    assert "about" not in {g.key for g in build_topic_groups(notes)}
    groups = {g.key: g.note_ids for g in build_topic_groups(notes, drop_stopwords=False)}
    assert groups["about"] == ["n1", "n2"]
