"""Data models used throughout the archivist."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Note:
    """A note as owned by the calling application. Never mutated here."""
    id: str
    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class EmbeddingVector:
    """A precomputed embedding for one note."""
    note_id: str
    vector: list[float]


@dataclass
class Claim:
    """A numeric claim found in note text, e.g. '50 percent'."""
    note_id: str
    raw_text: str
    numeric_value: str
    unit: str


@dataclass
class TopicGroup:
    """Notes sharing a tag or a long title word."""
    key: str
    note_ids: list[str] = field(default_factory=list)


@dataclass
class Position:
    """A 2D canvas point tied to the entity that produced it."""
    x: float
    y: float
    owner_id: str


@dataclass
class ConceptNode:
    id: str
    related_ids: list[str] = field(default_factory=list)
    name: str = ""


@dataclass
class DuplicatePair:
    """Two notes whose embeddings are nearly identical. note_a < note_b."""
    note_a: str
    note_b: str
    title_a: str
    title_b: str
    score: float


@dataclass
class Contradiction:
    """Two claims about the same unit with different values."""
    note_a: str
    title_a: str
    claim_a: str
    note_b: str
    title_b: str
    claim_b: str
    unit: str
    topics: list[str] = field(default_factory=list)


@dataclass
class MergeCandidate:
    """Notes that could be combined.

    kind is "shared_prefix" or "similar_titles".
    """
    kind: str
    note_ids: list[str]
    titles: list[str]
    reason: str
    score: float | None = None
    prefix: str | None = None


@dataclass
class LinkSuggestion:
    source_id: str
    source_title: str
    target_id: str
    target_title: str
    score: float


@dataclass
class ActivityRegion:
    """A rectangle of canvas activity."""
    x: float
    y: float
    width: float
    height: float
    event_count: int
    owner_ids: list[str] = field(default_factory=list)


@dataclass
class HeatmapCell:
    x: float
    y: float
    intensity: float  # 0-1


@dataclass
class ConceptCluster:
    """A connected component of the concept graph."""
    concept_ids: list[str]

    @property
    def size(self) -> int:
        return len(self.concept_ids)


@dataclass
class Insight:
    """A short observation derived from activity data."""
    kind: str
    title: str
    description: str
    metric: float | None = None
    owner_ids: list[str] = field(default_factory=list)


@dataclass
class Suggestion:
    """An actionable suggestion emitted by an agent."""
    id: str
    agent_id: str
    type: str  # e.g. "remove_duplicate", "contradiction", "merge_notes"
    title: str
    description: str
    payload: dict[str, Any] = field(default_factory=dict)
    priority: int = 3  # 1 = highest
    status: str = "pending"
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class TaskResult:
    suggestions: list[Suggestion]
    summary: str
    log: list[str] = field(default_factory=list)


@dataclass
class AgentTask:
    """A unit of agent work. status: pending, running, completed, failed."""
    id: str
    agent_id: str
    capability_id: str
    input: dict[str, Any] = field(default_factory=dict)
    status: str = "pending"
    progress: int = 0
    result: TaskResult | None = None
    error: str | None = None
    created_at: datetime = field(default_factory=datetime.now)
    started_at: datetime | None = None
    completed_at: datetime | None = None
