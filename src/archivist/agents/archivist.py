"""Archivist agent: organizes and connects notes.

Capabilities:
- suggestConnections: find notes that should be linked together
- detectDuplicates: find near-duplicate notes
- surfaceContradictions: find conflicting numeric claims
- suggestMerges: identify notes that could be combined

Each handler reads the note collection from the repository, runs the
matching pure detector and turns its results into suggestions.
"""

from typing import Any, Callable, Mapping, Sequence

from ..analysis import (
    detect_contradictions,
    detect_duplicates,
    detect_merge_candidates,
    suggest_connections,
)
from ..config import section
from ..models import AgentTask, Note, TaskResult
from ..storage import NoteRepository
from .tasks import TaskQueue, create_suggestion

AGENT_ID = "archivist"

EmbeddingSource = Mapping[str, Sequence[float]] | Callable[[Sequence[Note]], Mapping[str, Sequence[float]]]


def _notes_for(task: AgentTask, repository: NoteRepository) -> list[Note]:
    """All notes, or only those listed in the task's `note_ids` input."""
    notes = repository.list()
    wanted = task.input.get("note_ids")
    if wanted:
        wanted = set(wanted)
        notes = [n for n in notes if n.id in wanted]
    return notes


def _resolve_embeddings(source: EmbeddingSource | None, notes: Sequence[Note]) -> Mapping[str, Sequence[float]]:
    if source is None:
        raise ValueError("Embeddings are required for this capability")
    if callable(source):
        return source(notes)
    return source


def register_archivist(
    queue: TaskQueue,
    repository: NoteRepository,
    embeddings: EmbeddingSource | None = None,
    config: dict[str, Any] | None = None,
) -> None:
    """Register the archivist's task handlers on a queue.

    Args:
        queue: Queue to register on.
        repository: Where handlers read notes from.
        embeddings: Note id -> vector mapping, or a callable producing one
            from a list of notes. Needed by suggestConnections and
            detectDuplicates only.
        config: Application config; detector thresholds come from its
            sections.
    """
    config = config or {}

    def suggest_connections_handler(task: AgentTask) -> TaskResult:
        notes = _notes_for(task, repository)
        log = [f"Analyzing {len(notes)} notes for potential connections..."]
        vectors = _resolve_embeddings(embeddings, notes)
        log.append(f"Got embeddings for {len(vectors)} notes")

        suggestions = []
        for link in suggest_connections(notes, vectors, **section(config, "connections")):
            suggestions.append(create_suggestion(
                AGENT_ID,
                "connect_notes",
                f'Link "{link.source_title}" to "{link.target_title}"',
                f"These notes look related (similarity: {round(link.score * 100)}%)",
                {
                    "sourceNoteId": link.source_id,
                    "sourceNoteTitle": link.source_title,
                    "targetNoteId": link.target_id,
                    "targetNoteTitle": link.target_title,
                    "similarity": link.score,
                },
                3,
            ))
            log.append(f'Suggested linking "{link.source_title}" to "{link.target_title}"')

        return TaskResult(
            suggestions=suggestions,
            summary=f"Found {len(suggestions)} potential connections between notes",
            log=log,
        )

    def detect_duplicates_handler(task: AgentTask) -> TaskResult:
        notes = _notes_for(task, repository)
        log = [f"Analyzing {len(notes)} notes for duplicates..."]
        vectors = _resolve_embeddings(embeddings, notes)
        log.append(f"Got embeddings for {len(vectors)} notes")

        suggestions = []
        for pair in detect_duplicates(notes, vectors, **section(config, "duplicates")):
            percent = round(pair.score * 100)
            suggestions.append(create_suggestion(
                AGENT_ID,
                "remove_duplicate",
                f'Possible duplicate: "{pair.title_a}" and "{pair.title_b}"',
                f"These notes have {percent}% similarity and may contain duplicate content.",
                {
                    "note1Id": pair.note_a,
                    "note1Title": pair.title_a,
                    "note2Id": pair.note_b,
                    "note2Title": pair.title_b,
                    "similarity": pair.score,
                },
                2,
            ))
            log.append(f'Found {percent}% similarity between "{pair.title_a}" and "{pair.title_b}"')

        return TaskResult(
            suggestions=suggestions,
            summary=f"Found {len(suggestions)} potential duplicate notes",
            log=log,
        )

    def surface_contradictions_handler(task: AgentTask) -> TaskResult:
        notes = _notes_for(task, repository)
        log = [f"Analyzing {len(notes)} notes for contradictions..."]

        suggestions = []
        for c in detect_contradictions(notes, **section(config, "contradictions")):
            suggestions.append(create_suggestion(
                AGENT_ID,
                "contradiction",
                f"Possible contradiction about {c.unit}",
                f'"{c.title_a}" says "{c.claim_a}" but "{c.title_b}" says "{c.claim_b}". '
                "You may want to verify which is correct.",
                {
                    "note1Id": c.note_a,
                    "note1Title": c.title_a,
                    "note1Claim": c.claim_a,
                    "note2Id": c.note_b,
                    "note2Title": c.title_b,
                    "note2Claim": c.claim_b,
                    "topics": list(c.topics),
                },
                2,
            ))
            log.append(f'Found possible contradiction about {c.unit} between "{c.title_a}" and "{c.title_b}"')

        return TaskResult(
            suggestions=suggestions,
            summary=f"Found {len(suggestions)} potential contradictions",
            log=log,
        )

    def suggest_merges_handler(task: AgentTask) -> TaskResult:
        notes = _notes_for(task, repository)
        log = [f"Analyzing {len(notes)} notes for merge candidates..."]
        merges = section(config, "merges")

        suggestions = []
        for m in detect_merge_candidates(notes, **merges):
            if m.kind == "shared_prefix":
                title = f'Consider merging {len(m.note_ids)} "{m.prefix}" notes'
                priority = 3
            else:
                title = f'Similar titles: "{m.titles[0]}" and "{m.titles[1]}"'
                priority = 4
            payload: dict[str, Any] = {"noteIds": list(m.note_ids), "noteTitles": list(m.titles)}
            if m.prefix is not None:
                payload["prefix"] = m.prefix
            if m.score is not None:
                payload["similarity"] = m.score
            suggestions.append(create_suggestion(AGENT_ID, "merge_notes", title, m.reason, payload, priority))
            log.append(title)

        return TaskResult(
            suggestions=suggestions,
            summary=f"Found {len(suggestions)} potential merge candidates",
            log=log,
        )

    queue.register(AGENT_ID, "suggestConnections", suggest_connections_handler)
    queue.register(AGENT_ID, "detectDuplicates", detect_duplicates_handler)
    queue.register(AGENT_ID, "surfaceContradictions", surface_contradictions_handler)
    queue.register(AGENT_ID, "suggestMerges", suggest_merges_handler)
