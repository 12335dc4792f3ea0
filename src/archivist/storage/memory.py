"""In-memory note repository."""

from typing import Iterable

from ..models import Note
from .base import NoteRepository


class InMemoryNoteRepository(NoteRepository):
    """Holds notes in a dict keyed by id. Later notes replace earlier ones."""

    def __init__(self, notes: Iterable[Note] = ()):
        self._notes: dict[str, Note] = {}
        for note in notes:
            self.add(note)

    def add(self, note: Note) -> None:
        self._notes[note.id] = note

    def list(self) -> list[Note]:
        return list(self._notes.values())

    def get(self, note_id: str) -> Note | None:
        return self._notes.get(note_id)
