"""Storage abstraction for note collections."""

from .base import NoteRepository, get_note_repository
from .memory import InMemoryNoteRepository
from .vault import VaultNoteRepository

__all__ = ["InMemoryNoteRepository", "NoteRepository", "VaultNoteRepository", "get_note_repository"]
