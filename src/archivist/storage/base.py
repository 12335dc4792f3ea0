"""Abstract base class for note repositories and factory function."""

from abc import ABC, abstractmethod
from typing import Any

from ..models import Note


class NoteRepository(ABC):
    """Read access to a note collection."""

    @abstractmethod
    def list(self) -> list[Note]:
        """All notes, in a stable order."""

    @abstractmethod
    def get(self, note_id: str) -> Note | None:
        """A single note, or None if no note has this id."""


def get_note_repository(config: dict[str, Any]) -> NoteRepository:
    """Factory: return the right repository based on config."""
    backend = config.get("storage_backend", "vault")

    if backend == "vault":
        from .vault import VaultNoteRepository
        return VaultNoteRepository(config["vault_path"])
    elif backend == "memory":
        from .memory import InMemoryNoteRepository
        return InMemoryNoteRepository()
    else:
        raise ValueError(f"Unknown storage_backend: {backend}")
