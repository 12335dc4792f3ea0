"""Read notes from a folder of markdown files (an Obsidian-style vault)."""

import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from ..models import Note
from .base import NoteRepository

logger = logging.getLogger(__name__)

FRONTMATTER_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)
HEADING_PATTERN = re.compile(r"^#\s+(.+)$", re.MULTILINE)


def _parse_tags(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(",")
    tags = [str(t).strip().lstrip("#") for t in value]
    return [t for t in tags if t]


def _parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def parse_note(text: str, note_id: str, fallback_title: str) -> Note:
    """Build a Note from markdown text with optional YAML frontmatter."""
    metadata: dict[str, Any] = {}
    fm_match = FRONTMATTER_PATTERN.match(text)
    if fm_match:
        try:
            loaded = yaml.safe_load(fm_match.group(1)) or {}
            if isinstance(loaded, dict):
                metadata = loaded
        except yaml.YAMLError as e:
            logger.warning(f"Invalid frontmatter in {note_id}: {e}")
        content = text[fm_match.end():]
    else:
        content = text

    title = metadata.get("title")
    if not title:
        heading = HEADING_PATTERN.search(content)
        title = heading.group(1).strip() if heading else fallback_title

    return Note(
        id=str(metadata.get("id") or note_id),
        title=str(title),
        content=content,
        tags=_parse_tags(metadata.get("tags")),
        created_at=_parse_datetime(metadata.get("created")),
        updated_at=_parse_datetime(metadata.get("updated")),
    )


class VaultNoteRepository(NoteRepository):
    """Notes stored as *.md files under a vault directory.

    The note id is the frontmatter `id`, or else the vault-relative path
    without its suffix. Files are re-read on every call.
    """

    def __init__(self, vault_path: str | Path):
        self.vault_path = Path(vault_path)

    def _load(self) -> dict[str, Note]:
        notes: dict[str, Note] = {}
        if not self.vault_path.exists():
            return notes

        for md_file in sorted(self.vault_path.rglob("*.md")):
            if md_file.name.startswith("."):
                continue
            rel_id = md_file.relative_to(self.vault_path).with_suffix("").as_posix()
            text = md_file.read_text(encoding="utf-8", errors="replace")
            note = parse_note(text, rel_id, md_file.stem)
            if note.updated_at is None:
                note.updated_at = datetime.fromtimestamp(md_file.stat().st_mtime)
            if note.id in notes:
                logger.warning(f"Duplicate note id {note.id!r} in {md_file}, keeping the first")
                continue
            notes[note.id] = note
        return notes

    def list(self) -> list[Note]:
        return list(self._load().values())

    def get(self, note_id: str) -> Note | None:
        return self._load().get(note_id)
