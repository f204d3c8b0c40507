"""
Service layer for notes: validación de campos y acotamiento por dueño.

Una nota de otro usuario (o un id mal formado) se reporta como `NotFound`,
nunca como prohibida, para no filtrar su existencia.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from marksense.api.schemas.note import (
    CONTENT_MAX_CHARS,
    MAX_TAGS,
    TITLE_MAX_CHARS,
    NoteOut,
    NoteUpdate,
    normalize_tags,
)
from marksense.core.exceptions import NotFound, ValidationError
from marksense.core.time import iso_utc, now_utc
from marksense.repositories.note_repo import NoteRepository

NOTE_NOT_FOUND = "Note not found"

_log = logging.getLogger("marksense.notes")


def _clean_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise ValidationError("Title is required")
    if len(title) > TITLE_MAX_CHARS:
        raise ValidationError(f"Title cannot exceed {TITLE_MAX_CHARS} characters")
    return title


def _check_content(content: str) -> str:
    if not content:
        raise ValidationError("Content is required")
    if len(content) > CONTENT_MAX_CHARS:
        raise ValidationError(f"Content cannot exceed {CONTENT_MAX_CHARS} characters")
    return content


def _clean_tags(tags: Optional[List[str]]) -> List[str]:
    if tags and len(tags) > MAX_TAGS:
        raise ValidationError(f"Cannot have more than {MAX_TAGS} tags")
    return normalize_tags(tags)


class NoteService:
    def __init__(self, notes: NoteRepository, *, clock: Callable[[], datetime] = now_utc) -> None:
        self._notes = notes
        self._clock = clock

    async def list(self, owner_id: str) -> List[NoteOut]:
        docs = await self._notes.list_by_owner(owner_id)
        return [NoteOut.from_doc(d) for d in docs]

    async def get(self, owner_id: str, note_id: str) -> NoteOut:
        doc = await self._notes.get_owned(note_id, owner_id)
        if not doc:
            raise NotFound(NOTE_NOT_FOUND)
        return NoteOut.from_doc(doc)

    async def create(
        self,
        owner_id: str,
        title: Optional[str],
        content: Optional[str],
        tags: Optional[List[str]] = None,
    ) -> NoteOut:
        if not title or not title.strip() or not content:
            raise ValidationError("Title and content are required")
        now = iso_utc(self._clock())
        doc: Dict[str, Any] = {
            "user_id": owner_id,
            "title": _clean_title(title),
            "content": _check_content(content),
            "tags": _clean_tags(tags),
            "created_at": now,
            "updated_at": now,
        }
        saved = await self._notes.insert(doc)
        _log.info("Nota creada note_id=%s user_id=%s", saved["_id"], owner_id)
        return NoteOut.from_doc(saved)

    async def update(self, owner_id: str, note_id: str, patch: NoteUpdate) -> NoteOut:
        """Aplica sólo los campos presentes; `tags` presente reemplaza la lista completa.

        La nota se busca antes de validar: una nota ajena o inexistente siempre es 404.
        """
        if not await self._notes.get_owned(note_id, owner_id):
            raise NotFound(NOTE_NOT_FOUND)
        changes = patch.changes()
        fields: Dict[str, Any] = {}
        if "title" in changes:
            fields["title"] = _clean_title(changes["title"])
        if "content" in changes:
            fields["content"] = _check_content(changes["content"])
        if "tags" in changes:
            fields["tags"] = _clean_tags(changes["tags"])
        fields["updated_at"] = iso_utc(self._clock())

        doc = await self._notes.update_owned(note_id, owner_id, fields)
        if not doc:
            raise NotFound(NOTE_NOT_FOUND)
        _log.info("Nota actualizada note_id=%s campos=%s", note_id, sorted(changes))
        return NoteOut.from_doc(doc)

    async def delete(self, owner_id: str, note_id: str) -> None:
        if not await self._notes.delete_owned(note_id, owner_id):
            raise NotFound(NOTE_NOT_FOUND)
        _log.info("Nota eliminada note_id=%s user_id=%s", note_id, owner_id)
