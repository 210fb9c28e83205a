from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Optional

from notekeeper.core.exceptions import NotFoundError, ValidationError
from notekeeper.core.logging import get_logger
from notekeeper.core.utils import as_utc, utc_now
from notekeeper.storage.documents import Document, DocumentCollection, Filter

logger = get_logger(__name__)

Clock = Callable[[], datetime]

DEFAULT_TRASH_RETENTION = timedelta(days=30)


def _parse_dt(s: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(s) if s else None


@dataclass(frozen=True)
class Note:
    id: str
    user_id: str
    title: Optional[str]
    content: Optional[str]
    tags: list[str] = field(default_factory=list)
    color: Optional[str] = None
    archived: bool = False
    trashed: bool = False
    trashed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    reminder: Optional[datetime] = None

    @classmethod
    def from_document(cls, raw: Document) -> "Note":
        return cls(
            id=raw["id"],
            user_id=raw["user_id"],
            title=raw.get("title"),
            content=raw.get("content"),
            tags=list(raw.get("tags") or []),
            color=raw.get("color"),
            archived=bool(raw.get("archived")),
            trashed=bool(raw.get("trashed")),
            trashed_at=_parse_dt(raw.get("trashed_at")),
            created_at=_parse_dt(raw.get("created_at")),
            reminder=_parse_dt(raw.get("reminder")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "color": self.color,
            "archived": self.archived,
            "trashed": self.trashed,
            "trashed_at": self.trashed_at,
            "created_at": self.created_at,
            "reminder": self.reminder,
        }


class OwnerScope:
    """The only way note operations reach the collection.

    Every filter passed through here is narrowed to ``user_id == owner`` so a
    note belonging to another user is indistinguishable from a missing one.
    """

    def __init__(self, collection: DocumentCollection, owner_user_id: str):
        if not owner_user_id:
            raise ValidationError("Owner is required")
        self.collection = collection
        self.owner_user_id = owner_user_id

    def _scoped(self, flt: Filter) -> Filter:
        return {**flt, "user_id": self.owner_user_id}

    def insert(self, doc: Document) -> Document:
        return self.collection.insert_one({**doc, "user_id": self.owner_user_id})

    def find(self, flt: Filter) -> list[Document]:
        return self.collection.find(self._scoped(flt))

    def find_one(self, flt: Filter) -> Optional[Document]:
        return self.collection.find_one(self._scoped(flt))

    def find_one_and_update(self, flt: Filter, changes: Document) -> Optional[Document]:
        return self.collection.find_one_and_update(self._scoped(flt), changes)

    def delete_many(self, flt: Filter) -> int:
        return self.collection.delete_many(self._scoped(flt))


def _sorted_notes(docs: list[Document]) -> list[Note]:
    # insertion order
    docs = sorted(docs, key=lambda d: (d.get("created_at") or "", d["id"]))
    return [Note.from_document(d) for d in docs]


class NotesStore:
    def __init__(
        self,
        base_dir: Path,
        clock: Clock = utc_now,
        trash_retention: timedelta = DEFAULT_TRASH_RETENTION,
    ):
        self.collection = DocumentCollection(base_dir, "notes", partition_by="user_id")
        self.clock = clock
        self.trash_retention = trash_retention

    def scope(self, user_id: str) -> OwnerScope:
        return OwnerScope(self.collection, user_id)

    def create_note(
        self,
        user_id: str,
        title: Optional[str],
        content: Optional[str],
        tags: Optional[list[str]] = None,
        color: Optional[str] = None,
        reminder: Optional[datetime] = None,
    ) -> Note:
        raw = self.scope(user_id).insert({
            "title": title,
            "content": content,
            "tags": list(tags or []),
            "color": color,
            "archived": False,
            "trashed": False,
            "trashed_at": None,
            "created_at": self.clock(),
            "reminder": as_utc(reminder),
        })
        note = Note.from_document(raw)
        logger.info("note_created", user_id=user_id, note_id=note.id)
        return note

    def get_note(self, user_id: str, note_id: str) -> Note:
        raw = self.scope(user_id).find_one({"id": note_id})
        if raw is None:
            raise NotFoundError()
        return Note.from_document(raw)

    def list_notes(self, user_id: str) -> list[Note]:
        return _sorted_notes(self.scope(user_id).find({"trashed": False}))

    def search_notes(self, user_id: str, query: Optional[str]) -> list[Note]:
        """Case-insensitive regular-expression match on title or content."""
        flt: Filter = {"trashed": False}
        if query:
            try:
                re.compile(query)
            except re.error as exc:
                raise ValidationError(f"Invalid search pattern: {exc}") from None
            pattern = {"$regex": query, "$options": "i"}
            flt["$or"] = [{"title": pattern}, {"content": pattern}]
        return _sorted_notes(self.scope(user_id).find(flt))

    def list_archived(self, user_id: str) -> list[Note]:
        # trashed notes are deliberately not excluded here
        return _sorted_notes(self.scope(user_id).find({"archived": True}))

    def list_by_tag(self, user_id: str, tag: str) -> list[Note]:
        return _sorted_notes(self.scope(user_id).find({"tags": tag, "trashed": False}))

    def list_trashed(self, user_id: str) -> list[Note]:
        return _sorted_notes(self.scope(user_id).find({"trashed": True}))

    def list_reminders(self, user_id: str) -> list[Note]:
        return _sorted_notes(self.scope(user_id).find({
            "trashed": False,
            "reminder": {"$gte": self.clock()},
        }))

    def update_note(
        self,
        user_id: str,
        note_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[list[str]] = None,
        color: Optional[str] = None,
        reminder: Optional[datetime] = None,
        archived: Optional[bool] = None,
        trashed: Optional[bool] = None,
    ) -> Note:
        """Overwrite every editable field; omitted ones are cleared, not kept.

        Omitted title, content, color and reminder are written as ``None``,
        omitted tags as ``[]`` and omitted ``archived`` / ``trashed`` as
        ``False``. ``trashed_at`` and ``created_at`` are never written here.
        """
        raw = self.scope(user_id).find_one_and_update({"id": note_id}, {
            "title": title,
            "content": content,
            "tags": list(tags or []),
            "color": color,
            "reminder": as_utc(reminder),
            "archived": bool(archived),
            "trashed": bool(trashed),
        })
        if raw is None:
            raise NotFoundError()
        return Note.from_document(raw)

    def trash_note(self, user_id: str, note_id: str) -> Note:
        raw = self.scope(user_id).find_one_and_update(
            {"id": note_id},
            {"trashed": True, "trashed_at": self.clock()},
        )
        if raw is None:
            raise NotFoundError()
        logger.info("note_trashed", user_id=user_id, note_id=note_id)
        return Note.from_document(raw)

    def empty_trash(self, user_id: str) -> int:
        deleted = self.scope(user_id).delete_many({"trashed": True})
        logger.info("trash_emptied", user_id=user_id, deleted=deleted)
        return deleted

    def purge_expired_trash(self, now: Optional[datetime] = None) -> int:
        """Delete, across all owners, notes trashed at least ``trash_retention`` ago."""
        cutoff = (now or self.clock()) - self.trash_retention
        deleted = self.collection.delete_many({
            "trashed": True,
            "trashed_at": {"$lte": cutoff},
        })
        logger.info("expired_trash_purged", deleted=deleted, cutoff=cutoff.isoformat())
        return deleted
