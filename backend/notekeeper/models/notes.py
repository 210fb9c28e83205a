from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    color: Optional[str] = None
    reminder: Optional[datetime] = None


class NoteUpdate(BaseModel):
    # every field is written back; anything omitted is cleared
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[list[str]] = None
    color: Optional[str] = None
    reminder: Optional[datetime] = None
    archived: Optional[bool] = None
    trashed: Optional[bool] = None


class NoteOut(BaseModel):
    id: str
    user_id: str
    title: Optional[str]
    content: Optional[str]
    tags: list[str]
    color: Optional[str]
    archived: bool
    trashed: bool
    trashed_at: Optional[datetime]
    created_at: datetime
    reminder: Optional[datetime]


class EmptyTrashOut(BaseModel):
    deleted: int
