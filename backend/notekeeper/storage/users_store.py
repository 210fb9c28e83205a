from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from notekeeper.core.exceptions import DuplicateUsernameError
from notekeeper.core.utils import utc_now
from notekeeper.storage.documents import DocumentCollection


@dataclass(frozen=True)
class UserRecord:
    id: str
    username: str
    hashed_password: str
    created_at: str

    @classmethod
    def from_document(cls, raw: dict[str, Any]) -> "UserRecord":
        return cls(
            id=raw["id"],
            username=raw["username"],
            hashed_password=raw["hashed_password"],
            created_at=raw["created_at"],
        )


class UsersStore:
    def __init__(self, base_dir: Path):
        self.collection = DocumentCollection(base_dir, "users", unique=("username",))

    def get_by_username(self, username: str) -> Optional[UserRecord]:
        raw = self.collection.find_one({"username": username})
        if raw is None:
            return None
        return UserRecord.from_document(raw)

    def create(self, username: str, hashed_password: str) -> UserRecord:
        try:
            raw = self.collection.insert_one({
                "username": username,
                "hashed_password": hashed_password,
                "created_at": utc_now(),
            })
        except FileExistsError:
            raise DuplicateUsernameError() from None
        return UserRecord.from_document(raw)
