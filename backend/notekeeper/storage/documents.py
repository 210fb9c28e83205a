"""JSON-file document collections.

One directory per collection, one ``<id>.json`` file per document (under
``<partition value>/`` when the collection is partitioned). Writes go
through a temp file and ``Path.replace`` so a reader never sees a partial
document. Filters are plain dicts:

    {"user_id": uid, "trashed": False}              equality
    {"tags": "work"}                                 membership in a list field
    {"title": {"$regex": "abc", "$options": "i"}}    pattern
    {"reminder": {"$gte": now}}                      range ($gt, $gte, $lt, $lte)
    {"$or": [{...}, {...}]}                          alternatives
"""
from __future__ import annotations

import json
import os
import re
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

from notekeeper.core.exceptions import StoreUnavailableError, ValidationError
from notekeeper.core.logging import get_logger
from notekeeper.core.utils import as_utc

logger = get_logger(__name__)

Document = dict[str, Any]
Filter = dict[str, Any]

_RANGE_OPS = {
    "$gt": lambda a, b: a > b,
    "$gte": lambda a, b: a >= b,
    "$lt": lambda a, b: a < b,
    "$lte": lambda a, b: a <= b,
}


def encode_value(value: Any) -> Any:
    # fixed-width UTC timestamps keep string comparison chronological
    if isinstance(value, datetime):
        return as_utc(value).isoformat(timespec="microseconds")
    if isinstance(value, dict):
        return {k: encode_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    return value


def _match_operators(value: Any, ops: dict[str, Any]) -> bool:
    for op, arg in ops.items():
        if op == "$options":
            continue
        if op == "$regex":
            flags = re.IGNORECASE if "i" in ops.get("$options", "") else 0
            if not isinstance(value, str) or re.search(arg, value, flags) is None:
                return False
        elif op in _RANGE_OPS:
            if value is None or arg is None:
                return False
            if not _RANGE_OPS[op](value, arg):
                return False
        else:
            raise ValueError(f"Unsupported filter operator: {op}")
    return True


def matches(doc: Document, flt: Filter) -> bool:
    for key, cond in flt.items():
        if key == "$or":
            if not any(matches(doc, sub) for sub in cond):
                return False
            continue

        value = doc.get(key)
        if isinstance(cond, dict):
            if not _match_operators(value, cond):
                return False
        elif isinstance(value, list) and not isinstance(cond, list):
            if cond not in value:
                return False
        elif value != cond:
            return False
    return True


def _valid_id(doc_id: Any) -> bool:
    try:
        uuid.UUID(str(doc_id))
    except ValueError:
        return False
    return True


def _safe_partition(value: Any) -> bool:
    # avoid path traversal through partition values
    return (
        isinstance(value, str)
        and bool(value)
        and not any(ch in value for ch in "/\\")
        and ".." not in value
    )


class DocumentCollection:
    """A directory of documents, optionally split into one subdirectory per
    value of ``partition_by`` so filters on that field only read its files.
    """

    def __init__(
        self,
        base_dir: Path,
        name: str,
        unique: tuple[str, ...] = (),
        partition_by: str | None = None,
    ):
        self.path = base_dir / name
        self.name = name
        self.unique = unique
        self.partition_by = partition_by
        # serializes check-then-write sequences within this process
        self._lock = threading.RLock()

    def _doc_path(self, doc: Document) -> Path:
        if self.partition_by is None:
            return self.path / f"{doc['id']}.json"
        part = doc.get(self.partition_by)
        if not _safe_partition(part):
            raise ValidationError(f"Invalid {self.partition_by}")
        return self.path / part / f"{doc['id']}.json"

    def _write(self, doc: Document) -> None:
        path = self._doc_path(doc)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(path.suffix + ".tmp")
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(doc, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            tmp_path.replace(path)
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot write to {self.name}: {exc}") from exc

    def _read(self, path: Path) -> Document | None:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            # deleted between listing and reading
            return None
        except json.JSONDecodeError:
            logger.warning("corrupted_document_skipped", collection=self.name, path=str(path))
            return None
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot read from {self.name}: {exc}") from exc

    def _search_dirs(self, flt: Filter) -> list[Path]:
        if self.partition_by is None:
            return [self.path]
        part = flt.get(self.partition_by)
        if isinstance(part, str):
            return [self.path / part] if _safe_partition(part) else []
        if not self.path.exists():
            return []
        return sorted(p for p in self.path.iterdir() if p.is_dir())

    def _candidates(self, flt: Filter) -> list[Path]:
        doc_id = flt.get("id")
        if isinstance(doc_id, str):
            # direct lookup instead of a full scan
            if not _valid_id(doc_id):
                return []
            pattern = f"{doc_id}.json"
        else:
            pattern = "*.json"

        try:
            paths: list[Path] = []
            for directory in self._search_dirs(flt):
                if directory.exists():
                    paths.extend(sorted(directory.glob(pattern)))
            return paths
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot list {self.name}: {exc}") from exc

    def _scan(self, flt: Filter) -> Iterator[tuple[Path, Document]]:
        flt = encode_value(flt)
        for path in self._candidates(flt):
            doc = self._read(path)
            if doc is not None and matches(doc, flt):
                yield path, doc

    def insert_one(self, doc: Document) -> Document:
        doc = encode_value(doc)
        doc.setdefault("id", str(uuid.uuid4()))
        with self._lock:
            for field in self.unique:
                if any(True for _ in self._scan({field: doc.get(field)})):
                    raise FileExistsError(f"Duplicate {field} in {self.name}")
            self._write(doc)
        return doc

    def find(self, flt: Filter) -> list[Document]:
        return [doc for _, doc in self._scan(flt)]

    def find_one(self, flt: Filter) -> Document | None:
        for _, doc in self._scan(flt):
            return doc
        return None

    def find_one_and_update(self, flt: Filter, changes: Document) -> Document | None:
        """Apply ``changes`` to the first match and return the updated document."""
        with self._lock:
            doc = self.find_one(flt)
            if doc is None:
                return None
            doc.update(encode_value(changes))
            self._write(doc)
            return doc

    def delete_many(self, flt: Filter) -> int:
        deleted = 0
        with self._lock:
            for path, _ in list(self._scan(flt)):
                try:
                    path.unlink()
                except FileNotFoundError:
                    continue
                except OSError as exc:
                    raise StoreUnavailableError(f"Cannot delete from {self.name}: {exc}") from exc
                deleted += 1
        return deleted
