# bizdocs/infrastructure/store/document_store.py
"""
CRUD for saved invoices, challans and letters.

Records of one kind are kept as a JSON array under a single backend key.
The store never raises on I/O: unreadable data lists as empty, and a failed
write returns ``None`` (add/update) or ``False`` (remove) after logging.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ValidationError

from bizdocs.core.config import settings
from bizdocs.domain.models.documents import Document, advance_timestamp, new_document_id, parse_document, utcnow
from bizdocs.domain.models.enums import DocumentKind
from bizdocs.infrastructure.store.backends import (
    InMemoryBackend,
    JsonFileBackend,
    KeyValueBackend,
    RedisBackend,
)

logger = logging.getLogger("store")

STORAGE_KEYS: dict[DocumentKind, str] = {
    DocumentKind.INVOICE: "invoices",
    DocumentKind.CHALLAN: "challans",
    DocumentKind.LETTER: "letterPads",
}

# Never overwritten by update()
PROTECTED_FIELDS = ("id", "kind", "created_at")


class DocumentStore:
    def __init__(self, backend: KeyValueBackend):
        self.backend = backend

    # ---- raw records ----

    def _read(self, kind: DocumentKind) -> list[dict[str, Any]]:
        key = STORAGE_KEYS[kind]
        try:
            raw = self.backend.get(key)
        except Exception:
            logger.exception("Error reading %s from store", key)
            return []
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except ValueError as exc:
            logger.error("Error decoding %s from store: %s", key, exc)
            return []
        if not isinstance(records, list):
            logger.error("Stored %s is not a list; ignoring it", key)
            return []
        return [record for record in records if isinstance(record, dict)]

    def _write(self, kind: DocumentKind, records: list[dict[str, Any]]) -> bool:
        key = STORAGE_KEYS[kind]
        try:
            self.backend.set(key, json.dumps(records, ensure_ascii=False))
        except Exception:
            logger.exception("Error saving %s to store", key)
            return False
        return True

    @staticmethod
    def _parse(kind: DocumentKind, record: Mapping[str, Any]) -> Optional[Document]:
        try:
            return parse_document(dict(record), kind)
        except ValidationError as exc:
            logger.warning("Skipping malformed %s record %s: %s", kind.value, record.get("id"), exc)
            return None

    # ---- CRUD ----

    def list(self, kind: DocumentKind | str) -> list[Document]:
        kind = DocumentKind(kind)
        documents = (self._parse(kind, record) for record in self._read(kind))
        return [doc for doc in documents if doc is not None]

    def get(self, kind: DocumentKind | str, document_id: str) -> Optional[Document]:
        kind = DocumentKind(kind)
        for record in self._read(kind):
            if record.get("id") == document_id:
                return self._parse(kind, record)
        return None

    def add(self, kind: DocumentKind | str, document: Document | Mapping[str, Any]) -> Optional[Document]:
        """Save a new document under a fresh id with fresh timestamps."""
        kind = DocumentKind(kind)
        data = document.model_dump() if isinstance(document, BaseModel) else dict(document)
        now = utcnow()
        data.update(id=new_document_id(), created_at=now, updated_at=now)
        saved = parse_document(data, kind)

        records = self._read(kind)
        records.append(saved.model_dump(mode="json"))
        if not self._write(kind, records):
            return None
        logger.info("Added %s %s", kind.value, saved.id)
        return saved

    def update(self, kind: DocumentKind | str, document_id: str, changes: Mapping[str, Any]) -> Optional[Document]:
        """
        Merge ``changes`` into a stored document.

        Keys may be field names or their camelCase aliases. ``id``, ``kind``
        and ``created_at`` are kept as stored; ``updated_at`` always advances.
        Returns ``None`` if the id is unknown, a key matches no field, or
        saving fails.
        """
        kind = DocumentKind(kind)
        records = self._read(kind)
        for index, record in enumerate(records):
            if record.get("id") == document_id:
                break
        else:
            logger.info("No %s with id %s to update", kind.value, document_id)
            return None

        current = self._parse(kind, records[index])
        if current is None:
            return None

        renamed, unknown = type(current).field_names_for(changes)
        if unknown:
            logger.warning("Rejected %s update for %s: unknown fields %s", kind.value, document_id, ", ".join(unknown))
            return None

        merged = current.model_dump()
        merged.update({name: value for name, value in renamed.items() if name not in PROTECTED_FIELDS})
        merged["updated_at"] = advance_timestamp(current.updated_at)
        updated = parse_document(merged, kind)

        records[index] = updated.model_dump(mode="json")
        if not self._write(kind, records):
            return None
        logger.info("Updated %s %s", kind.value, document_id)
        return updated

    def remove(self, kind: DocumentKind | str, document_id: str) -> bool:
        kind = DocumentKind(kind)
        records = self._read(kind)
        remaining = [record for record in records if record.get("id") != document_id]
        if len(remaining) == len(records):
            return False
        if not self._write(kind, remaining):
            return False
        logger.info("Removed %s %s", kind.value, document_id)
        return True


# ---------------------------------------------------------------------------
# Process-wide store
# ---------------------------------------------------------------------------

def build_backend(backend: str, *, path: str = "", redis_url: str = "", prefix: str = "") -> KeyValueBackend:
    name = (backend or "").strip().lower()
    if name == "memory":
        return InMemoryBackend()
    if name == "file":
        return JsonFileBackend(path)
    if name == "redis":
        return RedisBackend(redis_url, prefix=prefix)
    raise ValueError(f"Unknown STORE_BACKEND {backend!r} (expected file, memory or redis)")


document_store: DocumentStore | None = None


def get_document_store() -> DocumentStore:
    global document_store
    if document_store is None:
        document_store = DocumentStore(
            build_backend(
                settings.STORE_BACKEND,
                path=settings.STORE_PATH,
                redis_url=settings.REDIS_URL,
                prefix=settings.STORE_KEY_PREFIX,
            )
        )
    return document_store
