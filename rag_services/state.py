"""
In-memory document and settings stores.

Neither store locks; the owning service serializes access to them together
with the vector index.
"""
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pydantic

from core.errors import NotFoundError, ValidationError
from models.rag_model import DocumentRecord, RuntimeSettings


class DocumentStore:
    """Ordered collection of trained document records."""

    def __init__(self):
        self._records: List[DocumentRecord] = []
        self._last_id = 0

    def new_id(self) -> str:
        """Millisecond timestamp id, bumped so ids stay strictly increasing."""
        candidate = int(time.time() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def add(self, document_id: str, name: str, chunks: int, pages: int, size: int) -> DocumentRecord:
        record = DocumentRecord(
            id=document_id,
            name=name,
            uploaded_at=datetime.now(timezone.utc),
            chunks=chunks,
            pages=pages,
            size=size,
        )
        self._records.append(record)
        return record

    def remove(self, document_id: str) -> DocumentRecord:
        for index, record in enumerate(self._records):
            if record.id == document_id:
                return self._records.pop(index)
        raise NotFoundError("Document not found")

    def list(self) -> List[DocumentRecord]:
        return list(self._records)

    def is_empty(self) -> bool:
        return not self._records

    def total_chunks(self) -> int:
        return sum(record.chunks for record in self._records)

    def last_updated(self) -> Optional[datetime]:
        return self._records[-1].uploaded_at if self._records else None

    def __len__(self) -> int:
        return len(self._records)


class SettingsStore:
    """Single mutable settings record with shallow-merge updates."""

    def __init__(self, initial: Optional[RuntimeSettings] = None):
        self._settings = initial or RuntimeSettings()

    def get(self) -> RuntimeSettings:
        return self._settings

    def update(self, partial: Dict[str, Any]) -> RuntimeSettings:
        """Merge known fields from ``partial``; unknown fields are ignored.

        Invalid values raise ``ValidationError`` and leave the record as it was.
        """
        if not isinstance(partial, dict):
            raise ValidationError("Settings must be a JSON object")

        merged = self._settings.model_dump(by_alias=True)
        for name, field in RuntimeSettings.model_fields.items():
            alias = field.alias or name
            if alias in partial:
                merged[alias] = partial[alias]
            elif name in partial:
                merged[alias] = partial[name]

        try:
            self._settings = RuntimeSettings.model_validate(merged)
        except pydantic.ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ValidationError(f"Invalid settings: {problems}") from e
        return self._settings
