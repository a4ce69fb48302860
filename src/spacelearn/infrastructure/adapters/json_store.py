"""
JSON File Entry Store: Infrastructure adapter for a local JSON document.

Implements EntryStore on top of a single file:

    {"next_sequence": 4, "entries": [{...}, ...]}

Every write goes to a temporary file in the same directory and is renamed
over the original, so readers never see a half-written document.
"""

import json
import logging
import os
import tempfile
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from spacelearn.domain.constants import JSON_INDENT
from spacelearn.domain.errors import NotFound, StoreUnavailable
from spacelearn.domain.models import LearningEntry, Review
from spacelearn.domain.ports import EntryStore

from .codec import (
    as_int,
    entry_from_record,
    entry_to_record,
    format_timestamp,
    generate_entry_id,
    now,
    reviews_to_records,
)

logger = logging.getLogger(__name__)


class JsonFileEntryStore(EntryStore):
    """Stores entries in a JSON file on local disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    async def list_entries(self) -> list[LearningEntry]:
        doc = self._read()
        return [entry_from_record(r) for r in doc["entries"]]

    async def create_entry(
        self,
        content: str,
        context: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> LearningEntry:
        doc = self._read()
        entry = LearningEntry(
            id=generate_entry_id(),
            sequence_number=doc["next_sequence"],
            content=content,
            context=context or None,
            tags=tuple(tags or ()),
            created_at=now(),
        )
        doc["entries"].append(entry_to_record(entry))
        doc["next_sequence"] += 1
        self._write(doc)
        return entry

    async def update_entry(
        self,
        entry_id: str,
        step: int,
        reviews: Sequence[Review],
        last_reviewed_at: datetime | None,
    ) -> None:
        doc = self._read()
        record = self._find(doc, entry_id)
        record["step"] = step
        record["reviews"] = reviews_to_records(list(reviews))
        record["last_reviewed_at"] = format_timestamp(last_reviewed_at)
        self._write(doc)

    async def edit_entry(
        self,
        entry_id: str,
        content: str | None = None,
        context: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> LearningEntry:
        doc = self._read()
        record = self._find(doc, entry_id)
        if content is not None:
            record["content"] = content
        if context is not None:
            record["context"] = context or None
        if tags is not None:
            record["tags"] = list(tags)
        self._write(doc)
        return entry_from_record(record)

    async def delete_entry(self, entry_id: str) -> None:
        doc = self._read()
        record = self._find(doc, entry_id)
        doc["entries"].remove(record)
        self._write(doc)

    def _find(self, doc: dict[str, Any], entry_id: str) -> dict[str, Any]:
        for record in doc["entries"]:
            if record.get("id") == entry_id:
                return record
        raise NotFound(entry_id)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"next_sequence": 1, "entries": []}
        try:
            doc = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read entry file {self.path}: {e}")
            raise StoreUnavailable(f"Could not read {self.path}: {e}") from e

        if not isinstance(doc, dict) or not isinstance(doc.get("entries"), list):
            raise StoreUnavailable(f"{self.path} is not a SpaceLearn entry file")
        for record in doc["entries"]:
            if not isinstance(record, dict) or not record.get("id"):
                logger.error(f"Entry file {self.path} holds a record without an id: {record!r}")
                raise StoreUnavailable(f"{self.path} holds a record without an id")

        # Older files may predate the counter
        highest = max((as_int(r.get("sequence_number")) for r in doc["entries"]), default=0)
        doc["next_sequence"] = max(as_int(doc.get("next_sequence"), 1), highest + 1)
        return doc

    def _write(self, doc: dict[str, Any]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(doc, tmp, indent=JSON_INDENT, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error(f"Could not write entry file {self.path}: {e}")
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreUnavailable(f"Could not write {self.path}: {e}") from e
