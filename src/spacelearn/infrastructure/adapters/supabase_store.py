"""
Supabase Entry Store: Infrastructure adapter for a hosted Supabase table.

Talks to the table through Supabase's PostgREST endpoint
(``{url}/rest/v1/{table}``) with httpx. Column names follow the hosted
schema (see ``SUPABASE_COLUMNS``). No retries: a failed call surfaces as
StoreUnavailable and the caller decides what to do.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import httpx

from spacelearn.domain.constants import DEFAULT_SUPABASE_TABLE, REQUEST_TIMEOUT
from spacelearn.domain.errors import NotFound, StoreUnavailable
from spacelearn.domain.models import LearningEntry, Review
from spacelearn.domain.ports import EntryStore

from .codec import (
    SUPABASE_COLUMNS,
    entry_from_record,
    format_timestamp,
    now,
    reviews_to_records,
)

COLS = SUPABASE_COLUMNS


class SupabaseEntryStore(EntryStore):
    """Adapter for the Supabase REST API."""

    def __init__(
        self,
        url: str,
        api_key: str,
        table: str = DEFAULT_SUPABASE_TABLE,
        timeout: float = REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self._timeout = timeout
        self._client = client

    async def list_entries(self) -> list[LearningEntry]:
        rows = await self._request(
            "GET", params={"select": "*", "order": f"{COLS.sequence_number}.desc"}
        )
        return [entry_from_record(row, COLS) for row in rows or []]

    async def create_entry(
        self,
        content: str,
        context: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> LearningEntry:
        created = format_timestamp(now())
        row = {
            COLS.content: content,
            COLS.context: context or None,
            COLS.tags: list(tags or ()),
            COLS.step: 0,
            COLS.reviews: [],
            COLS.created_at: created,
            COLS.last_reviewed_at: created,
            "usuario_id": None,
        }
        rows = await self._request("POST", json=[row], returning=True)
        if not rows:
            raise StoreUnavailable("Supabase accepted the insert but returned no row")
        return entry_from_record(rows[0], COLS)

    async def update_entry(
        self,
        entry_id: str,
        step: int,
        reviews: Sequence[Review],
        last_reviewed_at: datetime | None,
    ) -> None:
        changes = {
            COLS.step: step,
            COLS.reviews: reviews_to_records(list(reviews)),
            COLS.last_reviewed_at: format_timestamp(last_reviewed_at),
        }
        await self._patch(entry_id, changes)

    async def edit_entry(
        self,
        entry_id: str,
        content: str | None = None,
        context: str | None = None,
        tags: Sequence[str] | None = None,
    ) -> LearningEntry:
        changes: dict[str, Any] = {}
        if content is not None:
            changes[COLS.content] = content
        if context is not None:
            changes[COLS.context] = context or None
        if tags is not None:
            changes[COLS.tags] = list(tags)
        if not changes:
            rows = await self._request(
                "GET", params={"select": "*", COLS.id: f"eq.{entry_id}"}
            )
            if not rows:
                raise NotFound(entry_id)
            return entry_from_record(rows[0], COLS)

        rows = await self._patch(entry_id, changes)
        return entry_from_record(rows[0], COLS)

    async def delete_entry(self, entry_id: str) -> None:
        rows = await self._request(
            "DELETE", params={COLS.id: f"eq.{entry_id}"}, returning=True
        )
        if not rows:
            raise NotFound(entry_id)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _patch(self, entry_id: str, changes: dict[str, Any]) -> list[dict[str, Any]]:
        rows = await self._request(
            "PATCH", params={COLS.id: f"eq.{entry_id}"}, json=changes, returning=True
        )
        if not rows:
            raise NotFound(entry_id)
        return rows

    async def _request(
        self,
        method: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        returning: bool = False,
    ) -> Any:
        headers = dict(self._headers)
        if returning:
            headers["Prefer"] = "return=representation"

        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)

        try:
            resp = await self._client.request(
                method, self.endpoint, params=params, json=json, headers=headers
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            self.logger.error(
                f"Supabase {method} failed with HTTP {e.response.status_code}: {e.response.text}"
            )
            raise StoreUnavailable(
                f"Supabase rejected {method} ({e.response.status_code})"
            ) from e
        except httpx.HTTPError as e:
            self.logger.error(f"Supabase {method} failed: {e}")
            raise StoreUnavailable(f"Could not reach Supabase: {e}") from e

        if not resp.content:
            return None
        return resp.json()
