"""
EcosystemStore — In-memory snapshot of mapped organizations and their stats.

Loaded at startup, replaced wholesale on every refetch. Change notifications
only invalidate; they never patch the snapshot in place.
"""
from __future__ import annotations

import asyncio
import datetime as dt
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

from indygx.data.client import ChangeEvent, ChangeSubscription, EcosystemClient
from indygx.data.normalize import map_company_row, map_company_rows
from indygx.data.schemas import EcosystemStats, Organization, OrganizationFilter

logger = logging.getLogger(__name__)


class EcosystemStore:
    """Organizations + stats with refetch-on-change."""

    def __init__(self, client: EcosystemClient | None = None) -> None:
        self.client = client
        self._orgs: tuple[Organization, ...] = ()
        self._by_id: dict[str, Organization] = {}
        self._stats: EcosystemStats = EcosystemStats()
        self._loaded = False
        self.loaded_at: Optional[dt.datetime] = None
        self.last_error: Optional[str] = None
        self._refresh_task: Optional[asyncio.Task] = None
        self._pending = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_rows(self, rows: Iterable[dict], current_year: int | None = None) -> "EcosystemStore":
        """Map raw joined rows and swap in the new snapshot."""
        from indygx.analytics.stats import calculate_ecosystem_stats

        orgs = tuple(map_company_rows(rows, current_year))
        self._orgs = orgs
        self._by_id = {org.id: org for org in orgs}
        self._stats = calculate_ecosystem_stats(orgs)
        self._loaded = True
        self.loaded_at = dt.datetime.now()
        self.last_error = None
        return self

    async def refresh(self) -> "EcosystemStore":
        """Fetch every company row and rebuild the snapshot.

        On failure the previous snapshot stays, the message is kept in
        last_error, and the exception propagates.
        """
        try:
            rows = await self._require_client().fetch_company_rows()
        except Exception as e:
            self.last_error = str(e) or e.__class__.__name__
            logger.error("Failed to load data from Supabase: %s", self.last_error)
            raise
        self.load_rows(rows)
        logger.info("Snapshot ready: %d organizations", len(self._orgs))
        return self

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _require_client(self) -> EcosystemClient:
        if self.client is None:
            raise RuntimeError("EcosystemStore has no client to fetch from")
        return self.client

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def invalidate(self, event: ChangeEvent | None = None) -> None:
        """Schedule a refetch. Calls during a running refetch collapse into one more."""
        if event is not None:
            logger.info("Invalidated by %s on %s", event.event_type, event.table)
        if self._refresh_task is not None and not self._refresh_task.done():
            self._pending = True
            return
        self._refresh_task = asyncio.get_running_loop().create_task(self._refresh_until_settled())

    async def _refresh_until_settled(self) -> None:
        while True:
            self._pending = False
            try:
                await self.refresh()
            except Exception:
                # Already recorded in last_error; next change notification retries
                pass
            if not self._pending:
                return

    async def wait_idle(self) -> None:
        """Wait for any scheduled refetch to finish."""
        while self._refresh_task is not None and not self._refresh_task.done():
            await self._refresh_task

    @asynccontextmanager
    async def watch(self) -> AsyncIterator[ChangeSubscription]:
        """Keep the snapshot fresh while the block runs; the channel closes on exit."""
        sub = await self._require_client().subscribe(self.invalidate)
        try:
            yield sub
        finally:
            await sub.close()
            if self._refresh_task is not None and not self._refresh_task.done():
                self._refresh_task.cancel()
                try:
                    await self._refresh_task
                except asyncio.CancelledError:
                    pass

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def organizations(self, org_filter: OrganizationFilter | None = None) -> list[Organization]:
        from indygx.analytics.dashboard import filter_organizations

        return filter_organizations(self._orgs, org_filter)

    def get(self, org_id: str) -> Optional[Organization]:
        return self._by_id.get(str(org_id))

    def stats(self) -> EcosystemStats:
        return self._stats

    def count(self) -> int:
        return len(self._orgs)

    async def fetch_profile(self, org_id: str) -> Optional[Organization]:
        """Detail view: re-read one company straight from the backend."""
        row = await self._require_client().fetch_company_row(org_id)
        return map_company_row(row) if row else None
