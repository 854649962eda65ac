"""
EcosystemClient — Supabase access for company rows and change notifications.

Usage:
    async with EcosystemClient() as client:
        rows = await client.fetch_company_rows()
        async with await client.subscribe(on_change):
            ...

The client is explicitly owned: nothing connects until open() (or
`async with`), and close() releases every change channel it handed out.
Backend errors are not caught here; they reach the caller unchanged.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from supabase import AsyncClient, acreate_client

from indygx.config import (
    CHANGE_CHANNEL,
    CHANGE_SCHEMA,
    COMPANY_SELECT,
    PRIMARY_KEY,
    PRIMARY_TABLE,
    SUPABASE_ANON_KEY,
    SUPABASE_URL,
    WATCHED_TABLES,
)

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, str], Awaitable[AsyncClient]]


@dataclass(frozen=True)
class ChangeEvent:
    """Something changed in one of the watched tables."""
    table: str
    event_type: str = "*"


def _event_type(payload: Any) -> str:
    """Best-effort INSERT/UPDATE/DELETE label; the payload shape is not relied on."""
    if isinstance(payload, dict):
        data = payload.get("data") if isinstance(payload.get("data"), dict) else payload
        return str(data.get("type") or data.get("eventType") or "*")
    return "*"


class ChangeSubscription:
    """An open realtime channel. close() is idempotent; usable as an async context manager."""

    def __init__(self, channel, owner: "EcosystemClient") -> None:
        self._channel = channel
        self._owner = owner
        self._closed = False

    @property
    def is_open(self) -> bool:
        return not self._closed

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._owner._remove_channel(self._channel)
        finally:
            self._owner._forget(self)
            logger.info("Unsubscribed from %s", CHANGE_CHANNEL)

    async def __aenter__(self) -> "ChangeSubscription":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()


class EcosystemClient:
    """Supabase wrapper for the company tables."""

    def __init__(
        self,
        url: str | None = None,
        key: str | None = None,
        client_factory: ClientFactory = acreate_client,
    ) -> None:
        """
        Args:
            url: Supabase project URL (or set SUPABASE_URL)
            key: Supabase anon key (or set SUPABASE_ANON_KEY)
            client_factory: coroutine building the underlying AsyncClient
        """
        self.url = url or SUPABASE_URL
        self.key = key or SUPABASE_ANON_KEY

        if not self.url or not self.key:
            raise ValueError(
                "Supabase URL and key required. "
                "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables, "
                "or pass url= and key= to EcosystemClient()"
            )

        self._factory = client_factory
        self._client: Optional[AsyncClient] = None
        self._subscriptions: list[ChangeSubscription] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> "EcosystemClient":
        if self._client is None:
            self._client = await self._factory(self.url, self.key)
            logger.info("Supabase client initialized for %s", self.url)
        return self

    async def close(self) -> None:
        """Release every open subscription, then close the realtime socket."""
        if self._client is None:
            return
        try:
            for sub in list(self._subscriptions):
                await sub.close()
        finally:
            client, self._client = self._client, None
            await client.remove_all_channels()
            logger.info("Supabase client closed")

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def __aenter__(self) -> "EcosystemClient":
        return await self.open()

    async def __aexit__(self, *exc) -> None:
        await self.close()

    def _require(self) -> AsyncClient:
        if self._client is None:
            raise RuntimeError("EcosystemClient is not open; call open() or use 'async with'")
        return self._client

    async def _remove_channel(self, channel) -> None:
        # remove_channel unsubscribes and drops the channel from the socket
        if self._client is not None:
            await self._client.remove_channel(channel)
        else:
            await channel.unsubscribe()

    def _forget(self, sub: ChangeSubscription) -> None:
        if sub in self._subscriptions:
            self._subscriptions.remove(sub)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def fetch_company_rows(self) -> list[dict]:
        """Every company_primary row with its seven side tables nested."""
        response = await self._require().table(PRIMARY_TABLE).select(COMPANY_SELECT).execute()
        rows = response.data or []
        logger.info("Fetched %d company rows", len(rows))
        return rows

    async def fetch_company_row(self, company_id: str) -> Optional[dict]:
        """One joined company row by primary key, or None."""
        response = await (
            self._require()
            .table(PRIMARY_TABLE)
            .select(COMPANY_SELECT)
            .eq(PRIMARY_KEY, company_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Change notifications
    # ------------------------------------------------------------------

    async def subscribe(self, on_change: Callable[[ChangeEvent], None]) -> ChangeSubscription:
        """Listen for insert/update/delete on every watched table.

        on_change runs on the event loop for each notification.
        """
        channel = self._require().channel(CHANGE_CHANNEL)

        def _handler_for(table: str):
            def _handler(payload: Any) -> None:
                event = ChangeEvent(table=table, event_type=_event_type(payload))
                logger.debug("Change on %s (%s)", event.table, event.event_type)
                on_change(event)
            return _handler

        for table in WATCHED_TABLES:
            channel.on_postgres_changes(
                "*", callback=_handler_for(table), table=table, schema=CHANGE_SCHEMA
            )
        await channel.subscribe()

        sub = ChangeSubscription(channel, self)
        self._subscriptions.append(sub)
        logger.info("Subscribed to %s (%d tables)", CHANGE_CHANNEL, len(WATCHED_TABLES))
        return sub
