import asyncio

import pytest

from indygx.config import COMPANY_SELECT, PRIMARY_TABLE, WATCHED_TABLES
from indygx.data import client as client_module
from indygx.data.client import ChangeEvent, EcosystemClient


def test_missing_configuration_raises(monkeypatch):
    monkeypatch.setattr(client_module, "SUPABASE_URL", None)
    monkeypatch.setattr(client_module, "SUPABASE_ANON_KEY", None)
    with pytest.raises(ValueError, match="SUPABASE_URL"):
        EcosystemClient()


def test_queries_require_open(make_client):
    c = make_client()
    assert not c.is_open
    with pytest.raises(RuntimeError):
        asyncio.run(c.fetch_company_rows())


def test_fetch_company_rows_selects_joined_tables(client, fake_backend, rows):
    result = asyncio.run(client.fetch_company_rows())
    assert result == rows
    query = fake_backend.queries[-1]
    assert query.table == PRIMARY_TABLE
    assert query.columns == COMPANY_SELECT
    assert "financials_funding (*)" in query.columns


def test_fetch_company_row_by_key(client, fake_backend):
    row = asyncio.run(client.fetch_company_row("2"))
    assert row["company_name"] == "Nest Cowork"
    query = fake_backend.queries[-1]
    assert query.filters == [("company_id", "2")]
    assert query.limit_to == 1


def test_fetch_company_row_missing_is_none(client):
    assert asyncio.run(client.fetch_company_row("404")) is None


def test_backend_errors_propagate(client, fake_backend):
    fake_backend.error = ConnectionError("network down")
    with pytest.raises(ConnectionError, match="network down"):
        asyncio.run(client.fetch_company_rows())


def test_subscribe_registers_every_watched_table(client, fake_backend):
    events = []
    sub = asyncio.run(client.subscribe(events.append))

    channel = fake_backend.channels[-1]
    assert channel.subscribed
    assert [h["table"] for h in channel.handlers] == WATCHED_TABLES
    assert len(channel.handlers) == 8
    assert all(h["event"] == "*" for h in channel.handlers)

    channel.fire("financials_funding")
    assert events == [ChangeEvent(table="financials_funding", event_type="UPDATE")]
    assert sub.is_open


def test_subscription_close_is_idempotent(client, fake_backend):
    async def scenario():
        sub = await client.subscribe(lambda e: None)
        await sub.close()
        await sub.close()
        return sub

    sub = asyncio.run(scenario())
    assert not sub.is_open
    assert fake_backend.channels[-1].unsubscribe_calls == 1


def test_client_close_releases_subscriptions(make_client, fake_backend):
    async def scenario():
        async with make_client() as c:
            await c.subscribe(lambda e: None)
            await c.subscribe(lambda e: None)
        return c

    c = asyncio.run(scenario())
    assert not c.is_open
    assert [ch.unsubscribe_calls for ch in fake_backend.channels] == [1, 1]
    assert fake_backend.registered_channels == []
    assert fake_backend.socket_closed


def test_closed_subscription_leaves_the_socket(client, fake_backend):
    async def scenario():
        sub = await client.subscribe(lambda e: None)
        await sub.close()

    asyncio.run(scenario())
    assert fake_backend.removed_channels == fake_backend.channels
    assert not fake_backend.socket_closed


def test_close_twice_is_harmless(make_client, fake_backend):
    async def scenario():
        c = await make_client().open()
        await c.close()
        await c.close()

    asyncio.run(scenario())
    assert fake_backend.socket_closed


def test_subscription_as_context_manager(client, fake_backend):
    async def scenario():
        async with await client.subscribe(lambda e: None) as sub:
            assert sub.is_open
        return sub

    assert not asyncio.run(scenario()).is_open
    assert fake_backend.channels[-1].unsubscribe_calls == 1
