"""
Pytest fixtures: sample company rows, a fake Supabase async client, a loaded store, an API client.
"""

import asyncio
from types import SimpleNamespace

import pytest

from indygx.data.client import EcosystemClient
from indygx.data.store import EcosystemStore


REFERENCE_YEAR = 2025


def sample_rows():
    """Three joined company rows covering the common shapes of side-table data."""
    return [
        {
            "company_id": 1,
            "company_name": "Launchpad Ventures",
            "year_of_incorporation": "2015",
            "industry_segment": "FinTech, SaaS",
            "nature_of_company": "Venture Capital Fund",
            "website_url": "https://launchpad.example",
            "linkedin_profile_url": "https://linkedin.com/company/launchpad",
            "ceo_name": "A. Rao",
            "employee_size": "120",
            "services_offerings": "Mentoring, Funding",
            "core_value_proposition": "Backing bold founders",
            "focus_sectors_industries": "FinTech, HealthTech",
            "countries_operating_in": "India, Singapore",
            "geographic_coverage_india": None,
            "company_secondary": {"success_rate_portfolio_exits_graduations": "40"},
            "competitive_intelligence": [{"key_challenges_and_needs": "idea, seed, early, unknown"}],
            "financials_funding": [{"total_capital_raised_to_date": "₹2.5M"}],
            "contact_information": [],
            "digital_presence_brand": None,
            "partnerships_ecosystem": None,
            "indygx_specific_assessment": None,
        },
        {
            "company_id": 2,
            "company_name": "Nest Cowork",
            "year_of_incorporation": "2019",
            "industry_segment": "Real Estate",
            "nature_of_company": "Co-working Space",
            "website_url": None,
            "employee_size": "",
            "services_offerings": "Desks, Meeting rooms",
            "core_value_proposition": None,
            "focus_sectors_industries": "FinTech",
            "countries_operating_in": None,
            "geographic_coverage_india": "Bengaluru, Pune",
            "company_secondary": [{"processing_time": "35 startups"}],
            "competitive_intelligence": {"key_challenges_and_needs": "growth, scale"},
            "financials_funding": {"total_capital_raised_to_date": "raised", "annual_revenues": "$500k"},
        },
        {
            "company_id": 3,
            "company_name": "State Startup Mission",
            "year_of_incorporation": "2010",
            "industry_segment": "Public Sector",
            "nature_of_company": "Government Body",
            "employee_size": "1,200",
            "focus_sectors_industries": "AgriTech, FinTech",
            "countries_operating_in": "India",
        },
    ]


# ---------------------------------------------------------------------------
# Fake Supabase async client
# ---------------------------------------------------------------------------

class FakeQuery:
    def __init__(self, backend: "FakeSupabase", table: str):
        self.backend = backend
        self.table = table
        self.columns = None
        self.filters = []
        self.limit_to = None

    def select(self, columns):
        self.columns = columns
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def limit(self, n):
        self.limit_to = n
        return self

    async def execute(self):
        self.backend.queries.append(self)
        if self.backend.gate is not None:
            await self.backend.gate.wait()
        if self.backend.error is not None:
            raise self.backend.error
        rows = [
            r for r in self.backend.rows
            if all(str(r.get(col)) == str(val) for col, val in self.filters)
        ]
        if self.limit_to is not None:
            rows = rows[: self.limit_to]
        return SimpleNamespace(data=rows)


class FakeChannel:
    def __init__(self, name: str):
        self.name = name
        self.handlers = []
        self.subscribed = False
        self.unsubscribe_calls = 0

    def on_postgres_changes(self, event, callback, table="*", schema="public", filter=None):
        self.handlers.append({"event": event, "table": table, "schema": schema, "callback": callback})
        return self

    async def subscribe(self):
        self.subscribed = True
        return self

    async def unsubscribe(self):
        self.unsubscribe_calls += 1
        self.subscribed = False

    def fire(self, table: str, payload=None):
        for h in self.handlers:
            if h["table"] == table:
                h["callback"](payload or {"data": {"table": table, "type": "UPDATE"}})


class FakeSupabase:
    """Records every query and channel; rows and failures are set by the test."""

    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.error = None
        self.gate = None
        self.queries = []
        self.channels = []
        self.removed_channels = []
        self.socket_closed = False

    def table(self, name):
        return FakeQuery(self, name)

    def channel(self, name):
        ch = FakeChannel(name)
        self.channels.append(ch)
        return ch

    async def remove_channel(self, channel):
        await channel.unsubscribe()
        self.removed_channels.append(channel)

    async def remove_all_channels(self):
        for ch in self.channels:
            if ch.subscribed:
                await ch.unsubscribe()
        self.socket_closed = True

    @property
    def registered_channels(self):
        return [ch for ch in self.channels if ch not in self.removed_channels]

    @property
    def fetch_count(self):
        return len([q for q in self.queries if not q.filters])


@pytest.fixture
def rows():
    return sample_rows()


@pytest.fixture
def fake_backend(rows):
    return FakeSupabase(rows)


@pytest.fixture
def make_client(fake_backend):
    """Build an EcosystemClient wired to the fake backend."""

    def _make():
        async def factory(url, key):
            return fake_backend

        return EcosystemClient("https://test.supabase.co", "anon-key", client_factory=factory)

    return _make


@pytest.fixture
def client(make_client):
    c = make_client()
    asyncio.run(c.open())
    return c


@pytest.fixture
def store(client, rows):
    return EcosystemStore(client).load_rows(rows, current_year=REFERENCE_YEAR)


@pytest.fixture
def api_client(store):
    from fastapi.testclient import TestClient
    from indygx.main import create_app

    with TestClient(create_app(store=store, watch=False)) as c:
        yield c
