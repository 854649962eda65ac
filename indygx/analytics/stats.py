"""
Ecosystem stats — totals, grouped counts, and averages over organizations.
"""
from __future__ import annotations

from typing import Iterable

import pandas as pd

from indygx.config import ECOSYSTEM_TYPES
from indygx.data.schemas import EcosystemStats, Organization
from indygx.analytics.common import round_half_up


FRAME_COLUMNS = [
    "id", "name", "type", "tagline", "headquarters", "year_founded", "years_active",
    "startups_supported", "capital_deployed", "portfolio_size",
    "target_stages", "target_sectors", "geographic_focus", "tags",
]


def organizations_frame(organizations: Iterable[Organization]) -> pd.DataFrame:
    """One row per organization; list fields stay as Python lists."""
    records = [org.to_dict() for org in organizations]
    if not records:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame.from_records(records)[FRAME_COLUMNS]


# ---------------------------------------------------------------------------
# Count grouping
# ---------------------------------------------------------------------------

def count_by(df: pd.DataFrame, col: str) -> dict[str, int]:
    """Occurrences per value; list columns count once per element.

    Keys keep first-appearance order.
    """
    if df.empty:
        return {}
    values = df[col]
    if values.map(lambda v: isinstance(v, list)).any():
        values = values.explode()
    values = values.dropna().reset_index(drop=True)
    if values.empty:
        return {}
    counts = values.groupby(values, sort=False).size()
    return {str(k): int(v) for k, v in counts.items()}


def type_counts(stats: EcosystemStats) -> dict[str, int]:
    """by_type zero-filled across every ecosystem type, in canonical order."""
    return {t: int(stats.by_type.get(t, 0)) for t in ECOSYSTEM_TYPES}


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------

def calculate_ecosystem_stats(organizations: Iterable[Organization]) -> EcosystemStats:
    """Totals, grouped counts and average portfolio size. Empty input → all zeros."""
    df = organizations_frame(organizations)
    if df.empty:
        return EcosystemStats()

    capital = pd.to_numeric(df["capital_deployed"], errors="coerce").fillna(0)
    # Average only over organizations that report a portfolio
    portfolio = pd.to_numeric(df["portfolio_size"], errors="coerce").dropna()
    avg_portfolio = round_half_up(float(portfolio.mean())) if len(portfolio) else 0

    return EcosystemStats(
        total_players=len(df),
        total_startups_supported=int(df["startups_supported"].sum()),
        total_capital_deployed=float(capital.sum()),
        average_portfolio_size=avg_portfolio,
        by_type=count_by(df, "type"),
        by_stage=count_by(df, "target_stages"),
        by_geography=count_by(df, "geographic_focus"),
        by_sector=count_by(df, "target_sectors"),
    )
