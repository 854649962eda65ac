"""
Dashboard analytics — chart series, directory filtering, and side-by-side comparison.

Executive Overview, Type/Stage/Sector distributions, Growth Trend, Compare.
"""
from __future__ import annotations

from typing import Iterable, Optional

from indygx.config import (
    COMPARE_LIMIT,
    COMPARE_LIST_PREVIEW,
    ECOSYSTEM_TYPE_COLORS,
    ECOSYSTEM_TYPE_LABELS,
    GROWTH_TREND_YEARS,
    STAGE_LABELS,
    STAGE_SHORT_LABELS,
    TOP_SECTOR_COUNT,
)
from indygx.data.schemas import EcosystemStats, Organization, OrganizationFilter
from indygx.analytics.common import format_currency, pct_of_total, sanitize_for_json
from indygx.analytics.stats import calculate_ecosystem_stats, organizations_frame, type_counts


# ---------------------------------------------------------------------------
# Chart series
# ---------------------------------------------------------------------------

def type_distribution(stats: EcosystemStats) -> list[dict]:
    """One slice per ecosystem type, including empty ones."""
    counts = type_counts(stats)
    total = sum(counts.values())
    return [
        {
            "type": t,
            "name": ECOSYSTEM_TYPE_LABELS[t],
            "value": n,
            "pct": round(pct_of_total(n, total), 1),
            "color": ECOSYSTEM_TYPE_COLORS[t],
        }
        for t, n in counts.items()
    ]


def stage_distribution(stats: EcosystemStats) -> list[dict]:
    return [
        {"stage": stage, "name": STAGE_SHORT_LABELS.get(stage, stage), "value": n}
        for stage, n in stats.by_stage.items()
    ]


def top_sectors(stats: EcosystemStats, limit: int = TOP_SECTOR_COUNT) -> list[dict]:
    """Most-covered sectors, highest count first."""
    ranked = sorted(stats.by_sector.items(), key=lambda kv: kv[1], reverse=True)
    return [{"name": sector, "value": n} for sector, n in ranked[:limit]]


def growth_trend(organizations: Iterable[Organization], years: int = GROWTH_TREND_YEARS) -> list[dict]:
    """Organizations per founding year for the most recent `years` years on record."""
    df = organizations_frame(organizations)
    if df.empty:
        return []
    founded = df.loc[df["year_founded"] > 0, "year_founded"].astype(int)
    if founded.empty:
        return []
    counts = founded.value_counts().sort_index().tail(years)
    return [{"name": str(year), "value": int(n)} for year, n in counts.items()]


# ---------------------------------------------------------------------------
# Directory
# ---------------------------------------------------------------------------

def filter_organizations(
    organizations: Iterable[Organization],
    org_filter: OrganizationFilter | None = None,
) -> list[Organization]:
    """Organizations matching the type + search filter, original order."""
    if org_filter is None:
        return list(organizations)
    return [org for org in organizations if org_filter.matches(org)]


def organization_card(org: Organization) -> dict:
    """Summary row for directory listings."""
    return {
        "id": org.id,
        "name": org.name,
        "type": org.type.value,
        "type_label": ECOSYSTEM_TYPE_LABELS[org.type.value],
        "tagline": org.tagline,
        "headquarters": org.headquarters,
        "startups_supported": org.startups_supported,
        "years_active": org.years_active,
        "capital_deployed": org.capital_deployed,
        "capital_display": format_currency(org.capital_deployed) if org.capital_deployed else None,
        "tags": org.tags[:COMPARE_LIST_PREVIEW],
    }


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

COMPARE_METRICS = [
    ("startups_supported", "Startups Supported", lambda v: f"{v:,}"),
    ("capital_deployed", "Capital Deployed", format_currency),
    ("portfolio_size", "Portfolio Size", lambda v: str(v) if v else "-"),
    ("years_active", "Years Active", lambda v: f"{v} years"),
]


def compare_organizations(organizations: Iterable[Organization], ids: list[str]) -> dict:
    """Side-by-side view of up to COMPARE_LIMIT organizations.

    Ids that are not in the collection are skipped; columns follow the
    collection's order.
    """
    if len(ids) > COMPARE_LIMIT:
        raise ValueError(f"Can compare at most {COMPARE_LIMIT} organizations, got {len(ids)}")

    wanted = set(ids)
    selected = [org for org in organizations if org.id in wanted]

    metrics = []
    for key, label, fmt in COMPARE_METRICS:
        values = [getattr(org, key) for org in selected]
        metrics.append({
            "key": key,
            "label": label,
            "values": values,
            "display": [fmt(v) for v in values],
        })

    return {
        "organizations": [
            {"id": org.id, "name": org.name, "type": org.type.value,
             "type_label": ECOSYSTEM_TYPE_LABELS[org.type.value]}
            for org in selected
        ],
        "metrics": metrics,
        "target_stages": [[STAGE_LABELS[s.value] for s in org.target_stages] for org in selected],
        "target_sectors": [org.target_sectors[:COMPARE_LIST_PREVIEW] for org in selected],
        "geographic_focus": [org.geographic_focus[:COMPARE_LIST_PREVIEW] for org in selected],
    }


# ---------------------------------------------------------------------------
# Executive overview
# ---------------------------------------------------------------------------

def executive_overview(
    organizations: list[Organization],
    stats: Optional[EcosystemStats] = None,
) -> dict:
    """KPI cards plus every chart series for the overview page."""
    if stats is None:
        stats = calculate_ecosystem_stats(organizations)

    return sanitize_for_json({
        "kpis": {
            "total_players": stats.total_players,
            "total_startups_supported": stats.total_startups_supported,
            "total_capital_deployed": stats.total_capital_deployed,
            "total_capital_display": format_currency(stats.total_capital_deployed),
            "average_portfolio_size": stats.average_portfolio_size,
        },
        "type_counts": type_counts(stats),
        "type_distribution": type_distribution(stats),
        "stage_distribution": stage_distribution(stats),
        "top_sectors": top_sectors(stats),
        "growth_trend": growth_trend(organizations),
    })
