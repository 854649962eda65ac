"""
Ecosystem Report — KPI overview, type/stage/sector/geography breakdowns, full directory.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from indygx.config import ECOSYSTEM_TYPE_LABELS, STAGE_LABELS
from indygx.data.store import EcosystemStore
from indygx.data.schemas import OrganizationFilter
from indygx.analytics.common import sanitize_for_json
from indygx.analytics.dashboard import executive_overview
from indygx.analytics.stats import calculate_ecosystem_stats
from indygx.excel.writer import ExcelWriter


DIRECTORY_COLS = [
    ("name", "text", "Organization"),
    ("type_label", "text", "Type"),
    ("headquarters", "text", "Headquarters"),
    ("year_founded", "number", "Founded"),
    ("years_active", "number", "Years Active"),
    ("startups_supported", "number", "Startups Supported"),
    ("capital_deployed", "currency", "Capital Deployed"),
    ("portfolio_size", "number", "Portfolio Size"),
    ("target_stages", "list", "Target Stages"),
    ("target_sectors", "list", "Sectors"),
    ("geographic_focus", "list", "Geographic Focus"),
    ("website", "text", "Website"),
]

COUNT_COLS = [
    ("name", "text", "Name"),
    ("count", "number", "Organizations"),
    ("pct", "percent", "% of Players"),
]


def _count_rows(counts: dict[str, int], total: int, labels: dict[str, str] | None = None) -> list[dict]:
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [
        {
            "name": (labels or {}).get(key, key),
            "count": n,
            "pct": round(n / total * 100, 1) if total else 0.0,
        }
        for key, n in ranked
    ]


def generate_json(store: EcosystemStore, org_filter: OrganizationFilter | None = None) -> dict:
    orgs = store.organizations(org_filter)
    stats = calculate_ecosystem_stats(orgs)
    total = stats.total_players

    directory = []
    for org in orgs:
        row = org.to_dict()
        row["type_label"] = ECOSYSTEM_TYPE_LABELS[org.type.value]
        row["target_stages"] = [STAGE_LABELS[s.value] for s in org.target_stages]
        directory.append(row)

    return sanitize_for_json({
        "filter": org_filter.label if org_filter else "All Organizations",
        "overview": executive_overview(orgs, stats),
        "stats": stats.to_dict(),
        "by_type": _count_rows(stats.by_type, total, ECOSYSTEM_TYPE_LABELS),
        "by_stage": _count_rows(stats.by_stage, total, STAGE_LABELS),
        "by_sector": _count_rows(stats.by_sector, total),
        "by_geography": _count_rows(stats.by_geography, total),
        "directory": directory,
    })


def generate_excel(
    store: EcosystemStore,
    output_path: str | Path,
    org_filter: OrganizationFilter | None = None,
) -> Path:
    data = generate_json(store, org_filter)
    k = data["overview"]["kpis"]
    ew = ExcelWriter()

    ws = ew.add_sheet("Overview")
    ew.write_title(ws, "INDYGX ECOSYSTEM",
                   f"Ecosystem Intelligence Report  |  {data['filter']}  |  Generated {pd.Timestamp.now():%B %d, %Y}")

    row = ew.write_section(ws, 5, "ECOSYSTEM OVERVIEW")
    row = ew.write_kpi_row(ws, row, [
        (k["total_players"], "ECOSYSTEM PLAYERS", "number"),
        (k["total_startups_supported"], "STARTUPS SUPPORTED", "number"),
        (k["total_capital_deployed"], "CAPITAL DEPLOYED", "currency"),
        (k["average_portfolio_size"], "AVG PORTFOLIO SIZE", "number"),
    ])

    row = ew.write_section(ws, row, "DISTRIBUTION BY TYPE")
    ew.write_table(ws, row, COUNT_COLS, data["by_type"], freeze=False, show_total=True)

    for sheet_name, key in [("By Stage", "by_stage"), ("By Sector", "by_sector"),
                            ("By Geography", "by_geography")]:
        ws_d = ew.add_sheet(sheet_name)
        ew.write_table(ws_d, 1, COUNT_COLS, data[key])

    ws_dir = ew.add_sheet("Directory")
    ew.write_table(
        ws_dir, 1, DIRECTORY_COLS, data["directory"],
        highlight_fn=lambda _idx, r: r.get("type"),
    )

    return ew.save(output_path)
