"""
Dashboard endpoints — Ecosystem Stats, Executive Overview, Comparison.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from indygx.data.store import EcosystemStore
from indygx.data.schemas import OrganizationFilter
from indygx.api.dependencies import get_store, parse_filter, parse_ids
from indygx.api.response_models import StatsResponse
from indygx.analytics.common import sanitize_for_json
from indygx.analytics.dashboard import compare_organizations, executive_overview
from indygx.analytics.stats import calculate_ecosystem_stats

router = APIRouter(prefix="/api", tags=["dashboard"])


def _safe_json(data: dict) -> JSONResponse:
    return JSONResponse(content=sanitize_for_json(data))


@router.get("/stats", response_model=StatsResponse)
def ecosystem_stats(
    store: EcosystemStore = Depends(get_store),
    org_filter: OrganizationFilter | None = Depends(parse_filter),
):
    """Totals and grouped counts; recomputed over the filtered set when a filter is given."""
    stats = store.stats() if org_filter is None else calculate_ecosystem_stats(store.organizations(org_filter))
    return StatsResponse(**stats.to_dict())


@router.get("/dashboard/overview")
def overview(store: EcosystemStore = Depends(get_store)):
    """KPI cards plus type, stage, sector and growth-trend series."""
    return _safe_json(executive_overview(store.organizations(), store.stats()))


@router.get("/compare")
def compare(
    ids: list[str] = Depends(parse_ids),
    store: EcosystemStore = Depends(get_store),
):
    """Side-by-side metrics for up to four organizations."""
    try:
        data = compare_organizations(store.organizations(), ids)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return _safe_json(data)
