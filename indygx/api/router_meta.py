"""
Meta endpoints: health, ecosystem types, reload.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from indygx.config import ECOSYSTEM_TYPE_LABELS
from indygx.data.store import EcosystemStore
from indygx.analytics.stats import type_counts
from indygx.api.dependencies import get_store_or_empty, load_error_message
from indygx.api.response_models import HealthResponse, ReloadResponse, TypeCount, TypesResponse

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: EcosystemStore = Depends(get_store_or_empty)):
    return HealthResponse(
        status="ok" if store.is_loaded else "degraded",
        loaded=store.is_loaded,
        organizations=store.count(),
        loaded_at=store.loaded_at.isoformat() if store.loaded_at else None,
        error=load_error_message(store) if store.last_error else None,
    )


@router.get("/types", response_model=TypesResponse)
def list_types(store: EcosystemStore = Depends(get_store_or_empty)):
    """Every ecosystem type with its label and current count (zero-filled)."""
    counts = type_counts(store.stats())
    return TypesResponse(types=[
        TypeCount(type=t, label=ECOSYSTEM_TYPE_LABELS[t], count=n) for t, n in counts.items()
    ])


@router.post("/reload", response_model=ReloadResponse)
async def reload_data(store: EcosystemStore = Depends(get_store_or_empty)):
    """Refetch every organization from Supabase.

    Returns immediately, reload happens in background.
    """
    store.invalidate()
    return ReloadResponse(
        status="reloading",
        message="Data reload started in background. Check /api/health for updated counts.",
    )
