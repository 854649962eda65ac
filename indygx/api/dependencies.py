"""
FastAPI dependencies — EcosystemStore singleton, directory filter parsing.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query

from indygx.data.store import EcosystemStore
from indygx.data.schemas import EcosystemType, OrganizationFilter

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: EcosystemStore | None = None


def set_store(store: EcosystemStore | None) -> None:
    global _store
    _store = store


def load_error_message(store: EcosystemStore) -> str:
    return f"Failed to load data from Supabase: {store.last_error}"


def get_store() -> EcosystemStore:
    """Store with a usable snapshot; 503 with the load error otherwise."""
    if _store is None:
        raise HTTPException(503, "Server not initialized yet")
    if not _store.is_loaded:
        if _store.last_error:
            raise HTTPException(503, load_error_message(_store))
        raise HTTPException(503, "Data not loaded yet")
    return _store


def get_store_or_empty() -> EcosystemStore:
    """Return the store even if it has no data (for health/reload endpoints)."""
    if _store is None:
        raise HTTPException(503, "Server not initialized yet")
    return _store


# ---------------------------------------------------------------------------
# Filter parsing from query params
# ---------------------------------------------------------------------------

def parse_filter(
    type: Optional[str] = Query(None, description="accelerator|investor|funding|government|coworking|incubator|all"),
    search: Optional[str] = Query(None, description="Matches name, tagline, or tags"),
) -> OrganizationFilter | None:
    """Parse directory query parameters into an OrganizationFilter."""
    if (type is None or type == "all") and not search:
        return None

    eco_type = None
    if type is not None and type != "all":
        try:
            eco_type = EcosystemType(type)
        except ValueError:
            raise HTTPException(400, f"Invalid type: {type}")

    return OrganizationFilter(type=eco_type, search=search or "")


def parse_ids(ids: str = Query(..., description="Comma-separated organization ids")) -> list[str]:
    return [i.strip() for i in ids.split(",") if i.strip()]
