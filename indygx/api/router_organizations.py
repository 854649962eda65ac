"""
Organization endpoints — directory listing and single-organization detail.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from indygx.data.store import EcosystemStore
from indygx.data.schemas import OrganizationFilter
from indygx.api.dependencies import get_store, parse_filter
from indygx.api.response_models import OrganizationListResponse, OrganizationResponse

router = APIRouter(prefix="/api/organizations", tags=["organizations"])


@router.get("", response_model=OrganizationListResponse)
def list_organizations(
    store: EcosystemStore = Depends(get_store),
    org_filter: OrganizationFilter | None = Depends(parse_filter),
):
    """All organizations, optionally narrowed by type and search text."""
    orgs = store.organizations(org_filter)
    return OrganizationListResponse(
        organizations=[OrganizationResponse(**org.to_dict()) for org in orgs],
        count=len(orgs),
        filter=org_filter.label if org_filter else "All Organizations",
    )


@router.get("/{org_id}", response_model=OrganizationResponse)
async def organization_detail(org_id: str, store: EcosystemStore = Depends(get_store)):
    """One organization, re-read from Supabase for the detail view."""
    try:
        org = await store.fetch_profile(org_id)
    except Exception as e:
        raise HTTPException(503, f"Failed to load data from Supabase: {e}")
    if org is None:
        raise HTTPException(404, f"Organization not found: {org_id}")
    return OrganizationResponse(**org.to_dict())
