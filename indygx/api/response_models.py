"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    loaded: bool
    organizations: int
    loaded_at: Optional[str] = None
    error: Optional[str] = None


class TypeCount(BaseModel):
    type: str
    label: str
    count: int


class TypesResponse(BaseModel):
    types: list[TypeCount]


class OrganizationResponse(BaseModel):
    id: str
    name: str
    type: str
    tagline: str
    description: str
    year_founded: int
    years_active: int
    headquarters: str
    website: str
    linkedin: Optional[str] = None
    startups_supported: int
    capital_deployed: Optional[float] = None
    portfolio_size: Optional[int] = None
    target_stages: list[str]
    target_sectors: list[str]
    geographic_focus: list[str]
    capital_types: list[str]
    support_types: list[str]
    tags: list[str]
    impact_focus: bool
    inclusion_focus: bool
    founder_profiles: list[str]


class OrganizationListResponse(BaseModel):
    organizations: list[OrganizationResponse]
    count: int
    filter: str


class StatsResponse(BaseModel):
    total_players: int
    total_startups_supported: int
    total_capital_deployed: float
    average_portfolio_size: int
    by_type: dict[str, int]
    by_stage: dict[str, int]
    by_geography: dict[str, int]
    by_sector: dict[str, int]


class ReloadResponse(BaseModel):
    status: str
    message: str
