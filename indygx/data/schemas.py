"""
Organization view model, ecosystem stats, and directory filter schemas.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional


class EcosystemType(str, Enum):
    ACCELERATOR = "accelerator"
    INVESTOR = "investor"
    FUNDING = "funding"
    GOVERNMENT = "government"
    COWORKING = "coworking"
    INCUBATOR = "incubator"


class Stage(str, Enum):
    IDEA = "idea"
    EARLY = "early"
    GROWTH = "growth"
    SCALE = "scale"


class CapitalType(str, Enum):
    EQUITY = "equity"
    GRANT = "grant"
    DEBT = "debt"
    BLENDED = "blended"
    CONVERTIBLE = "convertible"


@dataclass(frozen=True)
class Organization:
    """One ecosystem player, flattened from a company row and its side tables."""
    id: str
    name: str
    type: EcosystemType
    tagline: str = ""
    description: str = ""
    year_founded: int = 0                # 0 = unknown
    years_active: int = 0
    headquarters: str = ""
    website: str = ""
    linkedin: Optional[str] = None

    # Metrics
    startups_supported: int = 0
    capital_deployed: Optional[float] = None    # None = no data, not zero
    portfolio_size: Optional[int] = None

    # Focus areas
    target_stages: list[Stage] = field(default_factory=list)
    target_sectors: list[str] = field(default_factory=list)
    geographic_focus: list[str] = field(default_factory=list)
    capital_types: list[CapitalType] = field(default_factory=list)

    support_types: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    # Impact
    impact_focus: bool = False
    inclusion_focus: bool = False
    founder_profiles: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Plain-JSON form: enums become their string values."""
        data = asdict(self)
        data["type"] = self.type.value
        data["target_stages"] = [s.value for s in self.target_stages]
        data["capital_types"] = [c.value for c in self.capital_types]
        return data


@dataclass
class EcosystemStats:
    """Derived aggregate over a collection of organizations."""
    total_players: int = 0
    total_startups_supported: int = 0
    total_capital_deployed: float = 0.0
    average_portfolio_size: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    by_stage: dict[str, int] = field(default_factory=dict)
    by_geography: dict[str, int] = field(default_factory=dict)
    by_sector: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class OrganizationFilter:
    """Directory filter: one ecosystem type (None = all) plus a free-text search."""
    type: Optional[EcosystemType] = None
    search: str = ""

    def matches(self, org: Organization) -> bool:
        if self.type is not None and org.type != self.type:
            return False
        if not self.search:
            return True
        q = self.search.lower()
        return (
            q in org.name.lower()
            or q in org.tagline.lower()
            or any(q in tag.lower() for tag in org.tags)
        )

    @property
    def label(self) -> str:
        """Human-readable label for the filter."""
        from indygx.config import ECOSYSTEM_TYPE_LABELS

        base = ECOSYSTEM_TYPE_LABELS[self.type.value] if self.type else "All Organizations"
        if self.search:
            return f'{base} matching "{self.search}"'
        return base
