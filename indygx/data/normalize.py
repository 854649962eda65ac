"""
Row mapping: nested-record resolution, text parsing, type classification.

Turns one company_primary row (with its joined side tables) into an
Organization. Every helper degrades to a default instead of raising.
"""
from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Any, Callable, Iterable, Optional

from indygx.config import (
    AMOUNT_MULTIPLIERS,
    DEFAULT_TYPE,
    TYPE_RULES,
    UNKNOWN_HEADQUARTERS,
    UNKNOWN_NAME,
    UNKNOWN_WEBSITE,
)
from indygx.data.schemas import EcosystemType, Organization, Stage
from indygx.analytics.common import round_half_up

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"^\s*[+-]?[0-9]+")
_LEADING_FLOAT_RE = re.compile(r"^\s*[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)")
_NUMBER_CHARS_RE = re.compile(r"[^0-9.\-]")
_AMOUNT_CHARS_RE = re.compile(r"[^0-9.kmb]")
_UNIT_RE = re.compile(r"[kmb]")


# ---------------------------------------------------------------------------
# Nested records
# ---------------------------------------------------------------------------

def first_record(value: Any, table: str = "") -> dict:
    """Collapse a joined side table to one record.

    Supabase returns a nested select as a dict or a list of dicts. Only the
    first element is used; extra rows that disagree with it are logged.
    """
    if not value:
        return {}
    if isinstance(value, list):
        head = value[0] or {}
        if any(other != head for other in value[1:]):
            logger.warning(
                "%s: %d related rows differ, using the first", table or "side table", len(value)
            )
        return head
    return value


# ---------------------------------------------------------------------------
# Text parsing
# ---------------------------------------------------------------------------

def split_csv(value: Optional[str]) -> list[str]:
    """Comma-separated text → trimmed, non-empty segments."""
    if not value:
        return []
    return [s.strip() for s in str(value).split(",") if s.strip()]


def filter_stages(values: Iterable[str]) -> list[Stage]:
    """Keep recognized stage tokens in input order; everything else is dropped."""
    known = {s.value for s in Stage}
    return [Stage(v) for v in values if v in known]


def _leading_float(text: str) -> Optional[float]:
    m = _LEADING_FLOAT_RE.match(text)
    return float(m.group(0)) if m else None


def parse_year(value: Optional[str]) -> int:
    """Leading integer of a year field ("2015-16" → 2015); 0 when unknown."""
    if not value:
        return 0
    m = _LEADING_INT_RE.match(str(value))
    return int(m.group(0)) if m else 0


def parse_number(value: Optional[str]) -> float:
    """Strip everything but digits, dot and minus; 0 when unparseable."""
    if not value:
        return 0.0
    parsed = _leading_float(_NUMBER_CHARS_RE.sub("", str(value)))
    return 0.0 if parsed is None else parsed


def parse_financial_amount(value: Optional[str]) -> Optional[float]:
    """Parse "₹2.5M" style amounts into base units; None when there is no number.

    The first unit letter found (k, then m, then b) picks the multiplier.
    """
    if not value:
        return None
    cleaned = _AMOUNT_CHARS_RE.sub("", str(value).lower())
    multiplier = 1
    for suffix, factor in AMOUNT_MULTIPLIERS:
        if suffix in cleaned:
            multiplier = factor
            break
    num = _leading_float(_UNIT_RE.sub("", cleaned))
    return None if num is None else num * multiplier


def first_defined(*candidates: Callable[[], Optional[float]]) -> Optional[float]:
    """Evaluate candidates in order and return the first non-None result."""
    for candidate in candidates:
        result = candidate()
        if result is not None:
            return result
    return None


# ---------------------------------------------------------------------------
# Type classification
# ---------------------------------------------------------------------------

def derive_type(nature: Optional[str], industry: Optional[str]) -> EcosystemType:
    """Classify an organization from its nature + industry text (first rule wins)."""
    text = f"{nature or ''} {industry or ''}".lower()
    for required, excluded, eco_type in TYPE_RULES:
        if any(k in text for k in required) and not any(k in text for k in excluded):
            return EcosystemType(eco_type)
    return EcosystemType(DEFAULT_TYPE)


# ---------------------------------------------------------------------------
# Row → Organization
# ---------------------------------------------------------------------------

def _coalesce(*values):
    """First value that is not None (empty strings count as present)."""
    return next((v for v in values if v is not None), None)


def map_company_row(row: dict, current_year: int | None = None) -> Organization:
    """Build an Organization from one joined company row.

    current_year pins years_active for reproducible output; defaults to today.
    """
    secondary = first_record(row.get("company_secondary"), "company_secondary")
    financials = first_record(row.get("financials_funding"), "financials_funding")
    competitive = first_record(row.get("competitive_intelligence"), "competitive_intelligence")

    if current_year is None:
        current_year = dt.date.today().year
    year_founded = parse_year(row.get("year_of_incorporation"))
    years_active = max(current_year - year_founded, 0) if year_founded else 0

    # Zero is parse_number's "unknown", so it falls through to the next source
    startups = parse_number(row.get("employee_size")) or parse_number(secondary.get("processing_time"))
    capital = first_defined(
        lambda: parse_financial_amount(financials.get("total_capital_raised_to_date")),
        lambda: parse_financial_amount(financials.get("annual_revenues")),
        lambda: parse_financial_amount(financials.get("company_valuation")),
    )
    # Any positive figure counts as reported; stored rounded half-up
    portfolio = parse_number(secondary.get("success_rate_portfolio_exits_graduations"))

    industry = row.get("industry_segment")
    nature = row.get("nature_of_company")
    geography = row.get("countries_operating_in") or row.get("geographic_coverage_india")

    return Organization(
        id=str(row.get("company_id")),
        name=_coalesce(row.get("company_name"), UNKNOWN_NAME),
        type=derive_type(nature, industry),
        tagline=_coalesce(row.get("core_value_proposition"), industry, ""),
        description=_coalesce(row.get("services_offerings"), row.get("core_value_proposition"), ""),
        year_founded=year_founded,
        years_active=years_active,
        headquarters=_coalesce(row.get("countries_operating_in"), UNKNOWN_HEADQUARTERS),
        website=_coalesce(row.get("website_url"), UNKNOWN_WEBSITE),
        linkedin=row.get("linkedin_profile_url"),
        startups_supported=max(int(startups), 0),
        capital_deployed=capital,
        portfolio_size=round_half_up(portfolio) if portfolio > 0 else None,
        target_stages=filter_stages(split_csv(competitive.get("key_challenges_and_needs"))),
        target_sectors=split_csv(row.get("focus_sectors_industries")),
        geographic_focus=split_csv(geography),
        capital_types=[],
        support_types=split_csv(row.get("services_offerings")),
        tags=split_csv(industry) + split_csv(nature),
        impact_focus=False,
        inclusion_focus=False,
        founder_profiles=split_csv(row.get("ceo_name")),
    )


def map_company_rows(rows: Iterable[dict], current_year: int | None = None) -> list[Organization]:
    """Map every row; one Organization per row, input order preserved."""
    return [map_company_row(r, current_year) for r in rows or []]
