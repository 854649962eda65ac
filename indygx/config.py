"""
IndyGx — Configuration: backend credentials, table layout, classification rules, labels.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Supabase credentials: SUPABASE_* first, VITE_* names kept for shared .env files
# ---------------------------------------------------------------------------
SUPABASE_URL = os.environ.get("SUPABASE_URL") or os.environ.get("VITE_SUPABASE_URL")
SUPABASE_ANON_KEY = (
    os.environ.get("SUPABASE_ANON_KEY")
    or os.environ.get("SUPABASE_KEY")
    or os.environ.get("VITE_SUPABASE_ANON_KEY")
)

# ---------------------------------------------------------------------------
# Paths: override with INDYGX_DATA_DIR for cloud deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("INDYGX_DATA_DIR", str(Path.home() / "IndyGx")))
REPORTS_FOLDER = _data_dir / "reports"

LOG_LEVEL = os.environ.get("INDYGX_LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Backend schema: primary table plus seven one-to-one side tables
# ---------------------------------------------------------------------------
PRIMARY_TABLE = "company_primary"
PRIMARY_KEY = "company_id"

SIDE_TABLES = [
    "company_secondary",
    "competitive_intelligence",
    "contact_information",
    "digital_presence_brand",
    "financials_funding",
    "partnerships_ecosystem",
    "indygx_specific_assessment",
]

# Every table whose changes invalidate the organization snapshot
WATCHED_TABLES = [PRIMARY_TABLE] + SIDE_TABLES

CHANGE_CHANNEL = "company_changes"
CHANGE_SCHEMA = "public"

PRIMARY_COLUMNS = [
    "company_id",
    "company_name",
    "year_of_incorporation",
    "industry_segment",
    "nature_of_company",
    "website_url",
    "linkedin_profile_url",
    "ceo_name",
    "ceo_linkedin_url",
    "employee_size",
    "services_offerings",
    "core_value_proposition",
    "focus_sectors_industries",
    "countries_operating_in",
    "geographic_coverage_india",
]

COMPANY_SELECT = ", ".join(PRIMARY_COLUMNS + [f"{t} (*)" for t in SIDE_TABLES])

# ---------------------------------------------------------------------------
# Ecosystem types (canonical order)
# ---------------------------------------------------------------------------
ECOSYSTEM_TYPES = ["accelerator", "investor", "funding", "government", "coworking", "incubator"]

# ---------------------------------------------------------------------------
# Type classification (first match wins)
# (keywords that must appear, keywords that must not appear, type)
# ---------------------------------------------------------------------------
TYPE_RULES = [
    (("invest", "vc", "venture capital"), (), "investor"),
    (("fund",), ("founder",), "funding"),
    (("government", "govt", "public sector"), (), "government"),
    (("cowork", "co-work", "workspace"), (), "coworking"),
    (("incubat",), (), "incubator"),
    (("accelerat",), (), "accelerator"),
    # Fallback on offered services
    (("office", "space"), (), "coworking"),
]
DEFAULT_TYPE = "accelerator"

# Financial unit suffixes, checked in this order
AMOUNT_MULTIPLIERS = [
    ("k", 1_000),
    ("m", 1_000_000),
    ("b", 1_000_000_000),
]

# ---------------------------------------------------------------------------
# Field defaults for the organization view
# ---------------------------------------------------------------------------
UNKNOWN_NAME = "Unknown Organization"
UNKNOWN_HEADQUARTERS = "—"
UNKNOWN_WEBSITE = "#"

# ---------------------------------------------------------------------------
# Display labels & chart colours
# ---------------------------------------------------------------------------
ECOSYSTEM_TYPE_LABELS = {
    "accelerator": "Accelerators",
    "investor": "Investors",
    "funding": "Funding Platforms",
    "government": "Government",
    "coworking": "Co-working",
    "incubator": "Incubators",
}

ECOSYSTEM_TYPE_COLORS = {
    "accelerator": "hsl(173, 58%, 39%)",
    "investor": "hsl(222, 47%, 31%)",
    "funding": "hsl(43, 74%, 49%)",
    "government": "hsl(142, 52%, 42%)",
    "coworking": "hsl(262, 52%, 47%)",
    "incubator": "hsl(12, 76%, 61%)",
}

STAGE_LABELS = {
    "idea": "Idea Stage",
    "early": "Early Stage",
    "growth": "Growth Stage",
    "scale": "Scale Stage",
}

STAGE_SHORT_LABELS = {"idea": "Idea", "early": "Early", "growth": "Growth", "scale": "Scale"}

# ---------------------------------------------------------------------------
# Dashboard limits
# ---------------------------------------------------------------------------
COMPARE_LIMIT = 4
TOP_SECTOR_COUNT = 8
GROWTH_TREND_YEARS = 6
COMPARE_LIST_PREVIEW = 3
