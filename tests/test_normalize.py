import logging

import pytest

from indygx.data.normalize import (
    derive_type,
    filter_stages,
    first_record,
    map_company_row,
    map_company_rows,
    parse_financial_amount,
    parse_number,
    parse_year,
    split_csv,
)
from indygx.data.schemas import EcosystemType, Stage

from conftest import REFERENCE_YEAR, sample_rows


# ---------------------------------------------------------------------------
# Nested records
# ---------------------------------------------------------------------------

def test_first_record_shapes():
    assert first_record({"a": 1}) == {"a": 1}
    assert first_record([{"a": 1}, {"a": 1}]) == {"a": 1}
    assert first_record([]) == {}
    assert first_record(None) == {}


def test_first_record_warns_when_related_rows_differ(caplog):
    with caplog.at_level(logging.WARNING, logger="indygx.data.normalize"):
        assert first_record([{"a": 1}, {"a": 2}], "financials_funding") == {"a": 1}
    assert "financials_funding" in caplog.text


# ---------------------------------------------------------------------------
# Text parsing
# ---------------------------------------------------------------------------

def test_split_csv_trims_and_drops_empty():
    assert split_csv(" FinTech , ,HealthTech,") == ["FinTech", "HealthTech"]
    assert split_csv("") == []
    assert split_csv(None) == []


def test_filter_stages_keeps_known_in_order():
    assert filter_stages(split_csv("idea, seed, early, unknown")) == [Stage.IDEA, Stage.EARLY]
    assert filter_stages(["scale", "idea", "scale"]) == [Stage.SCALE, Stage.IDEA, Stage.SCALE]
    assert filter_stages(["Idea"]) == []


@pytest.mark.parametrize("raw, expected", [
    ("2015", 2015),
    ("2015-16", 2015),
    (" 2008", 2008),
    ("FY 2015", 0),
    ("२०१५", 0),
    ("", 0),
    (None, 0),
])
def test_parse_year(raw, expected):
    assert parse_year(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    ("1,200", 1200.0),
    ("11-50", 11.0),
    ("-3.5 units", -3.5),
    ("about 40%", 40.0),
    ("n/a", 0.0),
    ("१२००", 0.0),
    (None, 0.0),
])
def test_parse_number(raw, expected):
    assert parse_number(raw) == expected


def test_parse_financial_amount_units():
    assert parse_financial_amount("₹2.5M") == 2_500_000
    assert parse_financial_amount("$500k") == 500_000
    assert parse_financial_amount("USD 1.2B") == pytest.approx(1_200_000_000)
    assert parse_financial_amount("750") == 750


def test_parse_financial_amount_unknown_is_none():
    assert parse_financial_amount("raised") is None
    assert parse_financial_amount("") is None
    assert parse_financial_amount(None) is None


def test_parse_financial_amount_first_unit_letter_wins():
    # "k" is checked before "m" regardless of position
    assert parse_financial_amount("10 mn bk") == 10_000


# ---------------------------------------------------------------------------
# Type classification
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("nature, industry, expected", [
    ("Investor Fund", "Tech", EcosystemType.INVESTOR),
    ("Government VC arm", None, EcosystemType.INVESTOR),
    ("Fund of Funds", None, EcosystemType.FUNDING),
    ("Founder Fund", "", EcosystemType.ACCELERATOR),
    ("Govt agency", None, EcosystemType.GOVERNMENT),
    (None, "Public Sector", EcosystemType.GOVERNMENT),
    ("Workspace provider", None, EcosystemType.COWORKING),
    ("Incubation centre", None, EcosystemType.INCUBATOR),
    ("Accelerator program", None, EcosystemType.ACCELERATOR),
    ("Office rentals", None, EcosystemType.COWORKING),
    (None, None, EcosystemType.ACCELERATOR),
])
def test_derive_type_priority(nature, industry, expected):
    assert derive_type(nature, industry) == expected


# ---------------------------------------------------------------------------
# Row → Organization
# ---------------------------------------------------------------------------

def test_map_full_row():
    org = map_company_row(sample_rows()[0], REFERENCE_YEAR)
    assert org.id == "1"
    assert org.type == EcosystemType.INVESTOR
    assert org.tagline == "Backing bold founders"
    assert org.description == "Mentoring, Funding"
    assert org.year_founded == 2015
    assert org.years_active == 10
    assert org.startups_supported == 120
    assert org.capital_deployed == 2_500_000
    assert org.portfolio_size == 40
    assert org.target_stages == [Stage.IDEA, Stage.EARLY]
    assert org.target_sectors == ["FinTech", "HealthTech"]
    assert org.geographic_focus == ["India", "Singapore"]
    assert org.support_types == ["Mentoring", "Funding"]
    assert org.tags == ["FinTech", "SaaS", "Venture Capital Fund"]
    assert org.founder_profiles == ["A. Rao"]
    assert org.linkedin == "https://linkedin.com/company/launchpad"


def test_map_row_fallback_chains():
    org = map_company_row(sample_rows()[1], REFERENCE_YEAR)
    assert org.type == EcosystemType.COWORKING
    # employee_size empty → processing_time
    assert org.startups_supported == 35
    # "raised" has no number → annual revenue
    assert org.capital_deployed == 500_000
    assert org.geographic_focus == ["Bengaluru", "Pune"]
    assert org.tagline == "Real Estate"
    assert org.headquarters == "—"
    assert org.website == "#"
    assert org.portfolio_size is None


def test_map_row_without_side_tables():
    org = map_company_row({"company_id": 9}, REFERENCE_YEAR)
    assert org.capital_deployed is None
    assert org.portfolio_size is None
    assert org.startups_supported == 0
    assert org.name == "Unknown Organization"
    assert org.type == EcosystemType.ACCELERATOR
    assert org.year_founded == 0
    assert org.years_active == 0
    assert org.target_stages == []


def test_years_active_never_negative():
    org = map_company_row({"company_id": 5, "year_of_incorporation": "2031"}, REFERENCE_YEAR)
    assert org.year_founded == 2031
    assert org.years_active == 0


def test_explicit_zero_capital_is_kept():
    row = {"company_id": 6, "financials_funding": {"total_capital_raised_to_date": "0", "annual_revenues": "5k"}}
    assert map_company_row(row, REFERENCE_YEAR).capital_deployed == 0


@pytest.mark.parametrize("raw, expected", [
    ("12.9", 13),
    ("12.4", 12),
    ("0.5", 1),
    ("0", None),
    ("n/a", None),
])
def test_portfolio_size_rounds_half_up(raw, expected):
    row = {"company_id": 7, "company_secondary": {"success_rate_portfolio_exits_graduations": raw}}
    assert map_company_row(row, REFERENCE_YEAR).portfolio_size == expected


def test_mapping_is_deterministic():
    row = sample_rows()[0]
    assert map_company_row(row, REFERENCE_YEAR) == map_company_row(row, REFERENCE_YEAR)


def test_map_company_rows_one_per_row():
    orgs = map_company_rows(sample_rows(), REFERENCE_YEAR)
    assert [o.id for o in orgs] == ["1", "2", "3"]
    assert map_company_rows(None) == []


def test_to_dict_uses_plain_values():
    data = map_company_row(sample_rows()[0], REFERENCE_YEAR).to_dict()
    assert data["type"] == "investor"
    assert data["target_stages"] == ["idea", "early"]
    assert data["capital_types"] == []
