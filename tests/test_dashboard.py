import pytest

from indygx.analytics.dashboard import (
    compare_organizations,
    executive_overview,
    filter_organizations,
    growth_trend,
    organization_card,
    stage_distribution,
    top_sectors,
    type_distribution,
)
from indygx.analytics.stats import calculate_ecosystem_stats
from indygx.data.normalize import map_company_rows
from indygx.data.schemas import EcosystemStats, EcosystemType, Organization, OrganizationFilter

from conftest import REFERENCE_YEAR, sample_rows


@pytest.fixture
def orgs():
    return map_company_rows(sample_rows(), REFERENCE_YEAR)


@pytest.fixture
def stats(orgs):
    return calculate_ecosystem_stats(orgs)


def test_type_distribution_covers_every_type(stats):
    slices = type_distribution(stats)
    assert len(slices) == 6
    investor = next(s for s in slices if s["type"] == "investor")
    assert investor["name"] == "Investors"
    assert investor["value"] == 1
    assert investor["pct"] == 33.3
    assert investor["color"].startswith("hsl(")


def test_type_distribution_empty_has_zero_pct():
    assert all(s["pct"] == 0 for s in type_distribution(EcosystemStats()))


def test_stage_distribution(stats):
    assert [s["stage"] for s in stage_distribution(stats)] == ["idea", "early", "growth", "scale"]


def test_top_sectors_ranked_and_limited(stats):
    assert top_sectors(stats) == [
        {"name": "FinTech", "value": 3},
        {"name": "HealthTech", "value": 1},
        {"name": "AgriTech", "value": 1},
    ]
    assert len(top_sectors(stats, limit=1)) == 1


def test_growth_trend_sorted_by_year(orgs):
    assert growth_trend(orgs) == [
        {"name": "2010", "value": 1},
        {"name": "2015", "value": 1},
        {"name": "2019", "value": 1},
    ]
    assert [p["name"] for p in growth_trend(orgs, years=2)] == ["2015", "2019"]


def test_growth_trend_skips_unknown_years():
    org = Organization(id="x", name="X", type=EcosystemType.INCUBATOR)
    assert growth_trend([org]) == []


def test_filter_by_type_and_search(orgs):
    assert [o.id for o in filter_organizations(orgs)] == ["1", "2", "3"]
    f = OrganizationFilter(type=EcosystemType.COWORKING)
    assert [o.id for o in filter_organizations(orgs, f)] == ["2"]
    # tags include the nature of company
    f = OrganizationFilter(search="venture")
    assert [o.id for o in filter_organizations(orgs, f)] == ["1"]
    f = OrganizationFilter(type=EcosystemType.GOVERNMENT, search="launchpad")
    assert filter_organizations(orgs, f) == []


def test_filter_label():
    assert OrganizationFilter().label == "All Organizations"
    assert OrganizationFilter(type=EcosystemType.INVESTOR, search="fin").label == 'Investors matching "fin"'


def test_organization_card(orgs):
    card = organization_card(orgs[0])
    assert card["capital_display"] == "$3M"
    assert card["type_label"] == "Investors"
    assert len(card["tags"]) <= 3


def test_compare_keeps_collection_order_and_drops_unknown(orgs):
    data = compare_organizations(orgs, ["3", "1", "99"])
    assert [o["id"] for o in data["organizations"]] == ["1", "3"]
    startups = next(m for m in data["metrics"] if m["key"] == "startups_supported")
    assert startups["values"] == [120, 1200]
    assert startups["display"] == ["120", "1,200"]
    assert data["target_stages"][0] == ["Idea Stage", "Early Stage"]


def test_compare_rejects_more_than_four(orgs):
    with pytest.raises(ValueError):
        compare_organizations(orgs, ["1", "2", "3", "4", "5"])


def test_executive_overview(orgs, stats):
    data = executive_overview(orgs, stats)
    assert data["kpis"]["total_players"] == 3
    assert data["kpis"]["total_capital_display"] == "$3M"
    assert data["type_counts"]["incubator"] == 0
    assert data["top_sectors"][0]["name"] == "FinTech"
    assert len(data["growth_trend"]) == 3
