"""Tests for filter option building and per-entity configurations."""

import pytest

from climate_finance.filtering.configs import (
    BASE_PROJECT_SEARCH_FIELDS,
    DOCUMENT_SEARCH_FIELDS,
    FUNDING_SOURCE_SEARCH_FIELDS,
    LEGACY_SEARCH_FIELDS,
    PROJECT_SEARCH_FIELDS,
    build_document_config,
    build_funding_source_config,
    build_project_config,
    get_config,
    legacy_config,
)
from climate_finance.filtering.models import FilterDefinition, FilterOption, YearRange
from climate_finance.filtering.options import (
    build_filter,
    capitalize_first,
    districts_for_divisions,
    entity_filter,
    has_missing,
    unique_values,
    year_bounds,
)


@pytest.fixture
def projects():
    return [
        {
            "status": "Active",
            "sector": "Water",
            "geographic_division": ["Khulna"],
            "districts": ["Satkhira"],
            "hotspot_types": ["Coastal Area"],
            "equity_marker": "targeted",
            "beginning": "2019-01-01",
            "delivery_partners": [{"id": 1}],
        },
        {
            "status": "Completed",
            "sector": "Agriculture",
            "geographic_division": ["Rajshahi"],
            "districts": ["Naogaon"],
            "hotspot_types": [],
            "equity_marker": "",
            "beginning": "2016-05-01",
            "delivery_partners": [],
        },
    ]


@pytest.fixture
def districts_by_division():
    return {
        "Khulna": ["Khulna", "Satkhira"],
        "Rajshahi": ["Naogaon", "Rajshahi"],
    }


def option_values(definition: FilterDefinition) -> list:
    return [o.value for o in definition.options]


class TestUniqueValues:
    def test_sorted_distinct(self):
        records = [{"s": "b"}, {"s": "a"}, {"s": "b"}]
        assert unique_values(records, "s") == ["a", "b"]

    def test_flattens_lists_and_drops_falsy(self):
        records = [{"s": ["x", ""]}, {"s": None}, {"s": ["y", "x"]}, {}]
        assert unique_values(records, "s") == ["x", "y"]

    def test_skips_objects(self):
        assert unique_values([{"s": [{"id": 1}, "a"]}], "s") == ["a"]


class TestHasMissing:
    def test_empty_list_counts_as_missing(self):
        assert has_missing([{"t": ["a"]}, {"t": []}], "t")

    def test_absent_key_counts_as_missing(self):
        assert has_missing([{"t": ["a"]}, {}], "t")

    def test_all_present(self):
        assert not has_missing([{"t": ["a"]}], "t")


class TestBuildFilter:
    def test_all_first_and_na_last(self):
        definition = build_filter("status", "Status", ["Active"], "All Status", include_na=True)
        assert definition.options == (
            FilterOption("All", "All Status"),
            FilterOption("Active", "Active"),
            FilterOption("N/A", "N/A"),
        )

    def test_label_function(self):
        definition = build_filter("m", "M", ["targeted"], "All", label_fn=capitalize_first)
        assert definition.options[1] == FilterOption("targeted", "Targeted")

    def test_entity_filter(self):
        definition = entity_filter(
            "implementing_entity_id",
            "Implementing Entity",
            [{"id": 1, "name": "LGED"}, {"name": "no id"}, {"id": 2}],
            "All Implementing Entities",
        )
        assert definition.options[1:] == (
            FilterOption(1, "LGED"),
            FilterOption(2, "2"),
        )


class TestYearBounds:
    def test_bounds(self, projects):
        assert year_bounds(projects) == YearRange(2016, 2019)

    def test_no_dates(self):
        assert year_bounds([{"beginning": None}]) == YearRange()


class TestDistrictsForDivisions:
    def test_all_districts_without_selection(self, districts_by_division):
        result = districts_for_divisions(districts_by_division, [])
        assert result == ["Khulna", "Naogaon", "Rajshahi", "Satkhira"]

    def test_all_sentinel_selects_everything(self, districts_by_division):
        result = districts_for_divisions(districts_by_division, ["All"])
        assert len(result) == 4

    def test_narrowed_by_division(self, districts_by_division):
        assert districts_for_divisions(districts_by_division, ["Khulna"]) == [
            "Khulna",
            "Satkhira",
        ]

    def test_unknown_division_uses_fallback(self, districts_by_division):
        assert districts_for_divisions(districts_by_division, ["Mars"], ["X"]) == ["X"]

    def test_no_division_data_uses_fallback(self):
        assert districts_for_divisions({}, ["Khulna"], ["B", "A", "B"]) == ["A", "B"]


class TestStaticConfigs:
    def test_project_weights(self):
        weights = {f.key: f.weight for f in PROJECT_SEARCH_FIELDS}
        assert weights["title"] == 3
        assert weights["project_id"] == 3
        assert weights["objectives"] == 2
        assert weights["assessment"] == 1

    def test_get_config(self):
        assert get_config("funding_sources").search_fields == FUNDING_SOURCE_SEARCH_FIELDS
        assert get_config("documents").search_fields == DOCUMENT_SEARCH_FIELDS

    @pytest.mark.parametrize(
        "entity", ["implementing_entities", "executing_agencies", "delivery_partners"]
    )
    def test_lookup_entities_search_by_name(self, entity):
        assert get_config(entity).search_fields == LEGACY_SEARCH_FIELDS

    def test_unknown_entity_defaults_to_projects(self):
        assert get_config("unknown").search_fields == PROJECT_SEARCH_FIELDS

    def test_legacy_config(self):
        definition = FilterDefinition("status", "Status")
        config = legacy_config([definition])
        assert config.search_fields == LEGACY_SEARCH_FIELDS
        assert config.filters == (definition,)


class TestBuildProjectConfig:
    def test_empty_projects_use_base_fields(self):
        config = build_project_config([])
        assert config.search_fields == BASE_PROJECT_SEARCH_FIELDS
        assert config.filters == ()

    def test_filter_order(self, projects, districts_by_division):
        config = build_project_config(
            projects,
            implementing_entities=[{"id": 1, "name": "LGED"}],
            delivery_partners=[{"id": 1, "name": "World Bank"}],
            districts_by_division=districts_by_division,
        )
        assert config.filter_keys == [
            "status",
            "sector",
            "geographic_division",
            "districts",
            "implementing_entity_id",
            "executing_agency_id",
            "delivery_partner_id",
            "funding_source_id",
            "hotspot_types",
            "equity_marker",
        ]

    def test_status_options(self, projects):
        config = build_project_config(projects)
        assert option_values(config.get_filter("status")) == ["All", "Active", "Completed"]

    def test_na_options_when_values_missing(self, projects):
        config = build_project_config(projects)
        assert option_values(config.get_filter("delivery_partner_id"))[-1] == "N/A"
        assert option_values(config.get_filter("hotspot_types")) == [
            "All",
            "Coastal Area",
            "N/A",
        ]

    def test_equity_labels_capitalized(self, projects):
        config = build_project_config(projects)
        options = config.get_filter("equity_marker").options
        assert options[1] == FilterOption("targeted", "Targeted")

    def test_districts_follow_selected_division(self, projects, districts_by_division):
        config = build_project_config(
            projects,
            districts_by_division=districts_by_division,
            criteria={"geographic_division": "Rajshahi"},
        )
        assert option_values(config.get_filter("districts")) == ["All", "Naogaon", "Rajshahi"]

    def test_districts_fall_back_to_project_values(self, projects):
        config = build_project_config(projects)
        assert option_values(config.get_filter("districts")) == ["All", "Naogaon", "Satkhira"]

    def test_funding_source_ids(self, projects):
        config = build_project_config(
            projects, funding_sources=[{"funding_source_id": 7, "name": "GCF"}]
        )
        assert config.get_filter("funding_source_id").options[1] == FilterOption(7, "GCF")

    def test_year_range(self, projects):
        assert build_project_config(projects).year_range == YearRange(2016, 2019)


class TestOtherConfigs:
    def test_funding_source_config(self):
        sources = [
            {"name": "GCF", "type": "Multilateral", "dev_partner": "UN"},
            {"name": "GoB", "type": "Government", "dev_partner": ""},
        ]
        config = build_funding_source_config(sources)
        assert config.search_fields == FUNDING_SOURCE_SEARCH_FIELDS
        assert config.filter_keys == ["type", "dev_partner"]
        assert option_values(config.get_filter("type")) == ["All", "Government", "Multilateral"]

    def test_document_config(self):
        documents = [{"categories": ["Policy", "Adaptation"]}, {"categories": ["Policy"]}]
        config = build_document_config(documents)
        assert option_values(config.get_filter("categories")) == ["All", "Adaptation", "Policy"]

    def test_document_config_without_categories(self):
        assert build_document_config([{"heading": "x"}]).filters == ()
