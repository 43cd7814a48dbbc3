"""Tests for the filter, search and pagination pipeline."""

import pytest

from climate_finance.filtering.configs import PROJECT_SEARCH_FIELDS
from climate_finance.filtering.models import SearchConfig, SearchState, YearRange
from climate_finance.filtering.pipeline import (
    clear_criteria,
    filter_by_year_range,
    has_active_filters,
    record_year,
    run_pipeline,
)


@pytest.fixture
def projects():
    return [
        {
            "project_id": "CF-001",
            "title": "Coastal Flood Resilience",
            "status": "Active",
            "beginning": "2019-07-01",
            "implementing_entities": [{"id": 1, "name": "LGED"}],
        },
        {
            "project_id": "CF-002",
            "title": "Solar Irrigation",
            "status": "Completed",
            "beginning": "2016-01-15",
            "objectives": "Reduce flood losses on farms",
            "implementing_entities": [],
        },
        {
            "project_id": "CF-003",
            "title": "Urban Drainage",
            "status": "Active",
            "beginning": None,
        },
    ]


@pytest.fixture
def config():
    return SearchConfig(search_fields=PROJECT_SEARCH_FIELDS)


class TestRecordYear:
    def test_leading_year(self):
        assert record_year({"beginning": "2019-07-01"}) == 2019

    def test_year_only(self):
        assert record_year({"beginning": "2021"}) == 2021

    def test_short_leading_number(self):
        assert record_year({"beginning": "999-01-01"}) == 999

    def test_only_first_four_characters_are_read(self):
        assert record_year({"beginning": " 2021"}) == 202
        assert record_year({"beginning": "20190701"}) == 2019

    def test_short_year_is_range_checked(self):
        records = [{"beginning": "999-01"}, {"beginning": "2019-01-01"}]
        assert filter_by_year_range(records, 2000, 2030) == [records[1]]

    @pytest.mark.parametrize("value", [None, "", "July 2019", 2019])
    def test_unparseable(self, value):
        assert record_year({"beginning": value}) is None

    def test_custom_field(self):
        assert record_year({"created_at": "2020-02-02"}, "created_at") == 2020


class TestFilterByYearRange:
    def test_no_bounds_is_identity(self, projects):
        assert filter_by_year_range(projects, None, None) == projects

    def test_inclusive_bounds(self, projects):
        result = filter_by_year_range(projects, 2019, 2019)
        assert result == [projects[0], projects[2]]

    def test_lower_bound_only(self, projects):
        assert filter_by_year_range(projects, 2018, None) == [projects[0], projects[2]]

    def test_upper_bound_only(self, projects):
        assert filter_by_year_range(projects, None, 2017) == [projects[1], projects[2]]


class TestActiveFilters:
    def test_query_counts(self):
        assert has_active_filters("flood", {})

    def test_whitespace_query_does_not_count(self):
        assert not has_active_filters("   ", {})

    def test_neutral_criteria_do_not_count(self):
        assert not has_active_filters("", {"status": ["All"], "sector": []})

    def test_constraining_criterion(self):
        assert has_active_filters("", {"status": ["Active"]})

    def test_clear_criteria(self):
        assert clear_criteria({"status": ["Active"], "sector": "Water"}) == {
            "status": [],
            "sector": [],
        }


class TestRunPipeline:
    def test_no_state_returns_everything(self, projects, config):
        result = run_pipeline(projects, SearchState(), config)
        assert result.records == projects
        assert result.page.total_items == 3
        assert result.page_reset is False

    def test_filters_then_search(self, projects, config):
        state = SearchState(query="flood", criteria={"status": ["Active"]})
        result = run_pipeline(projects, state, config)
        assert result.records == [projects[0]]

    def test_search_ranks_results(self, projects, config):
        result = run_pipeline(projects, SearchState(query="flood"), config)
        # title match (weight 3) outranks an objectives match (weight 2)
        assert result.records == [projects[0], projects[1]]

    def test_relational_filter(self, projects, config):
        state = SearchState(criteria={"implementing_entity_id": ["N/A"]})
        result = run_pipeline(projects, state, config)
        assert result.records == [projects[1], projects[2]]

    def test_year_range_applied(self, projects, config):
        state = SearchState(year_range=YearRange(min_year=2018))
        result = run_pipeline(projects, state, config)
        assert result.records == [projects[0], projects[2]]

    def test_pagination(self, projects, config):
        state = SearchState(page=2, per_page=2)
        result = run_pipeline(projects, state, config)
        assert result.page.items == [projects[2]]
        assert result.records == projects

    def test_page_reset_when_result_changes(self, projects, config):
        previous = run_pipeline(projects, SearchState(page=2, per_page=2), config).records
        state = SearchState(criteria={"status": ["Active"]}, page=2, per_page=2)
        result = run_pipeline(projects, state, config, previous=previous)
        assert result.page_reset is True
        assert result.page.page == 1

    def test_page_kept_when_result_unchanged(self, projects, config):
        previous = run_pipeline(projects, SearchState(per_page=2), config).records
        state = SearchState(page=2, per_page=2)
        result = run_pipeline(projects, state, config, previous=previous)
        assert result.page_reset is False
        assert result.page.page == 2

    def test_records_not_mutated(self, projects, config):
        snapshot = [dict(p) for p in projects]
        run_pipeline(projects, SearchState(query="flood", criteria={"status": "Active"}), config)
        assert projects == snapshot
