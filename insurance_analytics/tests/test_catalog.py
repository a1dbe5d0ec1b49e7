"""Tests for the report catalog and runner."""

from datetime import date
import logging

import pytest

from insurance_analytics.catalog import REPORTS, ReportCatalog
from insurance_analytics.config import AnalyticsConfig
from insurance_analytics.exceptions import UnknownReportError


@pytest.fixture
def catalog(portfolio, as_of):
    """Catalog over the sample snapshot with a pinned as-of date."""
    return ReportCatalog(portfolio, AnalyticsConfig(as_of=as_of))


class TestRegistry:
    """Test report registration and lookup."""

    def test_ten_reports_numbered_in_order(self):
        """Test the catalog numbers run 1 to 10."""
        assert [d.report_id for d in REPORTS] == list(range(1, 11))
        assert len({d.name for d in REPORTS}) == 10

    @pytest.mark.parametrize("key", [6, "6", " 6 ", "claim_approval_rate_by_type"])
    def test_lookup(self, catalog, key):
        """Test lookup by number, digit string and name."""
        assert catalog.get(key).name == "claim_approval_rate_by_type"

    @pytest.mark.parametrize("key", [0, 11, "approval", "99"])
    def test_unknown_report(self, catalog, key):
        """Test that unknown keys list the known reports."""
        with pytest.raises(UnknownReportError, match="Known reports: 1=average_claim"):
            catalog.get(key)

    def test_unknown_report_is_key_error(self, catalog):
        """Test compatibility with KeyError handlers."""
        with pytest.raises(KeyError):
            catalog.run("nope")

    def test_descriptions(self, catalog):
        """Test descriptions come from the report docstrings."""
        assert catalog.get(1).description.startswith("Average claim amount per policy type")

    def test_time_relative_flags(self):
        """Test which reports take an as-of date."""
        assert [d.report_id for d in REPORTS if d.time_relative] == [2, 4, 5]


class TestRun:
    """Test running single reports."""

    def test_run_by_number(self, catalog):
        """Test a report runs and carries its catalog number."""
        result = catalog.run(1)
        assert result.report_id == 1
        assert len(result) == 3

    def test_configured_as_of_used(self, catalog, as_of):
        """Test the configured reference date reaches time-relative reports."""
        assert catalog.run(5).as_of == as_of

    def test_explicit_as_of_wins(self, catalog):
        """Test a call-level as-of date overrides the configured one."""
        result = catalog.run("rejected_claims_by_type", as_of=date(2022, 6, 30))
        assert result.as_of == date(2022, 6, 30)
        assert [r.rejected_claims for r in result] == [1]

    def test_unpinned_as_of_is_today(self, portfolio):
        """Test that without any as-of date reports use today."""
        result = ReportCatalog(portfolio).run(4)
        assert result.as_of == date.today()

    def test_top_n_setting(self, portfolio, as_of):
        """Test the ranking depth comes from the report settings."""
        config = AnalyticsConfig(as_of=as_of, reports={"top_n": 2})
        result = ReportCatalog(portfolio, config).run(3)
        assert [r.policyholder_id for r in result] == [1, 4]

    def test_window_setting(self, portfolio, as_of):
        """Test the look-back window comes from the report settings."""
        config = AnalyticsConfig(as_of=as_of, reports={"window_days": 30})
        (row,) = ReportCatalog(portfolio, config).run(5)
        assert row.policies_without_recent_claims == 5

    def test_minor_policy_setting(self, portfolio, as_of):
        """Test the under-18 policy comes from the report settings."""
        config = AnalyticsConfig(as_of=as_of, reports={"minor_age_policy": "exclude"})
        result = ReportCatalog(portfolio, config).run(4)
        assert all(r.age_group != "Under 18" for r in result)

    def test_logs_report(self, catalog, caplog):
        """Test report runs are logged."""
        with caplog.at_level(logging.INFO, logger="insurance_analytics.catalog"):
            catalog.run(8)
        assert "Running report 8" in caplog.text


class TestRunAll:
    """Test running the whole catalog."""

    def test_catalog_order(self, catalog):
        """Test results are keyed by name in catalog order."""
        results = catalog.run_all()
        assert list(results) == [d.name for d in REPORTS]

    def test_parallel_matches_sequential(self, catalog):
        """Test that thread-pool execution gives identical results."""
        sequential = catalog.run_all()
        parallel = catalog.run_all(parallel=True, max_workers=4)
        assert list(parallel) == list(sequential)
        for name, result in sequential.items():
            assert parallel[name].rows == result.rows

    def test_single_reference_date(self, portfolio):
        """Test every time-relative report in a batch shares one as-of date."""
        results = ReportCatalog(portfolio).run_all(as_of=date(2024, 1, 1))
        dates = {r.as_of for r in results.values() if r.as_of is not None}
        assert dates == {date(2024, 1, 1)}

    def test_reports_independent(self, catalog):
        """Test running one report does not change another's output."""
        before = catalog.run(10).rows
        catalog.run_all()
        assert catalog.run(10).rows == before
