"""Registry and runner for the ten portfolio reports.

The catalog binds a dataset to an :class:`~insurance_analytics.config.AnalyticsConfig`
and supplies each report with the parameters it needs: the as-of date for
time-relative reports, the look-back window, the ranking depth and the
under-18 policy. Reports can be run one at a time, by number or by name, or
all together.

Because reports only read the immutable dataset, ``run_all(parallel=True)``
can fan them out over a thread pool without any locking.

Example:
    >>> from insurance_analytics import AnalyticsConfig, ReportCatalog, load_sample_dataset
    >>> catalog = ReportCatalog(load_sample_dataset(), AnalyticsConfig(as_of=date(2024, 6, 30)))
    >>> catalog.run(6).to_dataframe()  # doctest: +SKIP
    >>> results = catalog.run_all(parallel=True)
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import date
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple, Union

from . import reports
from .config import AnalyticsConfig
from .dataset import InsuranceDataset
from .exceptions import UnknownReportError
from .reports import ReportResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportDefinition:
    """Catalog entry for one report.

    Attributes:
        report_id: Catalog number (1-10).
        name: Report function name, usable as a lookup key.
        func: The report function.
        time_relative: Whether the report takes an ``as_of`` date.
        settings: Report settings passed through, as
            ``(setting name, keyword argument)`` pairs.
    """

    report_id: int
    name: str
    func: Callable[..., ReportResult]
    time_relative: bool = False
    settings: Tuple[Tuple[str, str], ...] = ()

    @property
    def description(self) -> str:
        """First line of the report function's docstring."""
        doc = self.func.__doc__ or ""
        return doc.strip().splitlines()[0] if doc.strip() else self.name


REPORTS: Tuple[ReportDefinition, ...] = (
    ReportDefinition(1, "average_claim_by_policy_type", reports.average_claim_by_policy_type),
    ReportDefinition(
        2,
        "rejected_claims_by_type",
        reports.rejected_claims_by_type,
        time_relative=True,
        settings=(("window_days", "window_days"),),
    ),
    ReportDefinition(
        3,
        "top_policyholders_by_approved_amount",
        reports.top_policyholders_by_approved_amount,
        settings=(("top_n", "n"),),
    ),
    ReportDefinition(
        4,
        "policyholders_by_gender_and_age",
        reports.policyholders_by_gender_and_age,
        time_relative=True,
        settings=(("minor_age_policy", "minor_age_policy"),),
    ),
    ReportDefinition(
        5,
        "active_policies_without_recent_claims",
        reports.active_policies_without_recent_claims,
        time_relative=True,
        settings=(("window_days", "window_days"),),
    ),
    ReportDefinition(6, "claim_approval_rate_by_type", reports.claim_approval_rate_by_type),
    ReportDefinition(7, "policy_status_mix_by_type", reports.policy_status_mix_by_type),
    ReportDefinition(8, "average_days_to_first_claim", reports.average_days_to_first_claim),
    ReportDefinition(9, "premium_to_claim_ratio_by_type", reports.premium_to_claim_ratio_by_type),
    ReportDefinition(10, "multi_policy_holders", reports.multi_policy_holders),
)


class ReportCatalog:
    """Run catalog reports against one dataset with one configuration.

    Args:
        dataset: Snapshot every report reads.
        config: Analytics configuration; ``AnalyticsConfig()`` when omitted.
    """

    def __init__(self, dataset: InsuranceDataset, config: Optional[AnalyticsConfig] = None):
        self.dataset = dataset
        self.config = config or AnalyticsConfig()
        self._by_id = {d.report_id: d for d in REPORTS}
        self._by_name = {d.name: d for d in REPORTS}

    @property
    def definitions(self) -> Tuple[ReportDefinition, ...]:
        """All registered reports, in catalog order."""
        return REPORTS

    def get(self, report: Union[int, str]) -> ReportDefinition:
        """Look up a report by catalog number or name.

        Args:
            report: Catalog number (``6`` or ``"6"``) or function name.

        Returns:
            The matching definition.

        Raises:
            UnknownReportError: If no report matches.
        """
        if isinstance(report, str) and report.strip().isdigit():
            report = int(report)
        definition = (
            self._by_id.get(report) if isinstance(report, int) else self._by_name.get(report)
        )
        if definition is None:
            known = ", ".join(f"{d.report_id}={d.name}" for d in REPORTS)
            raise UnknownReportError(f"Unknown report {report!r}. Known reports: {known}")
        return definition

    def run(self, report: Union[int, str], as_of: Optional[date] = None) -> ReportResult:
        """Run a single report.

        Args:
            report: Catalog number or name.
            as_of: Reference date overriding the configured one.

        Returns:
            The report's result.
        """
        definition = self.get(report)
        kwargs = self._arguments(definition, self.config.resolve_as_of(as_of))
        logger.info("Running report %d (%s)", definition.report_id, definition.name)
        return definition.func(self.dataset, **kwargs)

    def run_all(
        self,
        as_of: Optional[date] = None,
        parallel: bool = False,
        max_workers: Optional[int] = None,
    ) -> Dict[str, ReportResult]:
        """Run every report.

        The as-of date is resolved once, so every time-relative report in the
        batch sees the same reference date even if the run crosses midnight.

        Args:
            as_of: Reference date overriding the configured one.
            parallel: Run reports on a thread pool.
            max_workers: Thread pool size (executor default when None).

        Returns:
            Results keyed by report name, in catalog order.
        """
        resolved = self.config.resolve_as_of(as_of)
        start_time = time.time()
        logger.info(
            "Running %d reports as of %s (%s)",
            len(REPORTS),
            resolved,
            "parallel" if parallel else "sequential",
        )

        results: Dict[str, ReportResult] = {}
        if parallel:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = {
                    executor.submit(d.func, self.dataset, **self._arguments(d, resolved)): d
                    for d in REPORTS
                }
                for future in as_completed(futures):
                    results[futures[future].name] = future.result()
        else:
            for definition in REPORTS:
                results[definition.name] = definition.func(
                    self.dataset, **self._arguments(definition, resolved)
                )

        logger.info("Completed %d reports in %.2f seconds", len(results), time.time() - start_time)
        return {d.name: results[d.name] for d in REPORTS}

    def _arguments(self, definition: ReportDefinition, as_of: date) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        if definition.time_relative:
            kwargs["as_of"] = as_of
        for setting, keyword in definition.settings:
            kwargs[keyword] = getattr(self.config.reports, setting)
        return kwargs
