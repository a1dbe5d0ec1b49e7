"""Exceptions raised by the insurance analytics package.

Row-level problems inside a report never surface as exceptions; they are
isolated to the affected row or group. The exceptions below cover invalid
input snapshots and direct misuse of the aggregation helpers.
"""

from typing import List


class InsuranceAnalyticsError(Exception):
    """Base class for all insurance-analytics errors."""


class DatasetValidationError(InsuranceAnalyticsError):
    """Raised when an input snapshot cannot be turned into a dataset.

    Attributes:
        issues: List of specific problems found (bad rows, duplicate ids).

    Examples:
        Catching and inspecting issues::

            try:
                dataset = load_dataset("exports/")
            except DatasetValidationError as e:
                for issue in e.issues:
                    print(f"  - {issue}")
    """

    def __init__(self, issues: List[str]) -> None:
        self.issues = issues
        bullet_list = "\n".join(f"  - {issue}" for issue in issues)
        super().__init__(
            f"Dataset has {len(issues)} "
            f"{'issue' if len(issues) == 1 else 'issues'}:\n{bullet_list}"
        )


class EmptyGroupError(InsuranceAnalyticsError):
    """Raised when a mean is requested over an empty group."""


class OutOfRangeError(InsuranceAnalyticsError, ValueError):
    """Raised when a value falls outside the range a bucketing scheme covers."""


class UnknownReportError(InsuranceAnalyticsError, KeyError):
    """Raised when a report is requested by a number or name that is not registered."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""
