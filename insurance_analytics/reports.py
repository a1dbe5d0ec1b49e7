"""The ten portfolio reports.

Each report is a pure function of an :class:`~insurance_analytics.dataset.InsuranceDataset`
(plus an explicit ``as_of`` date for time-relative reports) returning a
:class:`ReportResult`: an ordered tuple of frozen row dataclasses. No report
reads the clock, mutates the dataset or depends on another report having
run, so any subset can run in any order, or concurrently.

Conventions shared by all reports:
    - Amounts, averages and percentages are ``Decimal`` rounded half-up to 2
      places; day counts are averaged the same way.
    - An undefined quotient (zero denominator) is ``None`` in its row and
      never raises.
    - Empty input collections produce an empty result, not an error.
    - Orderings that the business question leaves open are fixed with an
      explicit tie-break so repeated runs give identical output.

Examples:
    Run a single report::

        from insurance_analytics.reports import claim_approval_rate_by_type

        result = claim_approval_rate_by_type(dataset)
        for row in result:
            print(row.claim_type, row.approval_rate)

    Time-relative reports take the as-of date explicitly::

        rejected = rejected_claims_by_type(dataset, as_of=date(2024, 6, 30))
        rejected.to_dataframe()
"""

from dataclasses import asdict, dataclass, fields
from datetime import date
from decimal import Decimal
from enum import Enum
import logging
from typing import Any, Dict, Generic, Iterator, List, Optional, Sequence, Tuple, Type, TypeVar

import pandas as pd

from .aggregation import (
    AGE_GROUP_ORDER,
    date_bucket,
    group_average,
    group_count,
    mean,
    partition,
    ratio,
    safe_quotient,
    top_n,
    within_window,
)
from .dataset import InsuranceDataset
from .decimal_utils import quantize_currency, sum_decimals
from .exceptions import OutOfRangeError
from .joins import first_claim_dates, iter_claim_rows, iter_policy_rows
from .models import ClaimType, Gender, PolicyStatus, PolicyType

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")

DEFAULT_WINDOW_DAYS = 365
DEFAULT_TOP_N = 10


@dataclass(frozen=True)
class ReportResult(Generic[RowT]):
    """Tabular result of a report.

    Attributes:
        report_id: Catalog number of the report (1-10).
        name: Function name of the report.
        title: Human-readable title.
        row_type: Dataclass describing one row; its fields are the columns.
        rows: Ordered rows.
        as_of: Reference date, for time-relative reports.
    """

    report_id: int
    name: str
    title: str
    row_type: Type[RowT]
    rows: Tuple[RowT, ...]
    as_of: Optional[date] = None

    @property
    def columns(self) -> Tuple[str, ...]:
        """Column names, in row field order."""
        return tuple(f.name for f in fields(self.row_type))  # type: ignore[arg-type]

    @property
    def is_empty(self) -> bool:
        """Whether the report produced no rows."""
        return not self.rows

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[RowT]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> RowT:
        return self.rows[index]

    def to_records(self) -> List[Dict[str, Any]]:
        """Rows as dictionaries, with enum members replaced by their labels."""
        records = []
        for row in self.rows:
            values = asdict(row)  # type: ignore[call-overload]
            records.append({k: (v.value if isinstance(v, Enum) else v) for k, v in values.items()})
        return records

    def to_dataframe(self) -> pd.DataFrame:
        """Rows as a DataFrame with one column per row field.

        Returns:
            DataFrame; an empty result still carries the column names.
        """
        return pd.DataFrame(self.to_records(), columns=list(self.columns))


def _result(
    report_id: int,
    name: str,
    title: str,
    row_type: Type[RowT],
    rows: Sequence[RowT],
    as_of: Optional[date] = None,
) -> ReportResult[RowT]:
    logger.debug("Report %d (%s) produced %d rows", report_id, name, len(rows))
    return ReportResult(report_id, name, title, row_type, tuple(rows), as_of)


def _enum_position(member: Enum) -> int:
    return list(type(member)).index(member)


# ---------------------------------------------------------------------- #
#  1. Average claim amount by policy type
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class AverageClaimRow:
    """Average claim amount for one policy type."""

    policy_type: PolicyType
    claim_count: int
    average_claim_amount: Decimal


def average_claim_by_policy_type(dataset: InsuranceDataset) -> ReportResult[AverageClaimRow]:
    """Average claim amount per policy type, highest first.

    Claims are inner-joined to their policies; claims on unknown policies
    are not attributed to any type. Ties are ordered by policy type label.
    """
    rows = list(iter_claim_rows(dataset))
    averages = group_average(rows, lambda r: r.policy.policy_type, lambda r: r.claim.claim_amount)
    counts = group_count(rows, lambda r: r.policy.policy_type)

    result = [
        AverageClaimRow(policy_type=key, claim_count=counts[key], average_claim_amount=avg)
        for key, avg in averages.items()
    ]
    result.sort(key=lambda r: (-r.average_claim_amount, r.policy_type.value))
    return _result(
        1,
        "average_claim_by_policy_type",
        "Average claim amount by policy type",
        AverageClaimRow,
        result,
    )


# ---------------------------------------------------------------------- #
#  2. Rejected claims by claim type within the look-back window
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class RejectedClaimsRow:
    """Rejected-claim count for one claim type."""

    claim_type: ClaimType
    rejected_claims: int


def rejected_claims_by_type(
    dataset: InsuranceDataset, as_of: date, window_days: int = DEFAULT_WINDOW_DAYS
) -> ReportResult[RejectedClaimsRow]:
    """Number of rejected claims per claim type over the last ``window_days`` days.

    The window is a direct calendar-date comparison,
    ``as_of - window_days <= claim_date <= as_of``. Claim types with no
    rejection in the window are omitted. Ordered by count descending, then
    by claim type label.

    Args:
        dataset: Snapshot to analyze.
        as_of: Reference date ending the window.
        window_days: Window length in days.
    """
    recent_rejections = [
        claim
        for claim in dataset.claims
        if claim.is_rejected and within_window(claim.claim_date, as_of, window_days)
    ]
    counts = group_count(recent_rejections, lambda c: c.claim_type)

    result = [RejectedClaimsRow(claim_type=k, rejected_claims=v) for k, v in counts.items()]
    result.sort(key=lambda r: (-r.rejected_claims, r.claim_type.value))
    return _result(
        2,
        "rejected_claims_by_type",
        "Rejected claims by type in the look-back window",
        RejectedClaimsRow,
        result,
        as_of,
    )


# ---------------------------------------------------------------------- #
#  3. Top policyholders by approved claim amount
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class TopPolicyholderRow:
    """Approved claim total for one policyholder."""

    policyholder_id: int
    full_name: str
    total_approved_amount: Decimal


def top_policyholders_by_approved_amount(
    dataset: InsuranceDataset, n: int = DEFAULT_TOP_N
) -> ReportResult[TopPolicyholderRow]:
    """The ``n`` policyholders with the largest summed approved amount.

    Only Approved claims count. Ties are broken by policyholder id
    ascending. When fewer than ``n`` policyholders have an approved claim,
    all of them are returned. Claims whose policyholder is missing from the
    snapshot are ignored, since there is no one to rank.

    Args:
        dataset: Snapshot to analyze.
        n: Number of policyholders to return.
    """
    approved = [
        row for row in iter_claim_rows(dataset, require_policyholder=True) if row.claim.is_approved
    ]
    ranked = top_n(
        approved, lambda r: r.policyholder.policyholder_id, lambda r: r.claim.approved_amount, n
    )

    result = []
    for policyholder_id, total in ranked:
        holder = dataset.policyholder(policyholder_id)
        result.append(
            TopPolicyholderRow(
                policyholder_id=policyholder_id,
                full_name=holder.full_name,  # type: ignore[union-attr]
                total_approved_amount=total,
            )
        )
    return _result(
        3,
        "top_policyholders_by_approved_amount",
        f"Top {n} policyholders by approved amount",
        TopPolicyholderRow,
        result,
    )


# ---------------------------------------------------------------------- #
#  4. Policyholders by gender and age group
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class DemographicRow:
    """Policyholder count for one (gender, age group) cell."""

    gender: Gender
    age_group: str
    policyholder_count: int


def policyholders_by_gender_and_age(
    dataset: InsuranceDataset, as_of: date, minor_age_policy: str = "bucket"
) -> ReportResult[DemographicRow]:
    """Count of policyholders per gender and age group at ``as_of``.

    Only non-empty cells are listed, ordered by gender label and then from the
    youngest age group to the oldest.

    Args:
        dataset: Snapshot to analyze.
        as_of: Date at which ages are evaluated.
        minor_age_policy: ``"bucket"`` counts policyholders under 18 as
            "Under 18"; ``"exclude"`` leaves them out. Policyholders born
            after ``as_of`` are always left out. Every exclusion is logged.
    """
    allow_minors = minor_age_policy == "bucket"
    cells = []
    for holder in dataset.policyholders:
        try:
            age_group = date_bucket(holder.date_of_birth, as_of, allow_minors=allow_minors)
        except OutOfRangeError as exc:
            logger.warning(
                "Excluding policyholder %d from age groups: %s", holder.policyholder_id, exc
            )
            continue
        cells.append((holder.gender, age_group))

    counts = group_count(cells, lambda cell: cell)

    result = [
        DemographicRow(gender=gender, age_group=age_group, policyholder_count=count)
        for (gender, age_group), count in counts.items()
    ]
    result.sort(key=lambda r: (r.gender.value, AGE_GROUP_ORDER.index(r.age_group)))
    return _result(
        4,
        "policyholders_by_gender_and_age",
        "Policyholders by gender and age group",
        DemographicRow,
        result,
        as_of,
    )


# ---------------------------------------------------------------------- #
#  5. Active policies without recent claims
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class InactivePoliciesRow:
    """Active policies with and without claims in the look-back window."""

    active_policies: int
    policies_without_recent_claims: int


def active_policies_without_recent_claims(
    dataset: InsuranceDataset, as_of: date, window_days: int = DEFAULT_WINDOW_DAYS
) -> ReportResult[InactivePoliciesRow]:
    """Count of Active policies with no claim in the last ``window_days`` days.

    A policy qualifies when NOT EXISTS a claim on it dated inside
    ``[as_of - window_days, as_of]``. The single row also carries the total
    number of active policies. Empty when there are no policies at all.

    Args:
        dataset: Snapshot to analyze.
        as_of: Reference date ending the window.
        window_days: Window length in days.
    """
    result = []
    if dataset.policies:
        active = [policy for policy in dataset.policies if policy.is_active]
        without_recent = [
            policy
            for policy in active
            if not any(
                within_window(claim.claim_date, as_of, window_days)
                for claim in dataset.claims_for_policy(policy.policy_id)
            )
        ]
        result.append(
            InactivePoliciesRow(
                active_policies=len(active), policies_without_recent_claims=len(without_recent)
            )
        )
    return _result(
        5,
        "active_policies_without_recent_claims",
        "Active policies without recent claims",
        InactivePoliciesRow,
        result,
        as_of,
    )


# ---------------------------------------------------------------------- #
#  6. Claim approval rate by claim type
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class ApprovalRateRow:
    """Approval statistics for one claim type."""

    claim_type: ClaimType
    total_claims: int
    approved_claims: int
    approval_rate: Optional[Decimal]


def claim_approval_rate_by_type(dataset: InsuranceDataset) -> ReportResult[ApprovalRateRow]:
    """Share of claims approved, per claim type, highest rate first.

    ``approval_rate = approved_claims / total_claims * 100``. Pending claims
    count in the denominator. Ties are ordered by claim type label.
    """
    totals = group_count(dataset.claims, lambda c: c.claim_type)
    approved = group_count(dataset.claims, lambda c: c.claim_type, lambda c: c.is_approved)

    result = [
        ApprovalRateRow(
            claim_type=key,
            total_claims=total,
            approved_claims=approved[key],
            approval_rate=ratio(approved[key], total),
        )
        for key, total in totals.items()
    ]
    result.sort(
        key=lambda r: (
            r.approval_rate is None,
            -(r.approval_rate or 0),
            r.claim_type.value,
        )
    )
    return _result(
        6,
        "claim_approval_rate_by_type",
        "Claim approval rate by claim type",
        ApprovalRateRow,
        result,
    )


# ---------------------------------------------------------------------- #
#  7. Policy status mix and average premium by policy type
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class PolicyStatusMixRow:
    """Expired/cancelled shares and average premium for one policy type."""

    policy_type: PolicyType
    total_policies: int
    expired_pct: Optional[Decimal]
    cancelled_pct: Optional[Decimal]
    average_premium: Decimal


def policy_status_mix_by_type(dataset: InsuranceDataset) -> ReportResult[PolicyStatusMixRow]:
    """Percentage of Expired and Cancelled policies plus mean premium, per policy type.

    Each percentage counts exactly the status it is named after, so
    ``expired_pct + cancelled_pct`` never exceeds 100 and the remainder is
    the Active share. Rows follow the declaration order of
    :class:`~insurance_analytics.models.PolicyType`.
    """
    policies = dataset.policies

    def type_of(policy):
        return policy.policy_type

    totals = group_count(policies, type_of)
    expired = group_count(policies, type_of, lambda p: p.status is PolicyStatus.EXPIRED)
    cancelled = group_count(policies, type_of, lambda p: p.status is PolicyStatus.CANCELLED)
    premiums = group_average(policies, type_of, lambda p: p.premium_amount)

    result = [
        PolicyStatusMixRow(
            policy_type=key,
            total_policies=total,
            expired_pct=ratio(expired[key], total),
            cancelled_pct=ratio(cancelled[key], total),
            average_premium=premiums[key],
        )
        for key, total in totals.items()
    ]
    result.sort(key=lambda r: _enum_position(r.policy_type))
    return _result(
        7,
        "policy_status_mix_by_type",
        "Policy status mix and average premium by type",
        PolicyStatusMixRow,
        result,
    )


# ---------------------------------------------------------------------- #
#  8. Average days from policy start to first claim
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class DaysToFirstClaimRow:
    """Average delay between policy start and its first claim."""

    policies_with_claims: int
    average_days_to_first_claim: Decimal


def average_days_to_first_claim(dataset: InsuranceDataset) -> ReportResult[DaysToFirstClaimRow]:
    """Mean number of days between a policy's start date and its earliest claim.

    Only policies with at least one claim contribute. A first claim dated
    before the policy start contributes a negative delay. Empty when no
    policy has a claim.
    """
    firsts = first_claim_dates(dataset)
    delays = [
        (first - dataset.policy(policy_id).start_date).days  # type: ignore[union-attr]
        for policy_id, first in firsts.items()
    ]

    result = []
    if delays:
        result.append(
            DaysToFirstClaimRow(
                policies_with_claims=len(delays), average_days_to_first_claim=mean(delays)
            )
        )
    return _result(
        8,
        "average_days_to_first_claim",
        "Average days from policy start to first claim",
        DaysToFirstClaimRow,
        result,
    )


# ---------------------------------------------------------------------- #
#  9. Premium-to-claim ratio by policy type
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class PremiumClaimRatioRow:
    """Average premium against average claim for one policy type."""

    policy_type: PolicyType
    average_premium: Decimal
    average_claim_amount: Decimal
    premium_to_claim_ratio: Optional[Decimal]


def premium_to_claim_ratio_by_type(
    dataset: InsuranceDataset,
) -> ReportResult[PremiumClaimRatioRow]:
    """Mean premium divided by mean claim amount, per policy type.

    The mean premium is taken over all policies of the type (each policy
    once); the mean claim amount over the claims filed against them. Only
    types with at least one claim are listed, in
    :class:`~insurance_analytics.models.PolicyType` declaration order. The
    ratio divides the unrounded means, so only the displayed mean columns
    are rounded, and is ``None`` only when the mean claim amount is zero.
    """
    claims_by_type = partition(
        iter_claim_rows(dataset), lambda r: r.policy.policy_type, lambda r: r.claim.claim_amount
    )
    premiums_by_type = partition(
        dataset.policies, lambda p: p.policy_type, lambda p: p.premium_amount
    )

    result = []
    for key, amounts in claims_by_type.items():
        premiums = premiums_by_type[key]
        premium_mean = sum_decimals(premiums) / len(premiums)
        claim_mean = sum_decimals(amounts) / len(amounts)
        result.append(
            PremiumClaimRatioRow(
                policy_type=key,
                average_premium=quantize_currency(premium_mean),
                average_claim_amount=quantize_currency(claim_mean),
                premium_to_claim_ratio=safe_quotient(premium_mean, claim_mean),
            )
        )
    result.sort(key=lambda r: _enum_position(r.policy_type))
    return _result(
        9,
        "premium_to_claim_ratio_by_type",
        "Premium to claim ratio by policy type",
        PremiumClaimRatioRow,
        result,
    )


# ---------------------------------------------------------------------- #
#  10. Policyholders with more than one policy
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class MultiPolicyHolderRow:
    """Portfolio totals for a policyholder owning several policies."""

    policyholder_id: int
    full_name: str
    policy_count: int
    total_premium: Decimal
    total_claim_amount: Decimal


def multi_policy_holders(dataset: InsuranceDataset) -> ReportResult[MultiPolicyHolderRow]:
    """Policyholders with more than one distinct policy, by total premium.

    Each policy's premium is summed once regardless of how many claims it
    has; the claim total covers every claim on the holder's policies (zero
    when there are none). Ordered by total premium descending, then by
    policyholder id.
    """
    by_holder = partition(
        iter_policy_rows(dataset, require_policyholder=True),
        lambda r: r.policyholder.policyholder_id,  # type: ignore[union-attr]
        lambda r: r,
    )

    result = []
    for policyholder_id, rows in by_holder.items():
        policies = {row.policy.policy_id: row.policy for row in rows}
        if len(policies) <= 1:
            continue
        result.append(
            MultiPolicyHolderRow(
                policyholder_id=policyholder_id,
                full_name=rows[0].policyholder.full_name,  # type: ignore[union-attr]
                policy_count=len(policies),
                total_premium=sum_decimals(p.premium_amount for p in policies.values()),
                total_claim_amount=sum_decimals(
                    claim.claim_amount
                    for policy_id in policies
                    for claim in dataset.claims_for_policy(policy_id)
                ),
            )
        )
    result.sort(key=lambda r: (-r.total_premium, r.policyholder_id))
    return _result(
        10,
        "multi_policy_holders",
        "Policyholders with more than one policy",
        MultiPolicyHolderRow,
        result,
    )
