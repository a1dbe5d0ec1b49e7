"""Foreign-key joins across the claim, policy and policyholder collections.

The resolver yields denormalized tuples lazily, one per child record, in the
dataset's input order. Claims are inner-joined to policies (a claim without a
policy cannot be attributed to a product), while the join to policyholders is
a LEFT JOIN by default: rows whose holder is missing carry ``None`` in the
``policyholder`` slot. Reports that need holder fields pass
``require_policyholder=True`` to turn it into an inner join.
"""

from datetime import date
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from .dataset import InsuranceDataset
from .models import Claim, Policy, Policyholder


class ClaimRow(NamedTuple):
    """A claim with its policy and (possibly missing) policyholder."""

    claim: Claim
    policy: Policy
    policyholder: Optional[Policyholder]


class PolicyRow(NamedTuple):
    """A policy with its (possibly missing) policyholder."""

    policy: Policy
    policyholder: Optional[Policyholder]


def iter_claim_rows(
    dataset: InsuranceDataset, require_policyholder: bool = False
) -> Iterator[ClaimRow]:
    """Join every claim to its policy and policyholder.

    Multiplicity is preserved: each claim produces at most one row and no
    rows are deduplicated.

    Args:
        dataset: Snapshot to read.
        require_policyholder: Drop rows whose policyholder is missing
            (inner join) instead of yielding them with ``None``.

    Yields:
        One :class:`ClaimRow` per claim whose policy exists.
    """
    for claim in dataset.claims:
        policy = dataset.policy(claim.policy_id)
        if policy is None:
            continue
        holder = dataset.policyholder(policy.policyholder_id)
        if holder is None and require_policyholder:
            continue
        yield ClaimRow(claim, policy, holder)


def iter_policy_rows(
    dataset: InsuranceDataset, require_policyholder: bool = False
) -> Iterator[PolicyRow]:
    """Join every policy to its policyholder (LEFT JOIN unless required).

    Args:
        dataset: Snapshot to read.
        require_policyholder: Drop policies whose holder is missing.

    Yields:
        One :class:`PolicyRow` per policy.
    """
    for policy in dataset.policies:
        holder = dataset.policyholder(policy.policyholder_id)
        if holder is None and require_policyholder:
            continue
        yield PolicyRow(policy, holder)


def claims_by_policy(dataset: InsuranceDataset) -> Dict[int, Tuple[Claim, ...]]:
    """Partition claims by policy id, keeping only policies present in the snapshot.

    Returns:
        Mapping of policy id to its claims in input order. Policies without
        claims are absent.
    """
    partitions: Dict[int, List[Claim]] = {}
    for row in iter_claim_rows(dataset):
        partitions.setdefault(row.policy.policy_id, []).append(row.claim)
    return {k: tuple(v) for k, v in partitions.items()}


def first_claim_dates(dataset: InsuranceDataset) -> Dict[int, date]:
    """Earliest claim date per policy, for policies with at least one claim."""
    return {
        policy_id: min(claim.claim_date for claim in claims)
        for policy_id, claims in claims_by_policy(dataset).items()
    }
