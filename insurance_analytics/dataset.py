"""Loading and validation of the policyholder, policy and claim snapshot.

An :class:`InsuranceDataset` is the immutable snapshot every report runs
against. It is built once, from CSV exports, pandas DataFrames or plain
mappings, and never mutated afterwards.

Construction is strict about things that make the snapshot ambiguous
(unparseable rows, duplicate ids) and lenient about things reports can work
around: a claim whose policy is missing, or a policy whose holder is
missing, only raises a :class:`~insurance_analytics._warnings.ReferentialIntegrityWarning`
and reports treat the missing parent as absent.

Examples:
    Load CSV exports from a directory::

        from insurance_analytics.dataset import load_dataset

        dataset = load_dataset("exports/2024-06")
        print(dataset.summary())

    Build from DataFrames produced by an earlier ETL step::

        dataset = InsuranceDataset.from_frames(holders_df, policies_df, claims_df)
"""

from collections import defaultdict
from enum import Enum
import logging
from pathlib import Path
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)
import warnings

import pandas as pd
from pydantic import BaseModel, ValidationError

from ._warnings import DataQualityWarning, ReferentialIntegrityWarning
from .config import AnalyticsConfig
from .exceptions import DatasetValidationError
from .models import Claim, Policy, Policyholder

logger = logging.getLogger(__name__)

SAMPLE_DATA_DIR = Path(__file__).parent / "data" / "sample"

POLICYHOLDER_COLUMNS: Tuple[str, ...] = tuple(Policyholder.model_fields)
POLICY_COLUMNS: Tuple[str, ...] = tuple(Policy.model_fields)
CLAIM_COLUMNS: Tuple[str, ...] = tuple(Claim.model_fields)

RecordT = TypeVar("RecordT", bound=BaseModel)


class InsuranceDataset:
    """Immutable snapshot of policyholders, policies and claims.

    Records are kept in input order. Id indexes are built once so the join
    resolver and the reports can look up parents and children without
    rescanning the collections.

    Args:
        policyholders: Policyholder records.
        policies: Policy records.
        claims: Claim records.

    Raises:
        DatasetValidationError: If any collection contains duplicate ids.
    """

    def __init__(
        self,
        policyholders: Iterable[Policyholder] = (),
        policies: Iterable[Policy] = (),
        claims: Iterable[Claim] = (),
    ):
        self._policyholders: Tuple[Policyholder, ...] = tuple(policyholders)
        self._policies: Tuple[Policy, ...] = tuple(policies)
        self._claims: Tuple[Claim, ...] = tuple(claims)

        issues: List[str] = []
        self._holders_by_id: Dict[int, Policyholder] = _index_unique(
            self._policyholders, "policyholder_id", "policyholder", issues
        )
        self._policies_by_id: Dict[int, Policy] = _index_unique(
            self._policies, "policy_id", "policy", issues
        )
        _index_unique(self._claims, "claim_id", "claim", issues)
        if issues:
            raise DatasetValidationError(issues)

        policies_by_holder: Dict[int, List[Policy]] = defaultdict(list)
        for policy in self._policies:
            policies_by_holder[policy.policyholder_id].append(policy)
        self._policies_by_holder = {k: tuple(v) for k, v in policies_by_holder.items()}

        claims_by_policy: Dict[int, List[Claim]] = defaultdict(list)
        for claim in self._claims:
            claims_by_policy[claim.policy_id].append(claim)
        self._claims_by_policy = {k: tuple(v) for k, v in claims_by_policy.items()}

        self._check_references()

    # ------------------------------------------------------------------ #
    #  Construction from external sources
    # ------------------------------------------------------------------ #

    @classmethod
    def from_records(
        cls,
        policyholders: Iterable[Mapping[str, Any]] = (),
        policies: Iterable[Mapping[str, Any]] = (),
        claims: Iterable[Mapping[str, Any]] = (),
        skip_invalid: bool = False,
    ) -> "InsuranceDataset":
        """Build a dataset from plain mappings (e.g. ``csv.DictReader`` rows).

        Args:
            policyholders: Policyholder rows.
            policies: Policy rows.
            claims: Claim rows.
            skip_invalid: Drop rows that fail validation (with a
                :class:`DataQualityWarning`) instead of raising.

        Returns:
            Validated dataset.

        Raises:
            DatasetValidationError: If any row is invalid and ``skip_invalid``
                is False. Every bad row across the three collections is listed.
        """
        issues: List[str] = []
        holders = _parse_rows(Policyholder, policyholders, "policyholders", issues)
        policy_records = _parse_rows(Policy, policies, "policies", issues)
        claim_records = _parse_rows(Claim, claims, "claims", issues)

        if issues and not skip_invalid:
            raise DatasetValidationError(issues)

        if issues:
            logger.warning("Dropped %d invalid rows while loading dataset", len(issues))
            for issue in issues:
                logger.debug("Dropped row: %s", issue)
            warnings.warn(
                f"Dropped {len(issues)} invalid {'row' if len(issues) == 1 else 'rows'}: "
                + "; ".join(issues),
                DataQualityWarning,
                stacklevel=2,
            )

        return cls(holders, policy_records, claim_records)

    @classmethod
    def from_frames(
        cls,
        policyholders: Optional[pd.DataFrame] = None,
        policies: Optional[pd.DataFrame] = None,
        claims: Optional[pd.DataFrame] = None,
        skip_invalid: bool = False,
    ) -> "InsuranceDataset":
        """Build a dataset from pandas DataFrames.

        Missing values (``NaN``/``NaT``) are passed to validation as ``None``.

        Args:
            policyholders: Policyholder frame.
            policies: Policy frame.
            claims: Claim frame.
            skip_invalid: Drop rows that fail validation instead of raising.

        Returns:
            Validated dataset.
        """
        return cls.from_records(
            policyholders=_frame_to_rows(policyholders),
            policies=_frame_to_rows(policies),
            claims=_frame_to_rows(claims),
            skip_invalid=skip_invalid,
        )

    def to_frames(self) -> Dict[str, pd.DataFrame]:
        """Export the three collections as DataFrames.

        Returns:
            Mapping with ``policyholders``, ``policies`` and ``claims`` frames.
            Enum columns hold their labels; amounts stay ``Decimal``.
        """
        return {
            "policyholders": _records_to_frame(self._policyholders, POLICYHOLDER_COLUMNS),
            "policies": _records_to_frame(self._policies, POLICY_COLUMNS),
            "claims": _records_to_frame(self._claims, CLAIM_COLUMNS),
        }

    # ------------------------------------------------------------------ #
    #  Collections and lookups
    # ------------------------------------------------------------------ #

    @property
    def policyholders(self) -> Tuple[Policyholder, ...]:
        """All policyholders in input order."""
        return self._policyholders

    @property
    def policies(self) -> Tuple[Policy, ...]:
        """All policies in input order."""
        return self._policies

    @property
    def claims(self) -> Tuple[Claim, ...]:
        """All claims in input order."""
        return self._claims

    @property
    def is_empty(self) -> bool:
        """Whether all three collections are empty."""
        return not (self._policyholders or self._policies or self._claims)

    def policyholder(self, policyholder_id: int) -> Optional[Policyholder]:
        """Look up a policyholder by id; ``None`` if absent."""
        return self._holders_by_id.get(policyholder_id)

    def policy(self, policy_id: int) -> Optional[Policy]:
        """Look up a policy by id; ``None`` if absent."""
        return self._policies_by_id.get(policy_id)

    def claims_for_policy(self, policy_id: int) -> Tuple[Claim, ...]:
        """Claims filed against a policy, in input order."""
        return self._claims_by_policy.get(policy_id, ())

    def policies_for_holder(self, policyholder_id: int) -> Tuple[Policy, ...]:
        """Policies owned by a policyholder, in input order."""
        return self._policies_by_holder.get(policyholder_id, ())

    @property
    def orphaned_policies(self) -> Tuple[Policy, ...]:
        """Policies whose policyholder is not in the snapshot."""
        return tuple(p for p in self._policies if p.policyholder_id not in self._holders_by_id)

    @property
    def orphaned_claims(self) -> Tuple[Claim, ...]:
        """Claims whose policy is not in the snapshot."""
        return tuple(c for c in self._claims if c.policy_id not in self._policies_by_id)

    def summary(self) -> Dict[str, int]:
        """Row and orphan counts for logging and sanity checks.

        Returns:
            Dictionary of counts keyed by collection.
        """
        return {
            "policyholders": len(self._policyholders),
            "policies": len(self._policies),
            "claims": len(self._claims),
            "orphaned_policies": len(self.orphaned_policies),
            "orphaned_claims": len(self.orphaned_claims),
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(policyholders={len(self._policyholders)}, "
            f"policies={len(self._policies)}, claims={len(self._claims)})"
        )

    def _check_references(self) -> None:
        problems = []
        orphaned_policies = self.orphaned_policies
        if orphaned_policies:
            ids = ", ".join(str(p.policy_id) for p in orphaned_policies)
            problems.append(
                f"{len(orphaned_policies)} policies reference missing policyholders "
                f"(policy ids: {ids})"
            )
        orphaned_claims = self.orphaned_claims
        if orphaned_claims:
            ids = ", ".join(str(c.claim_id) for c in orphaned_claims)
            problems.append(
                f"{len(orphaned_claims)} claims reference missing policies (claim ids: {ids})"
            )
        for problem in problems:
            logger.warning(problem)
            warnings.warn(problem, ReferentialIntegrityWarning, stacklevel=3)


def load_dataset(
    directory: Optional[Union[str, Path]] = None,
    config: Optional[AnalyticsConfig] = None,
    skip_invalid: Optional[bool] = None,
) -> InsuranceDataset:
    """Load a dataset from three CSV exports.

    Every cell is read as text so that ids, dates and amounts are parsed by
    record validation rather than guessed by pandas.

    Args:
        directory: Directory holding the CSV files. Defaults to
            ``config.data.data_directory``.
        config: Analytics configuration supplying file names. Defaults to
            ``AnalyticsConfig()``.
        skip_invalid: Override ``config.data.skip_invalid``.

    Returns:
        Validated dataset.

    Raises:
        FileNotFoundError: If any of the three files is missing.
        DatasetValidationError: If rows are invalid and not skipped.
    """
    config = config or AnalyticsConfig()
    data_config = config.data
    base = Path(directory) if directory is not None else data_config.data_path
    if skip_invalid is None:
        skip_invalid = data_config.skip_invalid

    frames = {}
    for key, file_name in (
        ("policyholders", data_config.policyholders_file),
        ("policies", data_config.policies_file),
        ("claims", data_config.claims_file),
    ):
        path = base / file_name
        if not path.exists():
            raise FileNotFoundError(f"Expected {key} export '{file_name}' not found in {base}")
        frames[key] = pd.read_csv(path, dtype=str, keep_default_na=False)
        logger.debug("Read %d %s rows from %s", len(frames[key]), key, path)

    dataset = InsuranceDataset.from_records(
        policyholders=frames["policyholders"].to_dict("records"),
        policies=frames["policies"].to_dict("records"),
        claims=frames["claims"].to_dict("records"),
        skip_invalid=skip_invalid,
    )
    logger.info("Loaded dataset from %s: %s", base, dataset.summary())
    return dataset


def load_sample_dataset() -> InsuranceDataset:
    """Load the small sample snapshot bundled with the package."""
    return load_dataset(SAMPLE_DATA_DIR)


# ---------------------------------------------------------------------- #
#  Internal helpers
# ---------------------------------------------------------------------- #


def _parse_rows(
    model: Type[RecordT],
    rows: Iterable[Mapping[str, Any]],
    label: str,
    issues: List[str],
) -> List[RecordT]:
    records = []
    for index, row in enumerate(rows, start=1):
        try:
            records.append(model.model_validate(dict(row)))
        except ValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'row'}: {err['msg']}"
                for err in exc.errors()
            )
            issues.append(f"{label} row {index}: {details}")
    return records


def _index_unique(
    records: Sequence[RecordT], id_field: str, label: str, issues: List[str]
) -> Dict[int, RecordT]:
    index: Dict[int, RecordT] = {}
    for record in records:
        key = getattr(record, id_field)
        if key in index:
            issues.append(f"Duplicate {label} id {key}")
            continue
        index[key] = record
    return index


def _frame_to_rows(frame: Optional[pd.DataFrame]) -> List[Dict[str, Any]]:
    if frame is None or frame.empty:
        return []
    return [
        {column: (None if pd.isna(value) else value) for column, value in row.items()}
        for row in frame.to_dict("records")
    ]


def _records_to_frame(records: Sequence[BaseModel], columns: Tuple[str, ...]) -> pd.DataFrame:
    rows = [
        {k: (v.value if isinstance(v, Enum) else v) for k, v in record.model_dump().items()}
        for record in records
    ]
    return pd.DataFrame(rows, columns=list(columns))
