"""Tests for dataset construction and loading."""

from datetime import date
from decimal import Decimal
import shutil

import pandas as pd
import pytest

from insurance_analytics._warnings import DataQualityWarning, ReferentialIntegrityWarning
from insurance_analytics.config import AnalyticsConfig
from insurance_analytics.dataset import (
    CLAIM_COLUMNS,
    InsuranceDataset,
    load_dataset,
)
from insurance_analytics.exceptions import DatasetValidationError
from insurance_analytics.models import ClaimType, PolicyType


class TestSampleDataset:
    """Test loading of the bundled sample snapshot."""

    def test_counts(self, portfolio):
        """Test the sample loads completely and cleanly."""
        assert portfolio.summary() == {
            "policyholders": 7,
            "policies": 10,
            "claims": 12,
            "orphaned_policies": 0,
            "orphaned_claims": 0,
        }

    def test_typed_values(self, portfolio):
        """Test that CSV text is parsed into typed fields."""
        policy = portfolio.policy(101)
        assert policy.policy_type is PolicyType.FAMILY
        assert policy.premium_amount == Decimal("1800.00")
        assert policy.start_date == date(2022, 1, 1)

    def test_blank_contact_fields(self, portfolio):
        """Test that empty CSV cells become missing values."""
        assert portfolio.policyholder(2).address is None
        assert portfolio.policyholder(3).email is None

    def test_lookups(self, portfolio):
        """Test id indexes."""
        assert [p.policy_id for p in portfolio.policies_for_holder(6)] == [108, 109, 110]
        assert [c.claim_id for c in portfolio.claims_for_policy(109)] == [1010, 1011]
        assert portfolio.claims_for_policy(107) == ()
        assert portfolio.policyholder(99) is None
        assert portfolio.policies_for_holder(7) == ()

    def test_input_order_preserved(self, portfolio):
        """Test collections keep their file order."""
        assert [c.claim_id for c in portfolio.claims] == list(range(1001, 1013))


class TestLoadDataset:
    """Test CSV loading options."""

    def test_missing_file(self, tmp_path, sample_data_dir):
        """Test that a missing export is reported."""
        shutil.copy(sample_data_dir / "policyholders.csv", tmp_path)
        shutil.copy(sample_data_dir / "policies.csv", tmp_path)
        with pytest.raises(FileNotFoundError, match="claims"):
            load_dataset(tmp_path)

    def test_configured_file_names(self, tmp_path, sample_data_dir):
        """Test that file names and directory come from config."""
        shutil.copy(sample_data_dir / "policyholders.csv", tmp_path / "holders.csv")
        shutil.copy(sample_data_dir / "policies.csv", tmp_path / "policies.csv")
        shutil.copy(sample_data_dir / "claims.csv", tmp_path / "claims.csv")
        config = AnalyticsConfig(
            data={"data_directory": str(tmp_path), "policyholders_file": "holders.csv"}
        )
        dataset = load_dataset(config=config)
        assert len(dataset.policyholders) == 7

    def test_invalid_rows_raise(self, tmp_path, sample_data_dir):
        """Test that invalid rows fail the load with every issue listed."""
        shutil.copy(sample_data_dir / "policyholders.csv", tmp_path)
        shutil.copy(sample_data_dir / "policies.csv", tmp_path)
        claims = pd.read_csv(sample_data_dir / "claims.csv", dtype=str)
        claims.loc[0, "claim_type"] = "Dental"
        claims.loc[1, "claim_amount"] = "-5"
        claims.to_csv(tmp_path / "claims.csv", index=False)

        with pytest.raises(DatasetValidationError) as exc_info:
            load_dataset(tmp_path)
        assert len(exc_info.value.issues) == 2
        assert "claims row 1" in exc_info.value.issues[0]

    def test_blank_amount_rejected(self, tmp_path, sample_data_dir):
        """Test that a blank required amount fails the load instead of reading as zero."""
        shutil.copy(sample_data_dir / "policyholders.csv", tmp_path)
        policies = pd.read_csv(sample_data_dir / "policies.csv", dtype=str)
        policies.loc[0, "premium_amount"] = ""
        policies.to_csv(tmp_path / "policies.csv", index=False)
        claims = pd.read_csv(sample_data_dir / "claims.csv", dtype=str)
        claims.loc[2, "claim_amount"] = ""
        claims.to_csv(tmp_path / "claims.csv", index=False)

        with pytest.raises(DatasetValidationError) as exc_info:
            load_dataset(tmp_path)
        issues = exc_info.value.issues
        assert len(issues) == 2
        assert any("policies row 1: premium_amount" in issue for issue in issues)
        assert any("claims row 3: claim_amount" in issue for issue in issues)

    def test_invalid_rows_skipped(self, tmp_path, sample_data_dir):
        """Test that skip_invalid drops bad rows with a warning."""
        shutil.copy(sample_data_dir / "policyholders.csv", tmp_path)
        shutil.copy(sample_data_dir / "policies.csv", tmp_path)
        claims = pd.read_csv(sample_data_dir / "claims.csv", dtype=str)
        claims.loc[0, "claim_date"] = "not a date"
        claims.to_csv(tmp_path / "claims.csv", index=False)

        with pytest.warns(DataQualityWarning, match="Dropped 1 invalid row"):
            dataset = load_dataset(tmp_path, skip_invalid=True)
        assert len(dataset.claims) == 11


class TestInsuranceDataset:
    """Test direct construction and integrity checks."""

    def test_duplicate_ids_rejected(self, make_holder):
        """Test that duplicate ids make the snapshot invalid."""
        with pytest.raises(DatasetValidationError, match="Duplicate policyholder id 1"):
            InsuranceDataset([make_holder(1), make_holder(1)])

    def test_orphaned_claim_warns(self, make_holder, make_policy, make_claim):
        """Test that a claim on a missing policy warns but loads."""
        with pytest.warns(ReferentialIntegrityWarning, match="missing policies"):
            dataset = InsuranceDataset(
                [make_holder(1)], [make_policy(10, 1)], [make_claim(100, 10), make_claim(101, 99)]
            )
        assert [c.claim_id for c in dataset.orphaned_claims] == [101]

    def test_orphaned_policy_warns(self, make_policy):
        """Test that a policy without its holder warns but loads."""
        with pytest.warns(ReferentialIntegrityWarning, match="missing policyholders"):
            dataset = InsuranceDataset([], [make_policy(10, 1)], [])
        assert len(dataset.orphaned_policies) == 1

    def test_empty(self):
        """Test an empty snapshot."""
        dataset = InsuranceDataset()
        assert dataset.is_empty
        assert "claims=0" in repr(dataset)

    def test_from_records(self):
        """Test construction from plain mappings."""
        dataset = InsuranceDataset.from_records(
            policyholders=[
                {
                    "policyholder_id": 1,
                    "full_name": "Ana Ruiz",
                    "gender": "Female",
                    "date_of_birth": "1984-03-12",
                }
            ],
            policies=[
                {
                    "policy_id": 10,
                    "policyholder_id": 1,
                    "policy_type": "Family",
                    "start_date": "2022-01-01",
                    "end_date": "2025-01-01",
                    "premium_amount": "1800",
                    "coverage_amount": "150000",
                    "status": "Active",
                }
            ],
        )
        assert dataset.policy(10).policyholder_id == 1
        assert dataset.claims == ()

    def test_frames_round_trip(self, portfolio):
        """Test export to DataFrames and reconstruction from them."""
        frames = portfolio.to_frames()
        assert list(frames["claims"].columns) == list(CLAIM_COLUMNS)
        assert frames["claims"].loc[0, "claim_type"] == "Consultation"

        rebuilt = InsuranceDataset.from_frames(**frames)
        assert rebuilt.summary() == portfolio.summary()
        assert rebuilt.claims[3].claim_type is ClaimType.HOSPITALIZATION

    def test_from_frames_with_missing_values(self):
        """Test NaN cells are treated as missing."""
        holders = pd.DataFrame(
            {
                "policyholder_id": [1],
                "full_name": ["Ana Ruiz"],
                "gender": ["Female"],
                "date_of_birth": [pd.Timestamp("1984-03-12")],
                "email": [float("nan")],
            }
        )
        dataset = InsuranceDataset.from_frames(policyholders=holders)
        holder = dataset.policyholder(1)
        assert holder.email is None
        assert holder.date_of_birth == date(1984, 3, 12)
