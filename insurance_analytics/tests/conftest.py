"""Pytest configuration and shared fixtures."""

from datetime import date
from pathlib import Path

import pytest

from insurance_analytics.dataset import SAMPLE_DATA_DIR, load_sample_dataset
from insurance_analytics.models import Claim, Policy, Policyholder


@pytest.fixture
def project_root():
    """Return the package root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def sample_data_dir():
    """Return the bundled sample data directory."""
    return SAMPLE_DATA_DIR


@pytest.fixture
def as_of():
    """Reference date the sample snapshot is analyzed at."""
    return date(2024, 6, 30)


@pytest.fixture
def portfolio():
    """The bundled sample snapshot: 7 policyholders, 10 policies, 12 claims."""
    return load_sample_dataset()


@pytest.fixture
def make_holder():
    """Factory for policyholders with sensible defaults."""

    def _make(policyholder_id, gender="Female", date_of_birth=date(1980, 1, 1), **kwargs):
        return Policyholder(
            policyholder_id=policyholder_id,
            full_name=kwargs.pop("full_name", f"Holder {policyholder_id}"),
            gender=gender,
            date_of_birth=date_of_birth,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_policy():
    """Factory for policies with sensible defaults."""

    def _make(policy_id, policyholder_id, policy_type="Individual", status="Active", **kwargs):
        values = {
            "start_date": date(2023, 1, 1),
            "end_date": date(2025, 1, 1),
            "premium_amount": "1000.00",
            "coverage_amount": "50000.00",
        }
        values.update(kwargs)
        return Policy(
            policy_id=policy_id,
            policyholder_id=policyholder_id,
            policy_type=policy_type,
            status=status,
            **values,
        )

    return _make


@pytest.fixture
def make_claim():
    """Factory for claims with sensible defaults."""

    def _make(claim_id, policy_id, claim_type="Consultation", status="Approved", **kwargs):
        values = {
            "claim_date": date(2024, 1, 15),
            "claim_amount": "100.00",
        }
        values.update(kwargs)
        if "approved_amount" not in values:
            values["approved_amount"] = values["claim_amount"] if status == "Approved" else "0"
        return Claim(
            claim_id=claim_id,
            policy_id=policy_id,
            claim_type=claim_type,
            claim_status=status,
            **values,
        )

    return _make
