"""Tests for the record models."""

from datetime import date
from decimal import Decimal

from pydantic import ValidationError
import pytest

from insurance_analytics.models import (
    Claim,
    ClaimStatus,
    ClaimType,
    Gender,
    Policy,
    Policyholder,
    PolicyStatus,
    PolicyType,
)


class TestEnums:
    """Test enum parsing from display labels."""

    def test_case_insensitive_labels(self):
        """Test that labels in any case map to the same member."""
        assert ClaimStatus("approved") is ClaimStatus.APPROVED
        assert PolicyType("GROUP") is PolicyType.GROUP
        assert Gender(" female ") is Gender.FEMALE

    def test_unknown_label(self):
        """Test that unknown labels are rejected."""
        with pytest.raises(ValueError):
            ClaimType("Dental")

    def test_str_is_label(self):
        """Test string conversion yields the display label."""
        assert str(PolicyStatus.CANCELLED) == "Cancelled"


class TestPolicyholder:
    """Test policyholder validation."""

    def test_parses_strings(self):
        """Test that CSV-style strings are parsed into typed fields."""
        holder = Policyholder(
            policyholder_id="7",
            full_name="Chloe Martin",
            gender="female",
            date_of_birth="2008-02-14",
            email="",
        )
        assert holder.policyholder_id == 7
        assert holder.gender is Gender.FEMALE
        assert holder.date_of_birth == date(2008, 2, 14)
        assert holder.email is None

    def test_is_frozen(self, make_holder):
        """Test that records cannot be mutated."""
        holder = make_holder(1)
        with pytest.raises(ValidationError):
            holder.full_name = "Someone Else"

    def test_requires_name(self):
        """Test that a blank name is rejected."""
        with pytest.raises(ValidationError):
            Policyholder(
                policyholder_id=1, full_name=" ", gender="Male", date_of_birth="1990-01-01"
            )


class TestPolicy:
    """Test policy validation."""

    def test_amounts_are_decimal(self, make_policy):
        """Test that amounts are coerced to Decimal."""
        policy = make_policy(1, 1, premium_amount="$1,200.50", coverage_amount=50000)
        assert policy.premium_amount == Decimal("1200.50")
        assert isinstance(policy.coverage_amount, Decimal)

    def test_negative_premium_rejected(self, make_policy):
        """Test that negative premiums are rejected."""
        with pytest.raises(ValidationError):
            make_policy(1, 1, premium_amount="-1")

    @pytest.mark.parametrize("field", ["premium_amount", "coverage_amount"])
    @pytest.mark.parametrize("blank", ["", "  ", None])
    def test_blank_amount_rejected(self, make_policy, field, blank):
        """Test that a missing amount is an error rather than zero."""
        with pytest.raises(ValidationError):
            make_policy(1, 1, **{field: blank})

    def test_end_before_start_rejected(self, make_policy):
        """Test that a policy cannot end before it starts."""
        with pytest.raises(ValidationError, match="before it starts"):
            make_policy(1, 1, start_date=date(2024, 1, 1), end_date=date(2023, 1, 1))

    def test_is_active(self, make_policy):
        """Test the active flag follows status."""
        assert make_policy(1, 1, status="Active").is_active
        assert not make_policy(2, 1, status="Expired").is_active


class TestClaim:
    """Test claim validation."""

    def test_approved_above_claimed_rejected(self, make_claim):
        """Test an approved claim cannot pay more than was claimed."""
        with pytest.raises(ValidationError, match="above"):
            make_claim(1, 1, claim_amount="100", approved_amount="150")

    def test_blank_claim_amount_rejected(self, make_claim):
        """Test that a missing claimed amount is an error rather than zero."""
        with pytest.raises(ValidationError):
            make_claim(1, 1, status="Rejected", claim_amount="", approved_amount="0")

    def test_blank_approved_amount_is_zero(self, make_claim):
        """Test that nothing approved yet reads as zero."""
        claim = make_claim(1, 1, status="Pending", approved_amount="")
        assert claim.approved_amount == Decimal("0")

    def test_pending_claim_not_checked(self, make_claim):
        """Test the approved-amount cap only applies to approved claims."""
        claim = make_claim(1, 1, status="Pending", claim_amount="100", approved_amount="150")
        assert claim.claim_status is ClaimStatus.PENDING

    def test_status_flags(self, make_claim):
        """Test approved/rejected convenience flags."""
        assert make_claim(1, 1, status="Approved").is_approved
        assert make_claim(2, 1, status="Rejected").is_rejected
        assert not make_claim(3, 1, status="Pending").is_approved

    def test_approved_amount_defaults_to_zero(self):
        """Test that a missing approved amount is zero."""
        claim = Claim(
            claim_id=1,
            policy_id=1,
            claim_date="2024-01-01",
            claim_type="Surgery",
            claim_amount="500",
            claim_status="Rejected",
        )
        assert claim.approved_amount == Decimal("0")
