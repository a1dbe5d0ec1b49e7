"""Record types for the policyholder, policy and claim collections.

Each record is a frozen pydantic model, so a loaded snapshot cannot be
mutated while reports run over it. Enumerated columns are parsed from their
display labels case-insensitively ("approved", "APPROVED" and "Approved" are
the same status), and monetary columns are coerced to ``Decimal``.

Examples:
    Building records by hand::

        holder = Policyholder(
            policyholder_id=1,
            full_name="Ana Ruiz",
            gender="Female",
            date_of_birth="1984-03-12",
        )
        policy = Policy(
            policy_id=10,
            policyholder_id=1,
            policy_type="Family",
            start_date="2023-01-01",
            end_date="2024-01-01",
            premium_amount="1200.00",
            coverage_amount="50000",
            status="Active",
        )
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .decimal_utils import to_decimal


class _LabelEnum(str, Enum):
    """String enum that also accepts its labels in any letter case."""

    @classmethod
    def _missing_(cls, value: object) -> Optional["_LabelEnum"]:
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None

    def __str__(self) -> str:
        return str(self.value)


class Gender(_LabelEnum):
    """Policyholder gender as recorded at onboarding."""

    MALE = "Male"
    FEMALE = "Female"


class PolicyType(_LabelEnum):
    """Product category of a policy."""

    INDIVIDUAL = "Individual"
    FAMILY = "Family"
    GROUP = "Group"


class PolicyStatus(_LabelEnum):
    """Lifecycle status of a policy."""

    ACTIVE = "Active"
    EXPIRED = "Expired"
    CANCELLED = "Cancelled"


class ClaimType(_LabelEnum):
    """Kind of medical service a claim is made for."""

    CONSULTATION = "Consultation"
    MEDICATION = "Medication"
    SURGERY = "Surgery"
    HOSPITALIZATION = "Hospitalization"


class ClaimStatus(_LabelEnum):
    """Outcome of claim adjudication."""

    APPROVED = "Approved"
    REJECTED = "Rejected"
    PENDING = "Pending"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _required_amount(value: Any) -> Any:
    value = _blank_to_none(value)
    return None if value is None else to_decimal(value)


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)


class Policyholder(_Record):
    """A person holding one or more policies."""

    policyholder_id: int = Field(description="Unique policyholder identifier")
    full_name: str = Field(min_length=1, description="Full name of the policyholder")
    gender: Gender
    date_of_birth: date
    email: Optional[str] = Field(default=None, description="Contact email")
    phone: Optional[str] = Field(default=None, description="Contact phone number")
    address: Optional[str] = Field(default=None, description="Postal address")

    @field_validator("email", "phone", "address", mode="before")
    @classmethod
    def blank_contact_is_missing(cls, v: Any) -> Any:
        """Treat empty contact cells as missing values."""
        return _blank_to_none(v)


class Policy(_Record):
    """An insurance contract owned by a policyholder."""

    policy_id: int = Field(description="Unique policy identifier")
    policyholder_id: int = Field(description="Owning policyholder")
    policy_type: PolicyType
    start_date: date
    end_date: date
    premium_amount: Decimal = Field(ge=0, description="Premium charged for the policy")
    coverage_amount: Decimal = Field(ge=0, description="Maximum amount covered")
    status: PolicyStatus

    @field_validator("premium_amount", "coverage_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        """Coerce spreadsheet-style amounts to Decimal; a blank cell is missing."""
        return _required_amount(v)

    @model_validator(mode="after")
    def validate_term(self):
        """Ensure the policy term does not end before it starts.

        Returns:
            Validated policy.

        Raises:
            ValueError: If ``end_date`` precedes ``start_date``.
        """
        if self.end_date < self.start_date:
            raise ValueError(
                f"Policy {self.policy_id} ends ({self.end_date}) before it starts "
                f"({self.start_date})"
            )
        return self

    @property
    def is_active(self) -> bool:
        """Whether the policy status is Active."""
        return self.status is PolicyStatus.ACTIVE


class Claim(_Record):
    """A claim filed against a policy."""

    claim_id: int = Field(description="Unique claim identifier")
    policy_id: int = Field(description="Policy the claim was filed against")
    claim_date: date
    claim_type: ClaimType
    claim_amount: Decimal = Field(ge=0, description="Amount claimed")
    approved_amount: Decimal = Field(default=Decimal("0.00"), ge=0, description="Amount approved")
    claim_status: ClaimStatus

    @field_validator("claim_amount", mode="before")
    @classmethod
    def parse_claim_amount(cls, v: Any) -> Any:
        """Coerce the claimed amount to Decimal; a blank cell is missing."""
        return _required_amount(v)

    @field_validator("approved_amount", mode="before")
    @classmethod
    def parse_approved_amount(cls, v: Any) -> Decimal:
        """Coerce the approved amount to Decimal; nothing approved yet is zero."""
        return to_decimal(v)

    @model_validator(mode="after")
    def validate_approved_amount(self):
        """Ensure an approved claim is not paid above what was claimed.

        Returns:
            Validated claim.

        Raises:
            ValueError: If an Approved claim has ``approved_amount > claim_amount``.
        """
        if self.claim_status is ClaimStatus.APPROVED and self.approved_amount > self.claim_amount:
            raise ValueError(
                f"Claim {self.claim_id} approved {self.approved_amount} above the "
                f"claimed {self.claim_amount}"
            )
        return self

    @property
    def is_approved(self) -> bool:
        """Whether the claim was approved."""
        return self.claim_status is ClaimStatus.APPROVED

    @property
    def is_rejected(self) -> bool:
        """Whether the claim was rejected."""
        return self.claim_status is ClaimStatus.REJECTED
