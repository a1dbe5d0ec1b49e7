"""Input snapshot location and loading options."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class DataConfig(BaseModel):
    """Where the three CSV exports live and how strictly they are read."""

    data_directory: str = Field(default="data", description="Directory holding the CSV exports")
    policyholders_file: str = Field(
        default="policyholders.csv", description="Policyholder export file name"
    )
    policies_file: str = Field(default="policies.csv", description="Policy export file name")
    claims_file: str = Field(default="claims.csv", description="Claim export file name")
    skip_invalid: bool = Field(
        default=False, description="Drop invalid rows with a warning instead of failing"
    )

    @field_validator("policyholders_file", "policies_file", "claims_file")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """Validate that export names are plain CSV file names.

        Args:
            v: File name to validate.

        Returns:
            Validated file name.

        Raises:
            ValueError: If the name is not a ``.csv`` file or contains a path.
        """
        if Path(v).name != v:
            raise ValueError(f"Export file name must not contain a directory: {v}")
        if not v.lower().endswith(".csv"):
            raise ValueError(f"Export file must be a .csv file: {v}")
        return v

    @property
    def data_path(self) -> Path:
        """Get the data directory as a Path object."""
        return Path(self.data_directory)
