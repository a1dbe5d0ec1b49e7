"""Report calculation and logging configuration.

Contains the settings that shape report calculations (look-back windows,
ranking depth, treatment of under-age policyholders) and the logging
behaviour of the package.
"""

import logging
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)


class ReportSettings(BaseModel):
    """Parameters shared by the report catalog.

    Attributes:
        window_days: Look-back window, in days before the as-of date, used by
            the "recent claims" reports (rejections and inactive policies).
        top_n: Number of policyholders ranked by the top-policyholders report.
        minor_age_policy: How the demographics report treats policyholders
            younger than 18: ``"bucket"`` counts them under "Under 18",
            ``"exclude"`` leaves them out and logs a warning.
    """

    window_days: int = Field(
        default=365, ge=1, description="Look-back window in days for recent-claim reports"
    )
    top_n: int = Field(default=10, ge=1, description="Number of policyholders to rank")
    minor_age_policy: Literal["bucket", "exclude"] = Field(
        default="bucket", description="Treatment of policyholders younger than 18"
    )

    @model_validator(mode="after")
    def validate_window(self):
        """Flag look-back windows that are unusually long."""
        if self.window_days > 3650:
            logger.warning("Very long look-back window (%d days)", self.window_days)
        return self


class LoggingConfig(BaseModel):
    """Logging configuration.

    Controls logging behavior including level, output destinations,
    and message formatting.
    """

    enabled: bool = Field(default=True, description="Enable logging")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path (None=no file logging)"
    )
    console_output: bool = Field(default=True, description="Log to console")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
