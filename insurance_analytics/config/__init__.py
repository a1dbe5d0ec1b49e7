"""Configuration management using Pydantic v2 models.

Sub-modules:
    core: Master AnalyticsConfig class that composes all sub-configs.
    data: Location and loading options for the CSV exports.
    reporting: Report calculation settings and logging configuration.
    exceptions: ConfigurationError.
    utils: Dictionary merge helpers for overrides.

Examples:
    Quick start with defaults::

        from insurance_analytics.config import AnalyticsConfig

        config = AnalyticsConfig()

    Loading from file::

        config = AnalyticsConfig.from_yaml(Path("analysis.yaml"))

Note:
    Amounts are nominal currency units; percentages are expressed on a
    0-100 scale with two decimals.
"""

from .core import DEFAULT_CONFIG_FILE, AnalyticsConfig
from .data import DataConfig
from .exceptions import ConfigurationError
from .reporting import LoggingConfig, ReportSettings

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "AnalyticsConfig",
    "ConfigurationError",
    "DataConfig",
    "LoggingConfig",
    "ReportSettings",
]
