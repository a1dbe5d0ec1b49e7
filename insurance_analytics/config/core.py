"""Master configuration class composing all sub-configurations.

Contains the top-level ``AnalyticsConfig`` that aggregates the report,
data and logging settings, with YAML loading, overrides and logging setup.
"""

from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field
import yaml

from .data import DataConfig
from .exceptions import ConfigurationError
from .reporting import LoggingConfig, ReportSettings
from .utils import deep_merge, expand_dotted_keys

DEFAULT_CONFIG_FILE = Path(__file__).parent.parent / "data" / "parameters" / "default.yaml"


class AnalyticsConfig(BaseModel):
    """Complete configuration for running the report catalog.

    All sections have defaults, so ``AnalyticsConfig()`` is valid and
    evaluates time-relative reports as of today.

    Examples:
        Minimal usage::

            config = AnalyticsConfig()

        Pin the as-of date so results are reproducible::

            config = AnalyticsConfig(as_of=date(2024, 6, 30))

        From a YAML file with overrides::

            config = AnalyticsConfig.from_yaml(
                Path("analysis.yaml"),
                overrides={"reports.window_days": 180},
            )
    """

    as_of: Optional[date] = Field(
        default=None,
        description="Reference date for time-relative reports (None = today)",
    )
    reports: ReportSettings = Field(default_factory=ReportSettings)
    data: DataConfig = Field(default_factory=DataConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # ------------------------------------------------------------------ #
    #  Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def from_yaml(
        cls, path: Union[str, Path], overrides: Optional[Dict[str, Any]] = None
    ) -> "AnalyticsConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file.
            overrides: Dictionary of overrides to apply. Supports dot-notation
                keys (``{"reports.top_n": 5}``) and section-level dicts
                (``{"reports": {"top_n": 5}}``).

        Returns:
            AnalyticsConfig with validated parameters.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ConfigurationError: If the file's top level is not a mapping.
            ValidationError: If configuration is invalid.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                [f"{path}: expected a mapping at the top level, got {type(data).__name__}"]
            )

        # Remove private anchors if present
        data = {k: v for k, v in data.items() if not str(k).startswith("_")}

        return cls.from_dict(data, overrides=overrides)

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None
    ) -> "AnalyticsConfig":
        """Create config from a dictionary, applying optional overrides.

        Args:
            data: Dictionary with configuration parameters.
            overrides: Dot-notation or nested overrides.

        Returns:
            AnalyticsConfig with validated parameters.
        """
        if overrides:
            data = deep_merge(data, expand_dotted_keys(overrides))
        return cls(**data)

    @classmethod
    def default(cls) -> "AnalyticsConfig":
        """Load the defaults shipped with the package."""
        return cls.from_yaml(DEFAULT_CONFIG_FILE)

    def with_overrides(self, **overrides: Any) -> "AnalyticsConfig":
        """Return a copy with overrides applied.

        Keyword names use double underscores for nesting, since dots are not
        valid in keyword arguments: ``config.with_overrides(reports__top_n=5)``.

        Args:
            **overrides: Overrides to apply.

        Returns:
            New validated configuration; ``self`` is unchanged.
        """
        dotted = {k.replace("__", "."): v for k, v in overrides.items()}
        return type(self).from_dict(self.model_dump(), overrides=dotted)

    # ------------------------------------------------------------------ #
    #  Serialization
    # ------------------------------------------------------------------ #

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path where to save the configuration.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False
            )

    # ------------------------------------------------------------------ #
    #  Runtime helpers
    # ------------------------------------------------------------------ #

    def resolve_as_of(self, as_of: Optional[date] = None) -> date:
        """Return the effective as-of date.

        Args:
            as_of: Explicit date taking precedence over the configured one.

        Returns:
            ``as_of`` if given, else the configured date, else today.
        """
        if as_of is not None:
            return as_of
        if self.as_of is not None:
            return self.as_of
        return date.today()

    def setup_logging(self) -> None:
        """Configure logging based on settings.

        Sets up logging handlers for console and/or file output based
        on the logging configuration.
        """
        if not self.logging.enabled:
            return

        import logging
        import sys

        # Create logger
        logger = logging.getLogger("insurance_analytics")
        logger.setLevel(getattr(logging, self.logging.level))
        logger.handlers.clear()

        # Create formatter
        formatter = logging.Formatter(self.logging.format)

        # Console handler
        if self.logging.console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        # File handler
        if self.logging.log_file:
            log_path = Path(self.logging.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
