"""Insurance Portfolio Analytics"""

from ._version import __version__

# Use lazy imports to avoid import issues during test discovery
# Direct imports are defined but modules are imported only when accessed

__all__ = [
    "__version__",
    "AnalyticsConfig",
    "Claim",
    "ClaimStatus",
    "ClaimType",
    "DatasetValidationError",
    "Gender",
    "InsuranceDataset",
    "Policy",
    "PolicyStatus",
    "PolicyType",
    "Policyholder",
    "ReportCatalog",
    "ReportResult",
    "load_dataset",
    "load_sample_dataset",
]


def __getattr__(name):
    """Lazy import modules to avoid circular dependencies during test discovery."""
    if name == "AnalyticsConfig":
        from .config import AnalyticsConfig

        return AnalyticsConfig
    elif name in [
        "Claim",
        "ClaimStatus",
        "ClaimType",
        "Gender",
        "Policy",
        "PolicyStatus",
        "PolicyType",
        "Policyholder",
    ]:
        from . import models

        return getattr(models, name)
    elif name == "DatasetValidationError":
        from .exceptions import DatasetValidationError

        return DatasetValidationError
    elif name in ["InsuranceDataset", "load_dataset", "load_sample_dataset"]:
        from . import dataset

        return getattr(dataset, name)
    elif name == "ReportCatalog":
        from .catalog import ReportCatalog

        return ReportCatalog
    elif name == "ReportResult":
        from .reports import ReportResult

        return ReportResult
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
