"""Custom warning classes for the insurance analytics package.

These warning classes allow users to programmatically filter, suppress,
or capture warnings using Python's standard ``warnings`` module.

Example:
    Suppress referential-integrity warnings for a snapshot known to contain
    orphaned claims::

        import warnings
        from insurance_analytics._warnings import ReferentialIntegrityWarning

        warnings.filterwarnings("ignore", category=ReferentialIntegrityWarning)

    Capture data-quality warnings while loading::

        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always", DataQualityWarning)
            dataset = load_dataset("exports/", skip_invalid=True)
            dropped = [x for x in w if issubclass(x.category, DataQualityWarning)]
"""


class InsuranceAnalyticsWarning(UserWarning):
    """Base class for all insurance-analytics warnings."""


class ReferentialIntegrityWarning(InsuranceAnalyticsWarning):
    """A claim or policy references a parent record that is not in the snapshot.

    Raised while building a dataset. Reports keep going with LEFT-JOIN
    semantics: the missing parent's fields are treated as absent.
    """


class DataQualityWarning(InsuranceAnalyticsWarning):
    """Input rows were dropped or coerced while loading.

    Raised when a loader runs with ``skip_invalid=True`` and discards rows
    that fail record validation.
    """
