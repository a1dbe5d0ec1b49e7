"""Shared configuration utilities."""

from typing import Any, Dict


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override dictionary into base dictionary.

    Creates a new dictionary with values from ``base`` updated by ``override``.
    Nested dictionaries are merged recursively rather than replaced wholesale.

    Args:
        base: Base dictionary providing default values.
        override: Override dictionary whose values take precedence.

    Returns:
        New merged dictionary (neither input is mutated).
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def expand_dotted_keys(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Turn dot-notation keys into nested dictionaries.

    ``{"reports.window_days": 180}`` becomes ``{"reports": {"window_days": 180}}``.
    Keys without dots are kept as they are, and the two forms may be mixed.

    Args:
        overrides: Overrides keyed by dotted paths or section names.

    Returns:
        Nested override dictionary suitable for :func:`deep_merge`.
    """
    nested: Dict[str, Any] = {}
    for key, value in overrides.items():
        parts = key.split(".")
        current = nested
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        leaf = parts[-1]
        if isinstance(current.get(leaf), dict) and isinstance(value, dict):
            current[leaf] = deep_merge(current[leaf], value)
        else:
            current[leaf] = value
    return nested
