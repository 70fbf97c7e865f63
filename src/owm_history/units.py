"""Unit-system tokens accepted by the history client."""

from __future__ import annotations

from .exceptions import DataUnitError

# Token -> value of the service's ``units`` query parameter.
DATA_UNITS: dict[str, str] = {
    "C": "metric",
    "F": "imperial",
    "K": "internal",
}


def valid_data_unit(token: str) -> bool:
    """Return True when ``token`` is a recognized (case-sensitive) unit token."""
    return isinstance(token, str) and token in DATA_UNITS


def units_code(token: str) -> str:
    """Map a unit token to the service code, raising DataUnitError if unknown."""
    if not valid_data_unit(token):
        allowed = ", ".join(sorted(DATA_UNITS))
        raise DataUnitError(f"Unrecognized data unit {token!r}; expected one of: {allowed}.")
    return DATA_UNITS[token]
