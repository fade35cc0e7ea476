"""
Fleetboard exception hierarchy.

Coercion never raises; everything below is recovered at the pipeline or API boundary.
"""
from __future__ import annotations


class FleetboardError(Exception):
    """Base exception for all Fleetboard failures."""


class ConfigError(FleetboardError):
    """Raised for invalid environment configuration."""


class FetchError(FleetboardError):
    """Raised when the sheet source is unreachable or answers with a non-success status."""


class SheetParseError(FleetboardError):
    """Raised when the delimited text is malformed."""


class AccessDeniedError(FleetboardError):
    """Raised when a lifecycle is started without an admitted session."""


class UnknownDatasetError(FleetboardError):
    """Raised for a dataset name that is not registered."""
