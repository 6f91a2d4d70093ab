"""Eligibility checks: is the catalog version newer, and can this device run it."""

from updatealert.core.version import VersionIdentifier, Ordering, compare


def is_compatible(device_os: VersionIdentifier, minimum_os: VersionIdentifier) -> bool:
    """True when the device OS meets the catalog's minimum (equal passes)."""
    return compare(device_os, minimum_os) is not Ordering.LESS


def is_newer(installed: VersionIdentifier, catalog: VersionIdentifier) -> bool:
    """True only when the catalog version is strictly greater."""
    return compare(installed, catalog) is Ordering.LESS
