"""Exception types raised by capres.

Absence of an optional artifact is never an exception; these cover
environment and configuration failures only.
"""


class CapresError(Exception):
    """Base class for capres errors."""

    pass


class ProbeEnvironmentError(CapresError):
    """Raised when the filesystem cannot be inspected while probing an SDK.

    Indicates a misconfigured build environment (permission or I/O failure),
    not a missing artifact.
    """

    pass


class ModuleScanError(CapresError):
    """Raised when a third-party tree cannot be listed or a descriptor cannot be read."""

    pass


class LayoutConfigError(CapresError):
    """Raised when an SDK layout definition is missing or malformed."""

    pass


class ProjectConfigError(CapresError):
    """Raised when capres.ini is malformed or names an unknown target/layout."""

    pass
