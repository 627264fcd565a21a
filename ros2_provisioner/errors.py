"""Error taxonomy for the provisioning run.

Every error here is fatal: the runner stops at the first one and the run
exits non-zero. The one tolerated condition (rosdep already initialized) is a
named outcome in ``lib.rosdep``, not an exception.
"""

from __future__ import annotations

import builtins


class ProvisionError(Exception):
    """Base class for fatal provisioning failures."""


class PrivilegeError(ProvisionError):
    """Invoked as root; steps must elevate individually through sudo."""


class PlatformMismatchError(ProvisionError):
    """Host distribution is not the supported target."""


class PackageManagerError(ProvisionError):
    """An apt/dpkg operation failed."""


class NetworkError(ProvisionError):
    """Fetching a remote resource (the repository signing key) failed."""


class DependencyToolError(ProvisionError):
    """rosdep failed for a reason other than being already initialized."""


class ProfilePermissionError(ProvisionError, builtins.PermissionError):
    """The shell profile is not writable by the invoking user."""


class ConfigError(ProvisionError):
    """Configuration file is missing or malformed."""
