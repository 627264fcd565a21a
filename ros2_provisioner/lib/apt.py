from __future__ import annotations

import logging
from typing import List, Sequence

from ..errors import PackageManagerError
from ..host import Host
from .command import CommandError

logger = logging.getLogger(__name__)

_APT_ENV = ["env", "DEBIAN_FRONTEND=noninteractive"]


def _apt(host: Host, args: Sequence[str]) -> None:
    try:
        host.mutate([*_APT_ENV, "apt-get", *args])
    except CommandError as e:
        raise PackageManagerError(str(e)) from e


def apt_update(host: Host) -> None:
    _apt(host, ["update"])


def apt_upgrade(host: Host) -> None:
    _apt(host, ["upgrade", "-y"])


def apt_autoremove(host: Host) -> None:
    _apt(host, ["autoremove", "-y"])


def apt_install(host: Host, packages: Sequence[str]) -> None:
    if not packages:
        return
    _apt(host, ["install", "-y", *packages])


def dpkg_installed(host: Host, package: str) -> bool:
    return host.query(["dpkg", "-s", package])


def missing_packages(host: Host, packages: Sequence[str]) -> List[str]:
    """Packages from ``packages`` that dpkg does not report as installed (order kept)."""

    missing: List[str] = []
    for p in packages:
        if p in missing:
            continue
        if dpkg_installed(host, p):
            logger.info("%s is already installed", p)
        else:
            missing.append(p)
    return missing


def ensure_installed(host: Host, packages: Sequence[str]) -> List[str]:
    """Install whichever of ``packages`` are missing, in one batch. Returns what was installed."""

    missing = missing_packages(host, packages)
    if missing:
        apt_install(host, missing)
    return missing
