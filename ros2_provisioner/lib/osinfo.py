from __future__ import annotations

import logging
import shlex
from typing import Dict

from ..errors import PlatformMismatchError
from ..host import Host

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse os-release(5) KEY=value lines (values may be shell-quoted)."""

    out: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value.strip("\"'")]
        out[key.strip()] = parts[0] if parts else ""
    return out


def read_os_release(host: Host) -> Dict[str, str]:
    text = host.read_text(OS_RELEASE_PATH)
    if text is None:
        raise PlatformMismatchError(f"{OS_RELEASE_PATH} not found; cannot identify the host distribution")
    return parse_os_release(text)


def distro_codename(os_release: Dict[str, str]) -> str:
    return os_release.get("UBUNTU_CODENAME") or os_release.get("VERSION_CODENAME") or ""


def host_codename(host: Host) -> str:
    codename = distro_codename(read_os_release(host))
    if not codename:
        raise PlatformMismatchError(f"{OS_RELEASE_PATH} has no distribution codename")
    return codename


def dpkg_architecture(host: Host) -> str:
    """Debian architecture name of the host (e.g. arm64, armhf, amd64)."""

    arch = host.capture(["dpkg", "--print-architecture"]).strip()
    if not arch:
        raise PlatformMismatchError("dpkg --print-architecture returned nothing")
    return arch


def check_platform(host: Host, *, distro_id: str, codename: str) -> Dict[str, str]:
    info = read_os_release(host)
    found_id = info.get("ID", "")
    found_codename = distro_codename(info)
    if found_id != distro_id or found_codename != codename:
        raise PlatformMismatchError(
            f"Unsupported host {found_id or '?'}/{found_codename or '?'}; "
            f"this workflow targets {distro_id}/{codename}"
        )
    logger.info("Host platform %s/%s (%s)", found_id, found_codename, info.get("PRETTY_NAME", ""))
    return info
