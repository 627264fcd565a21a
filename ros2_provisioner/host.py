"""Access to live host state.

Steps never cache host state: every precondition goes through a ``Host`` and
queries the machine directly. ``SystemHost`` talks to the real system; tests
inject a fake.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Protocol, Sequence

from .lib.command import CmdResult, run_cmd

logger = logging.getLogger(__name__)


class Host(Protocol):
    dry_run: bool

    def query(self, argv: Sequence[str]) -> bool:
        """Run a read-only command; True on exit status 0."""
        ...

    def capture(self, argv: Sequence[str]) -> str:
        """Run a read-only command and return its stdout."""
        ...

    def mutate(
        self,
        argv: Sequence[str],
        *,
        sudo: bool = True,
        input_text: Optional[str] = None,
    ) -> CmdResult:
        """Run a system-mutating command, raising CommandError on failure."""
        ...

    def exists(self, path: str) -> bool:
        ...

    def read_text(self, path: str) -> Optional[str]:
        ...

    def append_text(self, path: str, text: str) -> None:
        ...

    def writable(self, path: str) -> bool:
        ...

    def euid(self) -> int:
        ...

    def setenv(self, name: str, value: str) -> None:
        ...


class SystemHost:
    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def query(self, argv: Sequence[str]) -> bool:
        r = run_cmd(argv, check=False, stream=False)
        return r.returncode == 0

    def capture(self, argv: Sequence[str]) -> str:
        return run_cmd(argv, stream=False).stdout

    def mutate(
        self,
        argv: Sequence[str],
        *,
        sudo: bool = True,
        input_text: Optional[str] = None,
    ) -> CmdResult:
        full = ["sudo", *argv] if sudo else list(argv)
        return run_cmd(full, input_text=input_text, dry_run=self.dry_run)

    def exists(self, path: str) -> bool:
        return Path(path).expanduser().exists()

    def read_text(self, path: str) -> Optional[str]:
        p = Path(path).expanduser()
        if not p.exists():
            return None
        return p.read_text(encoding="utf-8", errors="replace")

    def append_text(self, path: str, text: str) -> None:
        p = Path(path).expanduser()
        if self.dry_run:
            logger.info("Would append %d bytes to %s", len(text.encode("utf-8")), str(p))
            return
        with p.open("a", encoding="utf-8") as f:
            f.write(text)

    def writable(self, path: str) -> bool:
        p = Path(path).expanduser()
        if p.exists():
            return os.access(p, os.W_OK)
        # A missing file is writable if we can create it.
        return os.access(p.parent, os.W_OK | os.X_OK)

    def euid(self) -> int:
        return os.geteuid()

    def setenv(self, name: str, value: str) -> None:
        if self.dry_run:
            logger.info("Would set %s=%s", name, value)
            return
        os.environ[name] = value
