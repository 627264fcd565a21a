from __future__ import annotations

import logging
from typing import Optional

from ..errors import ProfilePermissionError
from ..pipeline import StepContext

logger = logging.getLogger(__name__)


def has_line(text: str, line: str) -> bool:
    return any(l.strip() == line for l in text.splitlines())


def _read_profile(ctx: StepContext, profile: str) -> Optional[str]:
    # A root-owned profile (e.g. left behind by an earlier `sudo` run) is unreadable.
    try:
        return ctx.host.read_text(profile)
    except ProfilePermissionError:
        raise
    except PermissionError as e:
        raise ProfilePermissionError(f"{profile} is not readable by the current user: {e}") from e


class ConfigureShellStep:
    step_id = "60_configure_shell"
    description = "source the ROS 2 environment from the shell profile"
    always_run = False

    def is_satisfied(self, ctx: StepContext) -> bool:
        text = _read_profile(ctx, str(ctx.config.profile))
        return text is not None and has_line(text, ctx.config.source_line)

    def run(self, ctx: StepContext) -> None:
        cfg = ctx.config
        profile = str(cfg.profile)

        if not ctx.host.writable(profile):
            raise ProfilePermissionError(f"{profile} is not writable by the current user")

        existing = _read_profile(ctx, profile) or ""
        prefix = "\n" if existing and not existing.endswith("\n") else ""
        block = f"{prefix}\n# ROS 2 {cfg.ros_distro.capitalize()} environment\n{cfg.source_line}\n"
        ctx.host.append_text(profile, block)

        logger.info("Added '%s' to %s (open a new shell to pick it up)", cfg.source_line, profile)
