from __future__ import annotations

import logging

from ..lib.apt import apt_autoremove, apt_update, apt_upgrade
from ..pipeline import StepContext

logger = logging.getLogger(__name__)


class SystemUpdateStep:
    step_id = "10_system_update"
    description = "update and upgrade system packages"
    always_run = True

    def is_satisfied(self, ctx: StepContext) -> bool:
        return False

    def run(self, ctx: StepContext) -> None:
        apt_update(ctx.host)
        apt_upgrade(ctx.host)
        apt_autoremove(ctx.host)
        logger.info("System packages are up to date")
