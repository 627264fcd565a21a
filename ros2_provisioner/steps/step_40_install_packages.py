from __future__ import annotations

import logging

from ..lib.apt import apt_install, apt_update, missing_packages
from ..pipeline import StepContext

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "40_install_packages"
    description = "install ROS 2 base, build tools and demo packages"
    always_run = False

    def is_satisfied(self, ctx: StepContext) -> bool:
        return not missing_packages(ctx.host, ctx.config.packages)

    def run(self, ctx: StepContext) -> None:
        missing = missing_packages(ctx.host, ctx.config.packages)
        if not missing:
            return

        apt_update(ctx.host)
        apt_install(ctx.host, missing)
        logger.info("Installed %s", ", ".join(missing))
