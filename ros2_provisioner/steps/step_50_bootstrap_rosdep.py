from __future__ import annotations

import logging

from ..lib.apt import ensure_installed
from ..lib.rosdep import RosdepInit, rosdep_init, rosdep_update
from ..pipeline import StepContext

logger = logging.getLogger(__name__)


class BootstrapRosdepStep:
    step_id = "50_bootstrap_rosdep"
    description = "install, initialize and update rosdep"
    # rosdep update is cheap and idempotent, so this step never skips.
    always_run = True

    def is_satisfied(self, ctx: StepContext) -> bool:
        return False

    def run(self, ctx: StepContext) -> None:
        cfg = ctx.config
        ensure_installed(ctx.host, [cfg.rosdep_package])

        if ctx.host.exists(cfg.rosdep_marker_path):
            logger.info("rosdep has already been initialized")
        else:
            outcome = rosdep_init(ctx.host)
            if outcome is RosdepInit.INITIALIZED:
                logger.info("rosdep initialized")

        rosdep_update(ctx.host)
