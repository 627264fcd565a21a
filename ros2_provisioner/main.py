from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .config import ProvisionConfig, load_config
from .errors import PrivilegeError, ProvisionError
from .host import Host, SystemHost
from .lib.osinfo import check_platform
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, StepContext, StepFailed, run_pipeline
from .steps import (
    BootstrapRosdepStep,
    ConfigureLocaleStep,
    ConfigureShellStep,
    InstallPackagesStep,
    RegisterRepositoryStep,
    SystemUpdateStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        SystemUpdateStep(),
        ConfigureLocaleStep(),
        RegisterRepositoryStep(),
        InstallPackagesStep(),
        BootstrapRosdepStep(),
        ConfigureShellStep(),
    ]


@dataclass
class ProvisionResult:
    ok: bool
    ran_steps: List[str] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)
    failed_step: Optional[str] = None
    error: Optional[ProvisionError] = None


def check_preconditions(host: Host, config: ProvisionConfig) -> None:
    if host.euid() == 0:
        raise PrivilegeError(
            "Do not run as root; run as the target user and let each step elevate through sudo"
        )
    check_platform(host, distro_id=config.distro_id, codename=config.distro_codename)


def run(
    *,
    config: Optional[ProvisionConfig] = None,
    host: Optional[Host] = None,
    log_path: Optional[str] = DEFAULT_LOG_PATH,
) -> ProvisionResult:
    """Provision ROS 2 on this host. Safe to re-run: completed steps are skipped.

    ``log_path=None`` leaves logging configuration to the caller.
    """

    if log_path is not None:
        configure_logging(log_path=log_path)

    config = config or ProvisionConfig()
    host = host or SystemHost(dry_run=config.dry_run)

    logger.info("Starting ROS 2 %s provisioning%s", config.ros_distro, " (dry run)" if config.dry_run else "")

    progress = PipelineResult()
    try:
        check_preconditions(host, config)
        run_pipeline(ctx=StepContext(config=config, host=host), steps=build_steps(), result=progress)
    except StepFailed as e:
        logger.error("Provisioning failed at step %s: %s", e.step_id, e.error)
        logger.error("Fix the problem above and re-run; completed steps will be skipped")
        return ProvisionResult(
            ok=False,
            ran_steps=progress.ran_steps,
            skipped_steps=progress.skipped_steps,
            failed_step=e.step_id,
            error=e.error,
        )
    except ProvisionError as e:
        logger.error("Provisioning aborted: %s", e)
        return ProvisionResult(ok=False, error=e)
    except Exception:
        logger.exception("Provisioner crashed")
        raise

    logger.info(
        "ROS 2 provisioning finished (ran=%s skipped=%s)",
        ",".join(progress.ran_steps) or "-",
        ",".join(progress.skipped_steps) or "-",
    )
    logger.info("To test the installation, open a new terminal and run the talker and listener nodes:")
    logger.info("  ros2 run demo_nodes_cpp talker")
    logger.info("  ros2 run demo_nodes_py listener")
    return ProvisionResult(ok=True, ran_steps=progress.ran_steps, skipped_steps=progress.skipped_steps)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="ros2-provisioner")
    p.add_argument("--config", default=None, help="YAML file overriding the built-in defaults")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to the run transcript (appended)")
    p.add_argument("--dry-run", action="store_true", help="Log mutating commands without running them")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log)
    try:
        config = load_config(args.config)
    except ProvisionError as e:
        logger.error("%s", e)
        return 1
    if args.dry_run:
        config = config.with_overrides(dry_run=True)

    result = run(config=config, log_path=None)
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
