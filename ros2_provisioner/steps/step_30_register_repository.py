from __future__ import annotations

import logging

from ..errors import PackageManagerError
from ..lib.apt import apt_install, apt_update
from ..lib.command import CommandError
from ..lib.net import fetch_to_root_file
from ..lib.osinfo import dpkg_architecture, host_codename
from ..pipeline import StepContext

logger = logging.getLogger(__name__)


def repository_line(*, arch: str, keyring: str, url: str, codename: str, component: str) -> str:
    return f"deb [arch={arch} signed-by={keyring}] {url} {codename} {component}\n"


class RegisterRepositoryStep:
    step_id = "30_register_repository"
    description = "register the ROS 2 apt repository"
    always_run = False

    def is_satisfied(self, ctx: StepContext) -> bool:
        return ctx.host.exists(ctx.config.repo_list_path)

    def run(self, ctx: StepContext) -> None:
        cfg = ctx.config
        host = ctx.host

        apt_install(host, ["software-properties-common"])
        try:
            host.mutate(["add-apt-repository", "universe", "-y"])
        except CommandError as e:
            raise PackageManagerError(str(e)) from e
        apt_update(host)
        apt_install(host, ["curl"])

        fetch_to_root_file(
            host,
            cfg.key_url,
            cfg.keyring_path,
            attempts=cfg.key_fetch_attempts,
            backoff_s=cfg.key_fetch_backoff_s,
        )

        line = repository_line(
            arch=dpkg_architecture(host),
            keyring=cfg.keyring_path,
            url=cfg.repo_url,
            codename=host_codename(host),
            component=cfg.repo_component,
        )
        try:
            # tee overwrites: the list file only ever holds this one line.
            host.mutate(["tee", cfg.repo_list_path], input_text=line)
        except CommandError as e:
            raise PackageManagerError(str(e)) from e

        apt_update(host)
        logger.info("Registered repository: %s", line.strip())
