from __future__ import annotations

import logging

from ..errors import PackageManagerError
from ..lib.apt import apt_install
from ..lib.command import CommandError
from ..pipeline import StepContext

logger = logging.getLogger(__name__)


def normalize_locale(name: str) -> str:
    """en_US.UTF-8 -> en_US.utf8 (the form ``locale -a`` prints)."""

    lang, _, codeset = name.partition(".")
    if not codeset:
        return lang
    return f"{lang}.{codeset.lower().replace('-', '')}"


class ConfigureLocaleStep:
    step_id = "20_configure_locale"
    description = "generate and activate the system locale"
    always_run = False

    def _available(self, ctx: StepContext) -> bool:
        wanted = normalize_locale(ctx.config.locale)
        try:
            out = ctx.host.capture(["locale", "-a"])
        except CommandError:
            return False
        return wanted in {normalize_locale(l.strip()) for l in out.splitlines() if l.strip()}

    def _active(self, ctx: StepContext) -> bool:
        try:
            out = ctx.host.capture(["locale"])
        except CommandError:
            return False
        for line in out.splitlines():
            key, _, value = line.partition("=")
            if key.strip() == "LANG":
                return normalize_locale(value.strip().strip('"')) == normalize_locale(ctx.config.locale)
        return False

    def is_satisfied(self, ctx: StepContext) -> bool:
        return self._available(ctx) and self._active(ctx)

    def run(self, ctx: StepContext) -> None:
        target = ctx.config.locale
        lang = target.partition(".")[0]

        apt_install(ctx.host, ["locales"])
        try:
            ctx.host.mutate(["locale-gen", lang, target])
            ctx.host.mutate(["update-locale", f"LC_ALL={target}", f"LANG={target}"])
        except CommandError as e:
            raise PackageManagerError(str(e)) from e

        # Make the new default visible to the rest of this run.
        ctx.host.setenv("LANG", target)
        logger.info("Locale set to %s", target)
