"""Unit tests for individual provisioning steps and their helpers."""

from __future__ import annotations

import pytest

from ros2_provisioner.errors import NetworkError
from ros2_provisioner.lib.apt import ensure_installed, missing_packages
from ros2_provisioner.lib.net import fetch_to_root_file
from ros2_provisioner.lib.rosdep import RosdepInit, rosdep_init
from ros2_provisioner.pipeline import StepContext
from ros2_provisioner.steps import (
    BootstrapRosdepStep,
    ConfigureLocaleStep,
    ConfigureShellStep,
    InstallPackagesStep,
    RegisterRepositoryStep,
)
from ros2_provisioner.steps.step_20_configure_locale import normalize_locale
from ros2_provisioner.steps.step_30_register_repository import repository_line

from ..fakes import PROFILE_PATH, FakeHost


@pytest.fixture
def ctx(host: FakeHost, config) -> StepContext:
    return StepContext(config=config, host=host)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("en_US.UTF-8", "en_US.utf8"),
        ("en_US.utf8", "en_US.utf8"),
        ("C.UTF-8", "C.utf8"),
        ("POSIX", "POSIX"),
    ],
)
def test_normalize_locale(name: str, expected: str) -> None:
    assert normalize_locale(name) == expected


def test_locale_needs_both_generated_and_active(config) -> None:
    step = ConfigureLocaleStep()

    generated_only = FakeHost(locales=["C.utf8", "en_US.utf8"], lang="C.UTF-8")
    assert not step.is_satisfied(StepContext(config=config, host=generated_only))

    active_only = FakeHost(locales=["C.utf8"], lang="en_US.UTF-8")
    assert not step.is_satisfied(StepContext(config=config, host=active_only))

    both = FakeHost(locales=["C.utf8", "en_US.utf8"], lang="en_US.UTF-8")
    assert step.is_satisfied(StepContext(config=config, host=both))


def test_locale_run_generates_and_sets_default(ctx: StepContext, host: FakeHost) -> None:
    ConfigureLocaleStep().run(ctx)

    assert host.ran("apt-get", "install", "-y", "locales")
    assert ["locale-gen", "en_US", "en_US.UTF-8"] in host.commands
    assert ["update-locale", "LC_ALL=en_US.UTF-8", "LANG=en_US.UTF-8"] in host.commands
    assert ConfigureLocaleStep().is_satisfied(ctx)


def test_repository_line_format() -> None:
    line = repository_line(
        arch="arm64",
        keyring="/usr/share/keyrings/ros-archive-keyring.gpg",
        url="http://packages.ros.org/ros2/ubuntu",
        codename="noble",
        component="main",
    )
    assert line == (
        "deb [arch=arm64 signed-by=/usr/share/keyrings/ros-archive-keyring.gpg] "
        "http://packages.ros.org/ros2/ubuntu noble main\n"
    )


def test_repository_step_order(ctx: StepContext, host: FakeHost) -> None:
    RegisterRepositoryStep().run(ctx)

    names = [c[0] if c[0] != "apt-get" else f"apt-get {c[1]}" for c in host.commands]
    assert names == [
        "apt-get install",
        "add-apt-repository",
        "apt-get update",
        "apt-get install",
        "curl",
        "tee",
        "apt-get update",
    ]
    # Key lands before the list that references it.
    assert ["curl", "-fsSL", ctx.config.key_url, "-o", ctx.config.keyring_path] in host.commands


def test_packages_step_is_satisfied_only_when_all_present(config) -> None:
    partial = FakeHost(installed=config.packages[:-1])
    full = FakeHost(installed=config.packages)

    assert not InstallPackagesStep().is_satisfied(StepContext(config=config, host=partial))
    assert InstallPackagesStep().is_satisfied(StepContext(config=config, host=full))


def test_missing_packages_keeps_order_and_drops_duplicates(host: FakeHost) -> None:
    host.installed.add("b")
    assert missing_packages(host, ["c", "b", "a", "c"]) == ["c", "a"]


def test_ensure_installed_is_a_noop_when_present(host: FakeHost) -> None:
    host.installed.add("python3-rosdep")
    assert ensure_installed(host, ["python3-rosdep"]) == []
    assert host.commands == []


def test_key_fetch_retries_when_configured(host: FakeHost) -> None:
    host.fail("curl", times=2)

    fetch_to_root_file(host, "https://example.invalid/ros.key", "/tmp/k.gpg", attempts=3, backoff_s=0.0)

    assert host.count("curl") == 3
    assert "/tmp/k.gpg" in host.files


def test_key_fetch_gives_up_after_attempts(host: FakeHost) -> None:
    host.fail("curl")

    with pytest.raises(NetworkError):
        fetch_to_root_file(host, "https://example.invalid/ros.key", "/tmp/k.gpg", attempts=2, backoff_s=0.0)

    assert host.count("curl") == 2


def test_rosdep_init_outcomes(host: FakeHost) -> None:
    assert rosdep_init(host) is RosdepInit.INITIALIZED
    # Marker now exists, so the real tool would complain.
    assert rosdep_init(host) is RosdepInit.ALREADY_INITIALIZED


def test_rosdep_step_skips_init_when_marker_exists(ctx: StepContext, host: FakeHost) -> None:
    host.files[ctx.config.rosdep_marker_path] = "yaml ...\n"

    BootstrapRosdepStep().run(ctx)

    assert not host.ran("rosdep", "init")
    assert host.ran("rosdep", "update")


def test_shell_step_appends_on_a_fresh_line(ctx: StepContext, host: FakeHost) -> None:
    host.files[PROFILE_PATH] = "alias ll='ls -l'"

    ConfigureShellStep().run(ctx)

    text = host.files[PROFILE_PATH]
    assert text.startswith("alias ll='ls -l'\n")
    assert text.endswith("\nsource /opt/ros/jazzy/setup.bash\n")
    assert "# ROS 2 Jazzy environment" in text
    assert ConfigureShellStep().is_satisfied(ctx)


def test_shell_step_creates_missing_profile(ctx: StepContext, host: FakeHost) -> None:
    del host.files[PROFILE_PATH]
    assert not ConfigureShellStep().is_satisfied(ctx)

    ConfigureShellStep().run(ctx)

    assert host.files[PROFILE_PATH].splitlines()[-1] == "source /opt/ros/jazzy/setup.bash"


def test_shell_check_ignores_commented_out_line(ctx: StepContext, host: FakeHost) -> None:
    host.files[PROFILE_PATH] = "# source /opt/ros/jazzy/setup.bash\n"
    assert not ConfigureShellStep().is_satisfied(ctx)
