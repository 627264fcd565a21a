from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .errors import ConfigError

DEFAULT_PACKAGES = (
    "ros-jazzy-ros-base",
    "python3-colcon-common-extensions",
    "python3-pip",
    "python3-vcstool",
    "ros-jazzy-demo-nodes-cpp",
    "ros-jazzy-demo-nodes-py",
)


@dataclass(frozen=True)
class ProvisionConfig:
    ros_distro: str = "jazzy"

    # Supported host. Checked against /etc/os-release before any step runs.
    distro_id: str = "ubuntu"
    distro_codename: str = "noble"

    locale: str = "en_US.UTF-8"

    key_url: str = "https://raw.githubusercontent.com/ros/rosdistro/master/ros.key"
    keyring_path: str = "/usr/share/keyrings/ros-archive-keyring.gpg"
    key_fetch_attempts: int = 1
    key_fetch_backoff_s: float = 5.0

    repo_url: str = "http://packages.ros.org/ros2/ubuntu"
    repo_component: str = "main"
    repo_list_path: str = "/etc/apt/sources.list.d/ros2.list"

    packages: Tuple[str, ...] = DEFAULT_PACKAGES

    rosdep_package: str = "python3-rosdep"
    rosdep_marker_path: str = "/etc/ros/rosdep/sources.list.d/20-default.list"

    profile_path: str = "~/.bashrc"
    setup_script: Optional[str] = None

    dry_run: bool = False

    @property
    def setup_script_path(self) -> str:
        return self.setup_script or f"/opt/ros/{self.ros_distro}/setup.bash"

    @property
    def source_line(self) -> str:
        return f"source {self.setup_script_path}"

    @property
    def profile(self) -> Path:
        return Path(self.profile_path).expanduser()

    def with_overrides(self, **kwargs: Any) -> "ProvisionConfig":
        return dataclasses.replace(self, **kwargs)


_FIELDS = {f.name: f for f in dataclasses.fields(ProvisionConfig)}


def _check_value(name: str, value: Any) -> None:
    # Field annotations are strings here (postponed evaluation).
    kind = str(_FIELDS[name].type)
    if kind == "str":
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"{name} must be a non-empty string")
    elif kind == "Optional[str]":
        if value is not None and (not isinstance(value, str) or not value.strip()):
            raise ConfigError(f"{name} must be a non-empty string or null")
    elif kind == "bool":
        if not isinstance(value, bool):
            raise ConfigError(f"{name} must be true or false, got {value!r}")
    elif kind == "int":
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise ConfigError(f"{name} must be a positive integer")
    elif kind == "float":
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
            raise ConfigError(f"{name} must be a non-negative number")
    elif name == "packages":
        if not isinstance(value, list) or not value or not all(isinstance(p, str) and p.strip() for p in value):
            raise ConfigError("packages must be a list of package names")


def config_from_mapping(raw: Dict[str, Any]) -> ProvisionConfig:
    unknown = sorted(set(raw) - set(_FIELDS))
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for name, value in raw.items():
        _check_value(name, value)
        values[name] = value

    if "packages" in values:
        values["packages"] = tuple(p.strip() for p in values["packages"])
    if "key_fetch_backoff_s" in values:
        values["key_fetch_backoff_s"] = float(values["key_fetch_backoff_s"])

    return ProvisionConfig(**values)


def load_config(path: Optional[str]) -> ProvisionConfig:
    """Load a YAML config file and overlay it on the defaults.

    ``None`` returns the built-in defaults.
    """
    if path is None:
        return ProvisionConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")
    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("config must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Config must contain a mapping/object: {path}")

    return config_from_mapping(raw)
