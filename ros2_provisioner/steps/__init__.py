from .step_10_system_update import SystemUpdateStep
from .step_20_configure_locale import ConfigureLocaleStep
from .step_30_register_repository import RegisterRepositoryStep
from .step_40_install_packages import InstallPackagesStep
from .step_50_bootstrap_rosdep import BootstrapRosdepStep
from .step_60_configure_shell import ConfigureShellStep

__all__ = [
    "SystemUpdateStep",
    "ConfigureLocaleStep",
    "RegisterRepositoryStep",
    "InstallPackagesStep",
    "BootstrapRosdepStep",
    "ConfigureShellStep",
]
