from __future__ import annotations

import enum
import logging

from ..errors import DependencyToolError
from ..host import Host
from .command import CommandError

logger = logging.getLogger(__name__)

# rosdep init reports an existing default source list through the same
# non-zero exit as real failures; this text is how we tell them apart.
ALREADY_INITIALIZED_MARKER = "already exists"


class RosdepInit(enum.Enum):
    INITIALIZED = "initialized"
    ALREADY_INITIALIZED = "already_initialized"


def rosdep_init(host: Host) -> RosdepInit:
    try:
        host.mutate(["rosdep", "init"])
    except CommandError as e:
        if ALREADY_INITIALIZED_MARKER in e.output:
            logger.info("rosdep reports it is already initialized; continuing")
            return RosdepInit.ALREADY_INITIALIZED
        raise DependencyToolError(str(e)) from e
    return RosdepInit.INITIALIZED


def rosdep_update(host: Host) -> None:
    # Runs as the invoking user: the cache lives in ~/.ros.
    try:
        host.mutate(["rosdep", "update"], sudo=False)
    except CommandError as e:
        raise DependencyToolError(str(e)) from e
