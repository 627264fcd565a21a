from __future__ import annotations

import logging
import time

from ..errors import NetworkError
from ..host import Host
from .command import CommandError

logger = logging.getLogger(__name__)


def fetch_to_root_file(
    host: Host,
    url: str,
    dest: str,
    *,
    attempts: int = 1,
    backoff_s: float = 5.0,
) -> None:
    """Download ``url`` into a root-owned ``dest`` with curl.

    No timeout is imposed. ``attempts`` > 1 retries after a fixed sleep.
    """

    last: CommandError | None = None
    for attempt in range(1, max(1, attempts) + 1):
        try:
            host.mutate(["curl", "-fsSL", url, "-o", dest])
            return
        except CommandError as e:
            last = e
            logger.warning("Fetch of %s failed (attempt %d/%d)", url, attempt, attempts)
            if attempt < attempts:
                time.sleep(backoff_s)

    raise NetworkError(f"Could not fetch {url}: {last}") from last
