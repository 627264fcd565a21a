from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_LOG_PATH = "ros2_setup.log"

_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)

# Transcript path of the handlers installed by configure_logging(), if any.
_transcript_path: Optional[str] = None


def _open_transcript(log_path: str) -> Tuple[logging.Handler, str]:
    """Append-mode handler on ``log_path``, or on the same name under $HOME."""

    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path, mode="a", encoding="utf-8"), log_path
    except OSError:
        fallback = str(Path.home() / Path(log_path).name)
        return logging.FileHandler(fallback, mode="a", encoding="utf-8"), fallback


def configure_logging(log_path: str = DEFAULT_LOG_PATH, level: int = logging.INFO) -> str:
    """Send the run transcript to ``log_path`` and to the terminal.

    The file is appended to, so it accumulates across repeated runs. Only the
    first call installs handlers; later calls return the path already in use.

    Returns the actual file path being used.
    """

    global _transcript_path

    root = logging.getLogger()
    root.setLevel(level)
    if _transcript_path is not None:
        return _transcript_path

    transcript, actual = _open_transcript(log_path)
    for handler in (transcript, logging.StreamHandler()):
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)
    _transcript_path = actual

    logging.getLogger(__name__).info("Logging initialized (requested=%s, actual=%s)", log_path, actual)
    return actual
