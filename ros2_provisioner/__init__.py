"""ROS 2 provisioner for Raspberry Pi (Ubuntu 24.04, ROS 2 Jazzy).

Core design goals:
- Idempotent, resumable steps driven by live host state
- Fail fast: the first failing step ends the run
- Each mutating command elevates through sudo on its own
- Transcript appended to a log file and mirrored to the terminal
"""

__all__ = []
