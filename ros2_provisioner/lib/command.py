from __future__ import annotations

import contextlib
import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import IO, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        return "\n".join(s for s in (self.stdout.strip(), self.stderr.strip()) if s)


class CommandError(RuntimeError):
    """A command exited non-zero (or could not be started)."""

    def __init__(self, argv: Sequence[str], returncode: int, output: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output
        msg = f"Command failed ({returncode}): {fmt_argv(self.argv)}"
        if output.strip():
            msg += f"\n{output.strip()}"
        super().__init__(msg)


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    input_text: str | None = None,
    stream: bool = True,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - stream=True merges stderr into stdout and logs each line at INFO as it
      arrives, so long apt runs show up live on the console and in the log.
    - stream=False captures stdout/stderr separately and logs them at DEBUG
      (used for read-only queries whose output is parsed).
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)

    if dry_run:
        logger.info("Would run %s", fmt_argv(argv_list))
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    logger.log(logging.INFO if stream else logging.DEBUG, "CMD %s", fmt_argv(argv_list))

    try:
        if stream:
            result = _run_streaming(argv_list, input_text=input_text)
        else:
            p = subprocess.run(
                argv_list,
                input=input_text,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
            if p.stdout:
                logger.debug("STDOUT %s", p.stdout.strip())
            if p.stderr:
                logger.debug("STDERR %s", p.stderr.strip())
            result = CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)
    except FileNotFoundError as e:
        # Missing executable: report it the same way as a failed command.
        if not check:
            return CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(e))
        raise CommandError(argv_list, 127, str(e)) from e

    if check and result.returncode != 0:
        raise CommandError(argv_list, result.returncode, result.output)

    return result


def _feed_stdin(stdin: IO[str], text: str) -> bool:
    """Write ``text`` and close; False if the child closed its end first."""

    try:
        stdin.write(text)
        stdin.close()
    except BrokenPipeError:
        # close() releases the pipe even when its final flush fails.
        with contextlib.suppress(BrokenPipeError):
            stdin.close()
        return False
    return True


def _run_streaming(argv: list[str], *, input_text: str | None) -> CmdResult:
    """Run ``argv`` logging merged output line by line.

    Raises CommandError if the child exits before reading all of ``input_text``.
    """

    lines: list[str] = []
    fed = True
    with subprocess.Popen(
        argv,
        stdin=subprocess.PIPE if input_text is not None else None,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    ) as p:
        if p.stdin is not None and input_text is not None:
            fed = _feed_stdin(p.stdin, input_text)
        for line in p.stdout or ():
            line = line.rstrip("\n")
            lines.append(line)
            if line.strip():
                logger.info("| %s", line)
        returncode = p.wait()

    output = "\n".join(lines)
    if not fed:
        note = "command closed its input before it was fully written"
        raise CommandError(argv, returncode or 1, f"{output}\n{note}" if output else note)
    return CmdResult(argv=argv, returncode=returncode, stdout=output, stderr="")
