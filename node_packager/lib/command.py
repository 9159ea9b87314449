from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Sequence

from ..errors import ExternalCommandFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    cwd: str | None = None,
    forward_output: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - forward_output streams the child's stdout/stderr to the console,
      otherwise both are captured and logged at debug level.
    - cwd is passed per call; the process working directory is never changed.
    """

    argv_list = list(argv)
    logger.debug("CMD %s%s", fmt_argv(argv_list), f" (cwd={cwd})" if cwd else "")

    try:
        if forward_output:
            p = subprocess.run(argv_list, text=True, cwd=cwd)
            stdout, stderr = "", ""
        else:
            p = subprocess.run(
                argv_list,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=cwd,
            )
            stdout, stderr = p.stdout or "", p.stderr or ""
    except FileNotFoundError as e:
        raise ExternalCommandFailed(
            f"Command not found: {argv_list[0]} (is Node.js installed?)", argv=argv_list
        ) from e

    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if p.returncode != 0:
        raise ExternalCommandFailed(
            f"Command failed ({p.returncode}): {fmt_argv(argv_list)}\n{stderr}".rstrip(),
            argv=argv_list,
            returncode=p.returncode,
            stderr=stderr,
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
