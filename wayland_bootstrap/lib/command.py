from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    capture: bool = True,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - capture=False inherits stdin/stdout/stderr so the child can prompt the
      operator (sudo passwords, the install wizard's UI).
    - The environment is read from os.environ at call time, so in-process
      PATH updates are visible to every later command.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    try:
        if capture:
            p = subprocess.run(
                argv_list,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=cwd,
                env=dict(os.environ, **(env or {})),
            )
        else:
            p = subprocess.run(argv_list, cwd=cwd, env=dict(os.environ, **(env or {})))
    except FileNotFoundError:
        # Missing executable: report it like the shell would (127).
        logger.error("Command not found: %s", argv_list[0])
        if check:
            raise
        return CmdResult(argv=argv_list, returncode=127, stdout="", stderr="")

    stdout = p.stdout or ""
    stderr = p.stderr or ""
    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        raise RuntimeError(f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{stderr}")

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)


class CommandRunner:
    """External process boundary used by every stage.

    Stages mostly ask for an exit code and decide themselves whether a
    non-zero code is fatal; read_user is for the few commands whose output
    we parse. Tests substitute a fake with the same methods.
    """

    def __init__(self, *, sudo: str = "sudo"):
        self.sudo = sudo

    def run_user(
        self,
        argv: Sequence[str],
        *,
        cwd: Optional[str] = None,
        quiet: bool = False,
    ) -> int:
        return run_cmd(argv, check=False, cwd=cwd, capture=quiet).returncode

    def read_user(self, argv: Sequence[str], *, cwd: Optional[str] = None) -> CmdResult:
        return run_cmd(argv, check=False, cwd=cwd, capture=True)

    def run_privileged(self, argv: Sequence[str]) -> int:
        # Never captured: sudo may need to prompt for a password.
        return run_cmd([self.sudo, *argv], check=False, capture=False).returncode

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)
