from __future__ import annotations

import logging
from pathlib import Path

from .command import CommandRunner

logger = logging.getLogger(__name__)


def git_clone(runner: CommandRunner, url: str, dest: Path) -> int:
    return runner.run_user(["git", "clone", url, str(dest)])
