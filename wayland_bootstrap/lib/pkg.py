from __future__ import annotations

import logging
from typing import Sequence

from .command import CommandRunner

logger = logging.getLogger(__name__)


def pacman_sync_upgrade(
    runner: CommandRunner,
    packages: Sequence[str] = (),
    *,
    pacman: str = "pacman",
) -> int:
    """Full upgrade (-Syu) so the local database matches what we install next."""

    return runner.run_privileged([pacman, "-Syu", "--noconfirm", *packages])


def pacman_install(
    runner: CommandRunner,
    packages: Sequence[str],
    *,
    pacman: str = "pacman",
) -> int:
    """Install packages; --needed makes already-installed ones a no-op."""

    if not packages:
        return 0
    return runner.run_privileged([pacman, "-S", "--needed", "--noconfirm", *packages])
