from __future__ import annotations

import logging

from .command import CommandRunner

logger = logging.getLogger(__name__)


def is_online(runner: CommandRunner, *, host: str = "archlinux.org", timeout_s: int = 2) -> bool:
    """Single reachability probe; no retry."""

    rc = runner.run_user(["ping", "-c", "1", "-W", str(timeout_s), host], quiet=True)
    logger.debug("Probe %s -> %s", host, rc)
    return rc == 0
