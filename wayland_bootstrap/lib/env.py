from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def is_privileged() -> bool:
    return os.geteuid() == 0


def prepend_path(directory: str) -> bool:
    """Put directory first on this process's PATH.

    Returns False when it was already present (PATH is left untouched).
    """

    entries = [e for e in os.environ.get("PATH", "").split(os.pathsep) if e]
    if directory in entries:
        return False
    os.environ["PATH"] = os.pathsep.join([directory, *entries])
    logger.info("Prepended %s to PATH", directory)
    return True
