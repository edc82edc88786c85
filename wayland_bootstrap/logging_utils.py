from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional


def _default_log_path() -> str:
    state_home = os.environ.get("XDG_STATE_HOME") or os.path.expanduser("~/.local/state")
    return str(Path(state_home) / "wayland-bootstrap" / "bootstrap.log")


DEFAULT_LOG_PATH = _default_log_path()

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Records logged before the log file exists; replayed into it by open_log_file().
_pending: Optional[logging.handlers.MemoryHandler] = None


def configure_logging(*, verbose: bool = False) -> None:
    """Set up console logging for the operator.

    Nothing is written to disk here: preflight must pass before the bootstrap
    touches the filesystem. Until open_log_file() is called every record
    (DEBUG included) is held in memory.
    """

    global _pending

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    _pending = logging.handlers.MemoryHandler(capacity=10000, flushLevel=logging.CRITICAL + 1)
    _pending.setLevel(logging.DEBUG)
    root.addHandler(_pending)


def open_log_file(log_path: str = DEFAULT_LOG_PATH) -> str:
    """Start the full DEBUG log file, replaying anything already logged.

    Falls back to ./wayland-bootstrap.log when the state directory cannot be
    created. Returns the path actually used.
    """

    global _pending

    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        chosen_path = log_path
    except OSError:
        chosen_path = str(Path.cwd() / "wayland-bootstrap.log")
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))

    root = logging.getLogger()
    if _pending is not None:
        _pending.setTarget(file_handler)
        _pending.flush()
        root.removeHandler(_pending)
        _pending.close()
        _pending = None
    root.addHandler(file_handler)

    logging.getLogger(__name__).info(
        "Log file opened (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
