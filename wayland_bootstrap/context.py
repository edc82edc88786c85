from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Optional

from .errors import ContextError

logger = logging.getLogger(__name__)


class Phase(str, enum.Enum):
    """How the provisioning repository was found for this run."""

    IN_PLACE = "in_place"
    RESUME = "resume"
    FRESH = "fresh"


class RunState(str, enum.Enum):
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class BootstrapContext:
    """State threaded through the pipeline for a single invocation.

    Nothing here is persisted. Fields written by a stage are write-once:
    the resolver owns ``repository_root`` and ``phase``, the first stage to
    finish (or fail) owns ``exit_status``.
    """

    def __init__(self, invocation_directory: str | Path):
        self._invocation_directory = Path(invocation_directory).resolve()
        self._repository_root: Optional[Path] = None
        self._phase: Optional[Phase] = None
        self._exit_status: Optional[int] = None
        self._toolchain_ready = False
        self.failed_step: Optional[str] = None
        self.error: Optional[BaseException] = None

    @property
    def invocation_directory(self) -> Path:
        return self._invocation_directory

    @property
    def repository_root(self) -> Optional[Path]:
        return self._repository_root

    @property
    def phase(self) -> Optional[Phase]:
        return self._phase

    @property
    def toolchain_ready(self) -> bool:
        return self._toolchain_ready

    @property
    def exit_status(self) -> Optional[int]:
        return self._exit_status

    @property
    def run_state(self) -> RunState:
        if self._exit_status is None:
            return RunState.RUNNING
        if self.failed_step is None and self._exit_status == 0:
            return RunState.SUCCEEDED
        return RunState.FAILED

    def set_repository(self, root: str | Path, phase: Phase) -> None:
        if self._repository_root is not None or self._phase is not None:
            raise ContextError(
                f"Repository already resolved ({self._phase}: {self._repository_root})"
            )
        p = Path(root)
        if not p.is_dir():
            raise ContextError(f"Repository root is not a directory: {p}")
        self._repository_root = p
        self._phase = Phase(phase)

    def mark_toolchain_ready(self) -> None:
        """Record a successful provisioning; there is no way back to False."""

        self._toolchain_ready = True

    def record_exit(self, status: int) -> None:
        """Record the terminal status of a run that reached its end."""

        self._write_exit_status(int(status))

    def record_failure(self, step_id: str, error: BaseException, *, status: int = 1) -> None:
        if status == 0:
            raise ValueError("A failure must carry a non-zero exit status")
        self._write_exit_status(status)
        self.failed_step = step_id
        self.error = error

    def _write_exit_status(self, status: int) -> None:
        if self._exit_status is not None:
            raise ContextError(
                f"Exit status already recorded as {self._exit_status} "
                f"(failed_step={self.failed_step}); refusing to overwrite with {status}"
            )
        self._exit_status = status
