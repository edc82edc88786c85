from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from .context import BootstrapContext
from .errors import BootstrapError

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single pipeline stage."""

    step_id: str

    def run(self, ctx: BootstrapContext) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ctx: BootstrapContext
    ran_steps: List[str]
    failed_step: Optional[str]

    @property
    def exit_status(self) -> int:
        # A run stopped early (stop_after) without a recorded status succeeded.
        status = self.ctx.exit_status
        return 0 if status is None else status


def _report_failure(ctx: BootstrapContext, step_id: str, error: Exception) -> None:
    if isinstance(error, BootstrapError):
        logger.error("Bootstrap failed at step %s (%s): %s", step_id, error.stage, error)
        if error.hint:
            logger.error("%s", error.hint)
    else:
        logger.exception("Bootstrap failed at step %s", step_id)

    if ctx.exit_status is None:
        ctx.record_failure(step_id, error)
    else:
        logger.error(
            "Exit status already recorded as %s; keeping it", ctx.exit_status
        )


def run_pipeline(
    *,
    ctx: BootstrapContext,
    steps: Sequence[Step],
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order; the first failure ends the run."""

    if stop_after is not None and stop_after not in {s.step_id for s in steps}:
        raise ValueError(f"Unknown step_id for stop_after: {stop_after}")

    ran: List[str] = []

    for step in steps:
        logger.info("Running step %s", step.step_id)
        try:
            step.run(ctx)
        except Exception as e:
            _report_failure(ctx, step.step_id, e)
            return PipelineResult(ctx=ctx, ran_steps=ran, failed_step=step.step_id)
        ran.append(step.step_id)

        if ctx.exit_status is not None:
            break

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    return PipelineResult(ctx=ctx, ran_steps=ran, failed_step=None)
