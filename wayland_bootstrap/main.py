from __future__ import annotations

import argparse
import logging
import os
from typing import Optional

from .config import BootstrapConfig, load_config
from .context import BootstrapContext
from .lib.command import CommandRunner
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import run_pipeline
from .steps import (
    HandoverStep,
    OpenLogStep,
    PreflightStep,
    ProvisionToolchainStep,
    ResolveRepositoryStep,
    SyncDatabasesStep,
)

logger = logging.getLogger(__name__)


def build_steps(
    config: BootstrapConfig,
    runner: CommandRunner,
    *,
    sync: bool = True,
    log_path: Optional[str] = None,
):
    steps = [PreflightStep(config, runner)]
    if log_path:
        steps.append(OpenLogStep(log_path))
    return steps + [
        SyncDatabasesStep(config, runner, enabled=sync),
        ResolveRepositoryStep(config, runner),
        ProvisionToolchainStep(config, runner),
        HandoverStep(config, runner),
    ]


def run(
    *,
    config: Optional[BootstrapConfig] = None,
    runner: Optional[CommandRunner] = None,
    workdir: Optional[str] = None,
    stop_after: Optional[str] = None,
    sync: bool = True,
    log_path: Optional[str] = None,
) -> int:
    """Run the bootstrap pipeline and return the process exit status."""

    config = config or BootstrapConfig()
    runner = runner or CommandRunner(sudo=config.sudo_command)
    ctx = BootstrapContext(workdir or os.getcwd())

    logger.info("[Stage 1] Bootstrapping environment from %s", ctx.invocation_directory)

    result = run_pipeline(
        ctx=ctx,
        steps=build_steps(config, runner, sync=sync, log_path=log_path),
        stop_after=stop_after,
    )

    if result.failed_step is not None:
        logger.error("Fix the problem above and re-run; completed work is reused.")
    elif ctx.exit_status == 0:
        logger.info("Bootstrap complete! Rebooting is recommended.")
    elif ctx.exit_status is None:
        logger.info("Stopped after %s (phase=%s)", stop_after, ctx.phase and ctx.phase.value)
    return result.exit_status


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="wayland-bootstrap",
        description="Prepare a fresh Arch install and hand over to the install wizard.",
    )
    p.add_argument("--config", default=None, help="Path to bootstrap config (yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to bootstrap log")
    p.add_argument("--workdir", default=None, help="Directory to resolve/clone the repository in (default: cwd)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id (e.g. 40_provision_toolchain)")
    p.add_argument("--skip-sync", action="store_true", help="Skip the pacman -Syu database sync")
    p.add_argument("--verbose", action="store_true", help="Show command output on the console (the log file always has it)")

    args = p.parse_args(argv)

    configure_logging(verbose=args.verbose)

    try:
        config = load_config(args.config)
        return run(
            config=config,
            workdir=args.workdir,
            stop_after=args.stop_after,
            sync=not args.skip_sync,
            log_path=args.log,
        )
    except KeyboardInterrupt:
        logger.error("Interrupted; re-run to resume")
        return 130
    except (OSError, ValueError, RuntimeError) as e:
        logger.error("Bootstrap could not start: %s", e)
        return 1
