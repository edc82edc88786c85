from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Tuple

from ..config import BootstrapConfig
from ..context import BootstrapContext, Phase
from ..errors import ResolverError
from ..lib.command import CommandRunner
from ..lib.pkg import pacman_install
from ..lib.vcs import git_clone

logger = logging.getLogger(__name__)


def _ensure_git(config: BootstrapConfig, runner: CommandRunner) -> None:
    if runner.which("git"):
        return
    logger.info("git not found; installing %s", ", ".join(config.vcs_packages))
    rc = pacman_install(runner, config.vcs_packages, pacman=config.package_manager)
    if rc != 0:
        raise ResolverError(f"Could not install git (exit {rc})")


def _resolve(invocation_dir: Path, config: BootstrapConfig, runner: CommandRunner) -> Tuple[Path, Phase]:
    # 1. Running from inside a checkout.
    if (invocation_dir / config.marker).is_file():
        return invocation_dir, Phase.IN_PLACE

    # 2. A previous run already cloned next to us.
    clone_dir = invocation_dir / config.repo_name
    if clone_dir.is_dir():
        if not (clone_dir / config.marker).is_file():
            raise ResolverError(
                f"Existing clone looks incomplete: {clone_dir / config.marker} missing",
                hint=f"Remove {clone_dir} and re-run to clone again.",
            )
        return clone_dir, Phase.RESUME

    # 3. Nothing found: clone.
    _ensure_git(config, runner)
    logger.info("Cloning %s into %s", config.repo_url, clone_dir)
    rc = git_clone(runner, config.repo_url, clone_dir)
    if rc != 0:
        raise ResolverError(f"git clone failed (exit {rc}): {config.repo_url}")
    if not (clone_dir / config.marker).is_file():
        raise ResolverError(f"Clone finished but {config.marker} is missing in {clone_dir}")
    return clone_dir, Phase.FRESH


def resolve(
    invocation_dir: str | Path,
    config: BootstrapConfig,
    runner: CommandRunner,
) -> Tuple[Path, Phase]:
    """Decide where the repository lives and how we got it.

    Precedence is InPlace > Resume > Fresh, evaluated from the filesystem on
    every call; nothing from a previous run is trusted.
    """

    try:
        return _resolve(Path(invocation_dir).resolve(), config, runner)
    except OSError as e:
        raise ResolverError(f"Filesystem error while locating repository: {e}") from e


class ResolveRepositoryStep:
    step_id = "30_resolve_repository"

    def __init__(self, config: BootstrapConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner

    def run(self, ctx: BootstrapContext) -> None:
        root, phase = resolve(ctx.invocation_directory, self.config, self.runner)
        ctx.set_repository(root, phase)

        if phase is Phase.IN_PLACE:
            logger.info("Running from inside repository (%s)", root)
        elif phase is Phase.RESUME:
            logger.info("Found existing repository, resuming installation (%s)", root)
        else:
            logger.info("Repository cloned (%s)", root)

        try:
            os.chdir(root)
        except OSError as e:
            raise ResolverError(f"Cannot enter repository {root}: {e}") from e
