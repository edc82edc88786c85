from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Tuple

from ..config import BootstrapConfig
from ..context import BootstrapContext
from ..errors import HandoverError, MissingInstallerError
from ..lib.command import CommandRunner

logger = logging.getLogger(__name__)


def _cargo_build_args(profile: str) -> Tuple[List[str], str]:
    """Return (cargo build argv, output subdirectory) for a build profile."""

    if profile == "release":
        return ["cargo", "build", "--release"], "release"
    if profile == "dev":
        return ["cargo", "build"], "debug"
    return ["cargo", "build", "--profile", profile], profile


def cargo_target_dir(installer_dir: Path, runner: CommandRunner) -> Path:
    """Ask cargo where build output goes.

    cargo metadata accounts for a parent workspace, build.target-dir in
    .cargo/config.toml and CARGO_TARGET_DIR. Without it we fall back to
    CARGO_TARGET_DIR resolved the way cargo does, against installer_dir.
    """

    r = runner.read_user(
        ["cargo", "metadata", "--no-deps", "--format-version", "1"],
        cwd=str(installer_dir),
    )
    if r.returncode == 0:
        try:
            meta = json.loads(r.stdout)
        except ValueError:
            meta = None
        if isinstance(meta, dict) and meta.get("target_directory"):
            return Path(meta["target_directory"])
    logger.warning("cargo metadata gave no target directory (exit %s); using defaults", r.returncode)

    env_dir = os.environ.get("CARGO_TARGET_DIR")
    return installer_dir / (env_dir or "target")


def installer_binary_path(installer_dir: Path, config: BootstrapConfig, runner: CommandRunner) -> Path:
    _, subdir = _cargo_build_args(config.build_profile)
    return cargo_target_dir(installer_dir, runner) / subdir / config.installer_binary


def handover(repository_root: str | Path, config: BootstrapConfig, runner: CommandRunner) -> int:
    """Build the install wizard and run it to completion.

    Returns the wizard's exit code unchanged. Both the build and the wizard
    inherit our terminal so the wizard can prompt.
    """

    installer_dir = Path(repository_root) / config.installer_path
    if not installer_dir.is_dir():
        raise MissingInstallerError(
            f"Installer source code not found at: {installer_dir}",
            hint="The checkout is incomplete; remove it and re-run to clone again.",
        )

    build_argv, _ = _cargo_build_args(config.build_profile)
    logger.info("Compiling installer binary (%s)", config.build_profile)
    rc = runner.run_user(build_argv, cwd=str(installer_dir))
    if rc != 0:
        raise HandoverError(f"Installer build failed (exit {rc})")

    binary = installer_binary_path(installer_dir, config, runner)
    if not binary.is_file():
        raise HandoverError(f"Build succeeded but installer binary is missing: {binary}")

    logger.info("Launching install wizard: %s", binary)
    return runner.run_user([str(binary)], cwd=str(installer_dir))


class HandoverStep:
    step_id = "50_handover"

    def __init__(self, config: BootstrapConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner

    def run(self, ctx: BootstrapContext) -> None:
        if ctx.repository_root is None:
            raise HandoverError("Repository root was never resolved")
        if not ctx.toolchain_ready:
            raise HandoverError("Toolchain is not provisioned; refusing to hand over")

        rc = handover(ctx.repository_root, self.config, self.runner)
        ctx.record_exit(rc)
        if rc == 0:
            logger.info("Install wizard finished successfully")
        else:
            logger.error("Install wizard exited with errors (exit %s)", rc)
