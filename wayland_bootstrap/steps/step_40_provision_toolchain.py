from __future__ import annotations

import logging

from ..config import BootstrapConfig
from ..context import BootstrapContext
from ..errors import ProvisionError
from ..lib.command import CommandRunner
from ..lib.env import prepend_path
from ..lib.pkg import pacman_install

logger = logging.getLogger(__name__)


def provision(config: BootstrapConfig, runner: CommandRunner) -> None:
    """Install the build toolchain and activate the configured Rust channel.

    Safe to repeat: pacman skips installed packages and rustup re-selecting
    the current default is a no-op.
    """

    logger.info("Provisioning build toolchain")
    rc = pacman_install(runner, config.toolchain_packages, pacman=config.package_manager)
    if rc != 0:
        raise ProvisionError(f"Toolchain package install failed (exit {rc})")

    # pacman's rustup ships cargo/rustc shims that fail until a default
    # toolchain exists, so a cargo on PATH proves nothing. Always activate.
    logger.info("Ensuring Rust %s toolchain is active", config.toolchain_channel)
    rc = runner.run_user(["rustup", "default", config.toolchain_channel])
    if rc != 0:
        raise ProvisionError(
            f"rustup could not activate the {config.toolchain_channel} toolchain (exit {rc})"
        )

    prepend_path(config.cargo_bin_dir)


class ProvisionToolchainStep:
    step_id = "40_provision_toolchain"

    def __init__(self, config: BootstrapConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner

    def run(self, ctx: BootstrapContext) -> None:
        if ctx.toolchain_ready:
            logger.info("Toolchain already provisioned in this run")
            return
        provision(self.config, self.runner)
        ctx.mark_toolchain_ready()
