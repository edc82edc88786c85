from __future__ import annotations

import logging

from ..config import BootstrapConfig
from ..context import BootstrapContext
from ..errors import ConnectivityError, PrivilegeError
from ..lib.command import CommandRunner
from ..lib.env import is_privileged
from ..lib.net import is_online

logger = logging.getLogger(__name__)


def validate(config: BootstrapConfig, runner: CommandRunner) -> None:
    """Check preconditions before anything on the host is changed."""

    # makepkg refuses to build as root, and the wizard builds AUR packages.
    if is_privileged():
        raise PrivilegeError(
            "Do not run the bootstrap as root",
            hint="Run it as your normal user; sudo is requested when needed.",
        )

    logger.info("Checking network connectivity (%s)", config.probe_host)
    if not is_online(runner, host=config.probe_host, timeout_s=config.probe_timeout):
        raise ConnectivityError(
            f"No internet connection detected ({config.probe_host} unreachable)",
            hint="Connect to Wi-Fi (iwctl) or Ethernet, then re-run.",
        )


class PreflightStep:
    step_id = "10_preflight"

    def __init__(self, config: BootstrapConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner

    def run(self, ctx: BootstrapContext) -> None:
        validate(self.config, self.runner)
        logger.info("Preflight checks passed")
