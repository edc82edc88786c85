from __future__ import annotations

import logging

from ..config import BootstrapConfig
from ..context import BootstrapContext
from ..errors import ProvisionError
from ..lib.command import CommandRunner
from ..lib.pkg import pacman_sync_upgrade

logger = logging.getLogger(__name__)


class SyncDatabasesStep:
    step_id = "20_sync_databases"

    def __init__(self, config: BootstrapConfig, runner: CommandRunner, *, enabled: bool = True):
        self.config = config
        self.runner = runner
        self.enabled = enabled and config.sync_enabled

    def run(self, ctx: BootstrapContext) -> None:
        if not self.enabled:
            logger.info("Package database sync disabled")
            return

        logger.info("Synchronizing package databases")
        rc = pacman_sync_upgrade(
            self.runner,
            self.config.sync_packages,
            pacman=self.config.package_manager,
        )
        if rc != 0:
            raise ProvisionError(f"Package database sync failed (exit {rc})")
