from __future__ import annotations

from typing import Optional


class BootstrapError(Exception):
    """Fatal failure of one bootstrap stage.

    Every subclass aborts the remaining pipeline. ``hint`` is an optional
    second line telling the operator what to fix before re-running.
    """

    stage = "bootstrap"

    def __init__(self, message: str, *, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class PreflightError(BootstrapError):
    stage = "preflight"


class PrivilegeError(PreflightError):
    pass


class ConnectivityError(PreflightError):
    pass


class ResolverError(BootstrapError):
    stage = "resolver"


class ProvisionError(BootstrapError):
    stage = "provisioner"


class HandoverError(BootstrapError):
    stage = "handover"


class MissingInstallerError(HandoverError):
    pass


class ContextError(RuntimeError):
    """A write-once field of the bootstrap context was written twice."""
