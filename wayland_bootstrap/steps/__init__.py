from .step_10_preflight import PreflightStep
from .step_15_open_log import OpenLogStep
from .step_20_sync_databases import SyncDatabasesStep
from .step_30_resolve_repository import ResolveRepositoryStep
from .step_40_provision_toolchain import ProvisionToolchainStep
from .step_50_handover import HandoverStep

__all__ = [
    "PreflightStep",
    "OpenLogStep",
    "SyncDatabasesStep",
    "ResolveRepositoryStep",
    "ProvisionToolchainStep",
    "HandoverStep",
]
