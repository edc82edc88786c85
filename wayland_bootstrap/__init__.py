"""Stage-0 bootstrap for the rust-wayland-power desktop (Python-first, fail-fast).

Core design goals:
- Validate before mutating anything
- Re-derive install phase from the filesystem on every run
- Idempotent provisioning
- Pass-through handover to the compiled install wizard
- Centralized logging
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
