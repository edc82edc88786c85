from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_CONFIG_PATH = "bootstrap.yaml"

DEFAULT_REPO_URL = "https://github.com/Mccalabrese/rust-wayland-power.git"
DEFAULT_REPO_NAME = "rust-wayland-power"
DEFAULT_INSTALLER_PATH = "sysScripts/install-wizard"


@dataclass(frozen=True)
class BootstrapConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        v = self.raw.get(name)
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError(f"config section '{name}' must be a mapping, got {type(v).__name__}")
        return v

    def _list(self, section: str, key: str, default: List[str]) -> List[str]:
        v = self._section(section).get(key)
        if v is None:
            return list(default)
        if not isinstance(v, list):
            raise ValueError(f"{section}.{key} must be a list, got {type(v).__name__}: {v!r}")
        return [str(item) for item in v]

    # --- repository ---

    @property
    def repo_url(self) -> str:
        return str(self._section("repository").get("url") or DEFAULT_REPO_URL)

    @property
    def repo_name(self) -> str:
        return str(self._section("repository").get("name") or DEFAULT_REPO_NAME)

    @property
    def marker(self) -> str:
        # The install wizard's manifest identifies a checkout of the repository.
        default = f"{self.installer_path}/Cargo.toml"
        return str(self._section("repository").get("marker") or default)

    # --- installer ---

    @property
    def installer_path(self) -> str:
        return str(self._section("installer").get("path") or DEFAULT_INSTALLER_PATH)

    @property
    def installer_binary(self) -> str:
        return str(self._section("installer").get("binary") or "install-wizard")

    @property
    def build_profile(self) -> str:
        return str(self._section("installer").get("profile") or "release")

    # --- preflight ---

    @property
    def probe_host(self) -> str:
        return str(self._section("preflight").get("probe_host") or "archlinux.org")

    @property
    def probe_timeout(self) -> int:
        v = self._section("preflight").get("probe_timeout")
        if v is None:
            return 2
        if isinstance(v, bool) or not isinstance(v, int) or v <= 0:
            raise ValueError(f"preflight.probe_timeout must be a positive integer, got {v!r}")
        return v

    # --- packages ---

    @property
    def sync_enabled(self) -> bool:
        v = self._section("packages").get("sync_enabled")
        return True if v is None else bool(v)

    @property
    def sync_packages(self) -> List[str]:
        return self._list("packages", "sync", ["archlinux-keyring", "pacman-mirrorlist"])

    @property
    def vcs_packages(self) -> List[str]:
        return self._list("packages", "vcs", ["git"])

    @property
    def toolchain_packages(self) -> List[str]:
        # base-devel: gcc/make for C dependencies of the wizard's crates.
        # rustup rather than the distro 'rust' package so the channel can be pinned.
        return self._list(
            "packages",
            "toolchain",
            ["base-devel", "rustup", "git", "pkgconf", "wget", "curl", "ca-certificates"],
        )

    # --- toolchain ---

    @property
    def toolchain_channel(self) -> str:
        return str(self._section("toolchain").get("channel") or "stable")

    @property
    def cargo_bin_dir(self) -> str:
        v = self._section("toolchain").get("bin_dir") or "~/.cargo/bin"
        return str(Path(os.path.expanduser(str(v))))

    # --- commands ---

    @property
    def sudo_command(self) -> str:
        return str(self._section("commands").get("sudo") or "sudo")

    @property
    def package_manager(self) -> str:
        return str(self._section("commands").get("package_manager") or "pacman")

    def validate(self) -> "BootstrapConfig":
        """Touch every setting so a bad value fails at load time, not mid-run."""

        for name, value in vars(type(self)).items():
            if isinstance(value, property):
                getattr(self, name)
        return self


def load_config(path: Optional[str] = None) -> BootstrapConfig:
    """Load bootstrap settings from YAML.

    With no explicit path the default ``bootstrap.yaml`` is optional and
    built-in defaults apply when it is absent. An explicitly requested file
    must exist.
    """

    explicit = path is not None
    p = Path(path or DEFAULT_CONFIG_PATH)
    if not p.exists():
        if explicit:
            raise FileNotFoundError(str(p))
        return BootstrapConfig()

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("bootstrap config must be YAML")

    try:
        import yaml  # type: ignore
    except ImportError as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required to read the bootstrap config") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"{p}: invalid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{p} must contain a mapping/object")

    return BootstrapConfig(raw=raw).validate()
