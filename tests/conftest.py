from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from wayland_bootstrap import logging_utils
from wayland_bootstrap.config import BootstrapConfig
from wayland_bootstrap.lib.command import CmdResult


class FakeRunner:
    """Records commands instead of running them.

    ``codes`` maps an argv prefix to the exit code it returns; ``effects``
    maps a prefix to a callable run before returning (e.g. to create the
    directory a real ``git clone`` would); ``outputs`` maps a prefix
    to the stdout ``read_user`` returns.
    """

    def __init__(self, *, installed: Sequence[str] = ("git",)):
        self.calls: List[Tuple[str, List[str], Optional[str]]] = []
        self.codes: Dict[Tuple[str, ...], int] = {}
        self.effects: Dict[Tuple[str, ...], Callable[[List[str], Optional[str]], None]] = {}
        self.outputs: Dict[Tuple[str, ...], str] = {}
        self.installed = set(installed)

    @staticmethod
    def _match(table, argv):
        for prefix, value in table.items():
            if tuple(argv[: len(prefix)]) == prefix:
                return value
        return None

    def _run(self, kind: str, argv: Sequence[str], cwd: Optional[str]) -> int:
        argv = list(argv)
        self.calls.append((kind, argv, cwd))
        effect = self._match(self.effects, argv)
        if effect is not None:
            effect(argv, cwd)
        code = self._match(self.codes, argv)
        return 0 if code is None else code

    def run_user(self, argv, *, cwd=None, quiet=False) -> int:
        return self._run("user", argv, cwd)

    def read_user(self, argv, *, cwd=None) -> CmdResult:
        code = self._run("read", argv, cwd)
        stdout = self._match(self.outputs, list(argv)) or ""
        return CmdResult(argv=list(argv), returncode=code, stdout=stdout, stderr="")

    def run_privileged(self, argv) -> int:
        return self._run("privileged", argv, None)

    def which(self, name: str) -> Optional[str]:
        return f"/usr/bin/{name}" if name in self.installed else None

    def argvs(self, kind: Optional[str] = None) -> List[List[str]]:
        return [argv for k, argv, _ in self.calls if kind is None or k == kind]


def make_checkout(root: Path, config: BootstrapConfig) -> Path:
    marker = root / config.marker
    marker.parent.mkdir(parents=True, exist_ok=True)
    marker.write_text('[package]\nname = "install-wizard"\n', encoding="utf-8")
    return root


def fake_clone(config: BootstrapConfig):
    def _effect(argv, cwd):
        make_checkout(Path(argv[-1]), config)

    return _effect


def fake_cargo_build(config: BootstrapConfig):
    def _effect(argv, cwd):
        binary = Path(cwd) / "target" / "release" / config.installer_binary
        binary.parent.mkdir(parents=True, exist_ok=True)
        binary.write_text("#!/bin/sh\n", encoding="utf-8")

    return _effect


@pytest.fixture(autouse=True)
def _isolated_process(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PATH", "/usr/bin:/bin")
    monkeypatch.delenv("CARGO_TARGET_DIR", raising=False)
    monkeypatch.setattr("os.geteuid", lambda: 1000)


@pytest.fixture
def config(tmp_path) -> BootstrapConfig:
    return BootstrapConfig(raw={"toolchain": {"bin_dir": str(tmp_path / "cargo-home" / "bin")}})


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def workdir(tmp_path) -> Path:
    d = tmp_path / "work"
    d.mkdir()
    return d


@pytest.fixture
def root_logger(monkeypatch):
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    monkeypatch.setattr(logging_utils, "_pending", None)
    root.setLevel(logging.DEBUG)
    yield root
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
