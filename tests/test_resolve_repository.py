from __future__ import annotations

import os
from pathlib import Path

import pytest

from conftest import FakeRunner, fake_clone, make_checkout
from wayland_bootstrap.context import BootstrapContext, Phase
from wayland_bootstrap.errors import ResolverError
from wayland_bootstrap.steps import ResolveRepositoryStep
from wayland_bootstrap.steps.step_30_resolve_repository import resolve


def test_in_place_when_marker_present(config, runner, workdir):
    make_checkout(workdir, config)

    root, phase = resolve(workdir, config, runner)

    assert (root, phase) == (workdir.resolve(), Phase.IN_PLACE)
    assert runner.calls == []


def test_resume_existing_clone(config, runner, workdir):
    clone = make_checkout(workdir / config.repo_name, config)

    root, phase = resolve(workdir, config, runner)

    assert (root, phase) == (clone.resolve(), Phase.RESUME)
    assert runner.calls == []


def test_in_place_wins_over_resume(config, runner, workdir):
    make_checkout(workdir, config)
    make_checkout(workdir / config.repo_name, config)

    root, phase = resolve(workdir, config, runner)

    assert phase is Phase.IN_PLACE
    assert root == workdir.resolve()


def test_incomplete_resume_directory_is_an_error(config, runner, workdir):
    (workdir / config.repo_name / "sysScripts").mkdir(parents=True)

    with pytest.raises(ResolverError) as exc:
        resolve(workdir, config, runner)

    assert "incomplete" in str(exc.value)
    assert runner.calls == []


def test_fresh_clones_exactly_one_directory(config, runner, workdir):
    runner.effects[("git", "clone")] = fake_clone(config)

    root, phase = resolve(workdir, config, runner)

    assert phase is Phase.FRESH
    assert [p.name for p in workdir.iterdir()] == [config.repo_name]
    assert root == (workdir / config.repo_name).resolve()
    assert (root / config.marker).is_file()
    assert runner.argvs() == [["git", "clone", config.repo_url, str(root)]]


def test_fresh_installs_git_when_missing(config, workdir):
    runner = FakeRunner(installed=())
    runner.effects[("git", "clone")] = fake_clone(config)

    resolve(workdir, config, runner)

    assert runner.argvs("privileged") == [["pacman", "-S", "--needed", "--noconfirm", "git"]]
    assert runner.argvs("user")[0][:2] == ["git", "clone"]


def test_git_install_failure(config, workdir):
    runner = FakeRunner(installed=())
    runner.codes[("pacman",)] = 1

    with pytest.raises(ResolverError):
        resolve(workdir, config, runner)
    assert runner.argvs("user") == []


def test_clone_failure(config, runner, workdir):
    runner.codes[("git", "clone")] = 128

    with pytest.raises(ResolverError) as exc:
        resolve(workdir, config, runner)
    assert "128" in str(exc.value)


def test_clone_without_marker(config, runner, workdir):
    runner.effects[("git", "clone")] = lambda argv, cwd: Path(argv[-1]).mkdir()

    with pytest.raises(ResolverError):
        resolve(workdir, config, runner)


@pytest.mark.parametrize("layout", ["in_place", "resume"])
def test_resolution_is_repeatable(config, runner, workdir, layout):
    target = workdir if layout == "in_place" else workdir / config.repo_name
    make_checkout(target, config)

    assert resolve(workdir, config, runner) == resolve(workdir, config, runner)


def test_second_run_after_fresh_resumes(config, runner, workdir):
    runner.effects[("git", "clone")] = fake_clone(config)
    first_root, first_phase = resolve(workdir, config, runner)

    second_root, second_phase = resolve(workdir, config, runner)

    assert first_phase is Phase.FRESH
    assert second_phase is Phase.RESUME
    assert second_root == first_root
    assert len([a for a in runner.argvs() if a[:2] == ["git", "clone"]]) == 1


def test_step_records_and_enters_repository(config, runner, workdir):
    clone = make_checkout(workdir / config.repo_name, config)
    ctx = BootstrapContext(workdir)

    ResolveRepositoryStep(config, runner).run(ctx)

    assert ctx.phase is Phase.RESUME
    assert ctx.repository_root == clone.resolve()
    assert Path(os.getcwd()).resolve() == clone.resolve()
