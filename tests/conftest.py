"""Shared pytest fixtures: a recording command runner and installer factory."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from lmpmliap.config import Settings
from lmpmliap.installer import Installer
from lmpmliap.utils.toolchain import CommandFailed, CommandRunner

MODULE_ENV_DUMP = "\0".join([
    "PATH=/appl/spack/gcc-11.2.0/bin:/usr/bin:/bin",
    "LOADEDMODULES=gcc/11.2.0:openmpi/4.1.2:fftw/3.3.10-mpi:cuda/11.5.0",
    "CUDA_HOME=/appl/spack/cuda-11.5.0",
    "BASH_FUNC_module%%=() {  eval $($LMOD_CMD bash \"$@\")\n}",
    "",
])


class RecordingRunner(CommandRunner):
    """Records commands instead of spawning them.

    ``fail_on`` is a substring matched against the joined command line; the
    first match raises :class:`CommandFailed`. ``on_run`` hooks can create
    the files a real command would have produced.
    """

    def __init__(self, fail_on: Optional[str] = None, env_dump: str = MODULE_ENV_DUMP):
        super().__init__(log_dir=None, dry_run=False)
        self.fail_on = fail_on
        self.env_dump = env_dump
        self.calls: List[Dict[str, object]] = []
        self.on_run: List[Callable[[List[str], Optional[Path]], None]] = []

    def _record(self, cmd, cwd, env, label):
        cmd = [str(part) for part in cmd]
        self.history.append(cmd)
        self.calls.append({"cmd": cmd, "cwd": cwd, "env": dict(env or {}), "label": label})
        if self.fail_on and self.fail_on in " ".join(cmd):
            raise CommandFailed(cmd, 2)
        return cmd

    def run(self, cmd, *, cwd=None, env=None, label=None):
        cmd = self._record(cmd, cwd, env, label)
        for hook in self.on_run:
            hook(cmd, cwd)

    def capture(self, cmd, *, cwd=None, env=None, label=None):
        self._record(cmd, cwd, env, label or "capture")
        return self.env_dump

    def commands(self) -> List[str]:
        return [" ".join(call["cmd"]) for call in self.calls]


def produce_binary(root: Path):
    """Hook creating ``bin/lmp`` under the install prefix on ``make install``."""

    def hook(cmd, cwd):
        if cmd[:2] == ["make", "install"]:
            binary = root / "lammps-mliap" / "bin" / "lmp"
            binary.parent.mkdir(parents=True, exist_ok=True)
            binary.write_text("#!/bin/sh\n")

    return hook


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    tmpdir = tmp_path / "scratch"
    tmpdir.mkdir()
    return Settings(tmpdir=tmpdir, log_dir=tmp_path / "runlogs", dry_run=False)


@pytest.fixture
def projappl(tmp_path: Path) -> Path:
    return tmp_path / "projappl"


@pytest.fixture
def make_installer(settings: Settings, projappl: Path):
    def factory(runner: Optional[RecordingRunner] = None, dry_run: bool = False,
                build_binary: bool = True) -> Installer:
        runner = runner or RecordingRunner()
        run_settings = Settings(tmpdir=settings.tmpdir, log_dir=settings.log_dir, dry_run=dry_run)
        installer = Installer(
            "alice",
            "project_2001234",
            settings=run_settings,
            runner=runner,
            base_env={"PATH": "/usr/bin:/bin", "HOME": "/users/alice"},
            root_base=projappl,
        )
        if build_binary:
            runner.on_run.append(produce_binary(installer.root))
        return installer

    return factory
