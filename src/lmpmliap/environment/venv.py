"""Python virtual environment for MACE + ML-IAP."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Sequence

from ..utils.toolchain import CommandRunner


def venv_python(venv_dir: Path) -> Path:
    return Path(venv_dir) / "bin" / "python"


def create_venv(runner: CommandRunner, venv_dir: Path, env: Mapping[str, str]) -> None:
    """Create ``venv_dir`` with the module-provided ``python3``."""
    runner.run(["python3", "-m", "venv", str(venv_dir)], env=env, label="create venv")


def activate(env: Mapping[str, str], venv_dir: Path) -> Dict[str, str]:
    """Return a copy of ``env`` with ``venv_dir`` activated.

    Equivalent to sourcing ``bin/activate``: sets ``VIRTUAL_ENV``, puts the
    venv's ``bin`` first on ``PATH`` and drops ``PYTHONHOME``.
    """
    activated = dict(env)
    bin_dir = str(Path(venv_dir) / "bin")
    path = activated.get("PATH")
    activated["PATH"] = f"{bin_dir}{os.pathsep}{path}" if path else bin_dir
    activated["VIRTUAL_ENV"] = str(venv_dir)
    activated.pop("PYTHONHOME", None)
    return activated


def install_packages(
    runner: CommandRunner,
    venv_dir: Path,
    env: Mapping[str, str],
    bootstrap: Sequence[str],
    packages: Sequence[str],
) -> None:
    """Upgrade the packaging tools, then install the pinned packages."""
    python = str(venv_python(venv_dir))
    runner.run([python, "-m", "pip", "install", "--upgrade", *bootstrap],
               env=env, label="pip bootstrap")
    runner.run([python, "-m", "pip", "install", *packages],
               env=env, label="pip install")
