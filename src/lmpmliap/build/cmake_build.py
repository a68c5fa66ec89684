"""Configure, build and install LAMMPS with ML-IAP + Kokkos.

Presets::

    cmake/presets/basic.cmake       shipped with LAMMPS
    cmake/presets/mahti-gpu.cmake   written here (CUDA, UVM, OpenMP, AMPERE80)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from ..config import recipe
from ..utils.toolchain import CommandRunner

logger = logging.getLogger(__name__)


def write_kokkos_preset(checkout: Path, dry_run: bool = False) -> Path:
    """Write the fixed Kokkos GPU preset into the checkout."""
    preset = Path(checkout) / "cmake" / "presets" / recipe.PRESET_NAME
    if dry_run:
        logger.info(f"[dry-run] write {preset}")
        return preset
    preset.parent.mkdir(parents=True, exist_ok=True)
    preset.write_text(recipe.KOKKOS_PRESET)
    return preset


def build_dir(checkout: Path) -> Path:
    return Path(checkout) / "build"


def configure(runner: CommandRunner, checkout: Path, prefix: Path,
              env: Mapping[str, str], dry_run: bool = False) -> Path:
    """Create the build directory and run the CMake configure step."""
    build = build_dir(checkout)
    if dry_run:
        logger.info(f"[dry-run] mkdir -p {build}")
    else:
        build.mkdir(parents=True, exist_ok=True)
    runner.run(recipe.cmake_configure_command(checkout, prefix),
               cwd=build, env=env, label="cmake configure")
    return build


def compile_lammps(runner: CommandRunner, build: Path, env: Mapping[str, str]) -> None:
    runner.run(["make", "-j", str(recipe.BUILD_JOBS)], cwd=build, env=env, label="make")


def run_install_target(runner: CommandRunner, build: Path, env: Mapping[str, str], target: str) -> None:
    runner.run(["make", target], cwd=build, env=env, label=f"make {target}")
