"""Fixed build recipe for LAMMPS + ML-IAP (MACE) + Kokkos on Mahti GPU nodes.

Nothing here is meant to be overridden at runtime: the recipe targets one
cluster (CSC Mahti), one software stack and one GPU architecture (A100).
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

# Environment modules, loaded after ``module purge``
MODULES: List[str] = [
    "gcc/11.2.0",
    "openmpi/4.1.2",
    "fftw/3.3.10-mpi",
    "cuda/11.5.0",
    "cudnn/8.3.3.40-11.5",
    "intel-oneapi-mkl/2021.4.0",
]

PIP_BOOTSTRAP: List[str] = ["pip", "wheel", "setuptools"]

PIP_PACKAGES: List[str] = [
    "torch==2.4.0",
    "cupy-cuda12x",
    "cuequivariance",
    "cuequivariance-torch",
    "cuequivariance-ops-torch-cu12",
    "numpy<2",
]

LAMMPS_REPO_URL = "https://github.com/lammps/lammps"
LAMMPS_BRANCH = "develop"
LAMMPS_CLONE_DEPTH = 1
CHECKOUT_NAME = "lammps"

PRESET_NAME = "mahti-gpu.cmake"
BASE_PRESET_NAME = "basic.cmake"

# Kokkos GPU preset for NVIDIA A100
KOKKOS_PRESET = (
    'set(Kokkos_ENABLE_CUDA ON CACHE BOOL "")\n'
    'set(Kokkos_ENABLE_CUDA_UVM ON CACHE BOOL "")\n'
    'set(Kokkos_ENABLE_OPENMP ON CACHE BOOL "")\n'
    'set(Kokkos_ARCH_AMPERE80 ON CACHE BOOL "")\n'
)

CMAKE_DEFINITIONS: Dict[str, str] = {
    "CMAKE_BUILD_TYPE": "Release",
    "BUILD_MPI": "ON",
    "PKG_KOKKOS": "ON",
    "PKG_ML-IAP": "ON",
    "PKG_ML-SNAP": "ON",
    "PKG_PYTHON": "ON",
    "MLIAP_ENABLE_PYTHON": "ON",
    "BUILD_SHARED_LIBS": "ON",
}

BUILD_JOBS = 8
INSTALL_TARGETS: List[str] = ["install", "install-python"]

# Layout below the installation root
VENV_DIRNAME = "venv"
PREFIX_DIRNAME = "lammps-mliap"
BINARY_RELPATH = Path("bin") / "lmp"
PROJAPPL_BASE = Path("/projappl")


def install_root(username: str, project_name: str, base: Path = PROJAPPL_BASE) -> Path:
    """Installation root on the Mahti project application disk."""
    return Path(base) / project_name / username / "LAMMPS-MLIAP"


def cmake_configure_command(checkout: Path, prefix: Path) -> List[str]:
    """Return the full ``cmake`` configure command line.

    Presets are given relative to ``checkout/cmake/presets``; the base preset
    comes first so the Kokkos preset can override it.
    """
    presets = Path(checkout) / "cmake" / "presets"
    cmd = [
        "cmake", str(Path(checkout) / "cmake"),
        "-C", str(presets / BASE_PRESET_NAME),
        "-C", str(presets / PRESET_NAME),
        f"-DCMAKE_BUILD_TYPE={CMAKE_DEFINITIONS['CMAKE_BUILD_TYPE']}",
        f"-DCMAKE_INSTALL_PREFIX={prefix}",
    ]
    cmd += [
        f"-D{key}={value}"
        for key, value in CMAKE_DEFINITIONS.items()
        if key != "CMAKE_BUILD_TYPE"
    ]
    return cmd


def recipe_as_dict() -> Dict[str, object]:
    """Plain-data view of the recipe for display and manifests."""
    return {
        "modules": list(MODULES),
        "pip": {
            "bootstrap": list(PIP_BOOTSTRAP),
            "packages": list(PIP_PACKAGES),
        },
        "source": {
            "url": LAMMPS_REPO_URL,
            "branch": LAMMPS_BRANCH,
            "depth": LAMMPS_CLONE_DEPTH,
        },
        "kokkos_preset": {
            "name": PRESET_NAME,
            "content": KOKKOS_PRESET,
        },
        "cmake": {
            "presets": [BASE_PRESET_NAME, PRESET_NAME],
            "definitions": dict(CMAKE_DEFINITIONS),
        },
        "build": {
            "jobs": BUILD_JOBS,
            "install_targets": list(INSTALL_TARGETS),
        },
    }
