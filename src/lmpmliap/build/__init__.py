"""CMake configuration and make targets for LAMMPS."""
from .cmake_build import compile_lammps, configure, run_install_target, write_kokkos_preset

__all__ = ["compile_lammps", "configure", "run_install_target", "write_kokkos_preset"]
