"""LAMMPS source retrieval."""
from .lammps_source import clone_lammps, remove_stale_checkout

__all__ = ["clone_lammps", "remove_stale_checkout"]
