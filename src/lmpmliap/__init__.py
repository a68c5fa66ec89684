"""
LAMMPS ML-IAP installer
-----------------------
Builds LAMMPS with ML-IAP (MACE) and Kokkos multi-GPU support on the
CSC Mahti GPU partition.
"""
import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .installer import Installer, UsageError, VerificationError, validate_arguments

__all__ = ["Installer", "UsageError", "VerificationError", "validate_arguments", "__version__"]
