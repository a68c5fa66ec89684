"""
Command-line interface for the LAMMPS-MLIAP installer.

``lmpmliap`` groups the commands; ``install-lammps-mliap`` is the
stand-alone install command.
"""

from .main import cli, install, show_recipe

__all__ = ['cli', 'install', 'show_recipe']
