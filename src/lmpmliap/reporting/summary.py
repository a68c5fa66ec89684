"""Installation summary and instructions for using the build."""
from __future__ import annotations

from typing import List

from rich.markup import escape
from rich.panel import Panel

from ..config import recipe
from ..utils.console import console, print_success

RULE = "=" * 62

EXAMPLE_RUN = "mpirun -np 2 lmp -k on g 2 -sf kk -pk kokkos newton on neigh half -in input.in"
EXAMPLE_INPUT = [
    "pair_style  mliap unified your_model-mliap_lammps.pt 0",
    "pair_coeff  * * C H O N",
]


def usage_lines(installer) -> List[str]:
    """Shell lines that reproduce the runtime environment of the install."""
    return [
        "module purge",
        f"module load {' '.join(recipe.MODULES)}",
        f"source {installer.venv_dir}/bin/activate",
        f"export PATH={installer.prefix}/bin:$PATH",
    ]


def print_summary(installer) -> None:
    """Print the banner, install locations and how to run LAMMPS."""
    console.print()
    console.print(RULE)
    if installer.dry_run:
        print_success("LAMMPS-MLIAP dry run complete - nothing was installed.")
    else:
        print_success("LAMMPS-MLIAP (MACE + Multi-GPU) INSTALLED SUCCESSFULLY!")
    console.print(RULE)
    console.print()

    details = "\n".join([
        f"Username: {installer.username}",
        f"Project: {installer.project_name}",
        f"LAMMPS Path: {installer.prefix}",
        f"Python venv: {installer.venv_dir}",
        f"Executable: {installer.binary}",
    ])
    console.print(Panel(escape(details), title="Installation Summary", expand=False))

    console.print("To use LAMMPS with ML-IAP:")
    for line in usage_lines(installer):
        console.print(f"  {escape(line)}")
    console.print()
    console.print("Example run command (multi-GPU):")
    console.print(f"  {EXAMPLE_RUN}")
    console.print()
    console.print("Example LAMMPS input snippet:")
    for line in EXAMPLE_INPUT:
        console.print(f"  {escape(line)}")
    console.print()
    console.print(RULE)
