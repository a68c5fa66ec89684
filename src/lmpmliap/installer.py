"""Ordered install run: environment, Python stack, source, build, verification."""
from __future__ import annotations

import logging
import os
import platform
import time
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .build import compile_lammps, configure, run_install_target, write_kokkos_preset
from .config import Settings, load_settings, recipe
from .environment import activate, create_venv, install_packages, load_modules
from .source import clone_lammps
from .reporting.summary import print_summary
from .utils.console import print_status, print_success, print_warning
from .utils.file_io import safe_write_json
from .utils.toolchain import CommandRunner

logger = logging.getLogger(__name__)

USAGE = "Usage: {prog} <username> <project_name>"
MANIFEST_NAME = "install_manifest.json"


class UsageError(ValueError):
    """Username or project name missing on the command line."""


class VerificationError(RuntimeError):
    """The LAMMPS executable was not produced."""


def validate_arguments(args: Sequence[Optional[str]], prog: str = "install-lammps-mliap") -> Tuple[str, str]:
    """Return ``(username, project_name)`` or raise :class:`UsageError`.

    Only presence is checked; extra arguments are ignored.
    """
    values = [a for a in args[:2] if a]
    if len(values) < 2:
        raise UsageError(USAGE.format(prog=prog))
    return values[0], values[1]


class Installer:
    """LAMMPS-MLIAP installation for one user/project on Mahti."""

    def __init__(
        self,
        username: str,
        project_name: str,
        settings: Optional[Settings] = None,
        runner: Optional[CommandRunner] = None,
        base_env: Optional[Mapping[str, str]] = None,
        root_base: Path = recipe.PROJAPPL_BASE,
    ):
        self.username = username
        self.project_name = project_name
        self.settings = settings or load_settings()
        self.dry_run = self.settings.dry_run
        self.runner = runner or CommandRunner(
            log_dir=self.settings.log_dir / "steps", dry_run=self.dry_run
        )

        self.root = recipe.install_root(username, project_name, root_base)
        self.tmpdir = self.settings.tmpdir
        self.venv_dir = self.root / recipe.VENV_DIRNAME
        self.prefix = self.root / recipe.PREFIX_DIRNAME
        self.binary = self.prefix / recipe.BINARY_RELPATH
        self.checkout = self.tmpdir / recipe.CHECKOUT_NAME

        self.env: Dict[str, str] = dict(os.environ if base_env is None else base_env)
        self.env["PROJAPPL"] = str(self.root)
        self.env["TMPDIR"] = str(self.tmpdir)

        self.build_path: Optional[Path] = None
        self.timings: Dict[str, float] = {}
        self.current_step: Optional[str] = None

    @property
    def steps(self) -> List[Tuple[str, Callable[[], object]]]:
        return [
            ("prepare_root", self.prepare_root),
            ("load_modules", self.load_environment),
            ("python_environment", self.provision_python),
            ("fetch_source", self.fetch_source),
            ("configure", self.configure_build),
            ("build_install", self.build_and_install),
            ("verify", self.verify),
        ]

    def run(self) -> Dict[str, object]:
        """Execute every step in order; the first failure propagates."""
        print_status(
            f"Starting LAMMPS-MLIAP installation for user: {self.username} "
            f"(project: {self.project_name})"
        )
        verified = None
        for name, step in self.steps:
            started = time.time()
            self.current_step = name
            result = step()
            self.timings[name] = round(time.time() - started, 3)
            if name == "verify":
                verified = result

        if not self.dry_run:
            self.write_manifest()

        self.current_step = None
        print_summary(self)
        return {
            "root": str(self.root),
            "binary": str(self.binary),
            "verified": verified,
            "dry_run": self.dry_run,
            "timings": dict(self.timings),
        }

    def prepare_root(self) -> None:
        print_status(f"Installation directory: {self.root}")
        print_status(f"Temporary directory: {self.tmpdir}")
        if self.dry_run:
            logger.info(f"[dry-run] mkdir -p {self.root}")
            return
        self.root.mkdir(parents=True, exist_ok=True)

    def load_environment(self) -> None:
        print_status("Loading required Mahti modules...")
        self.env = load_modules(self.runner, recipe.MODULES, self.env)
        print_success("Modules loaded.")

    def provision_python(self) -> None:
        print_status("Setting up Python virtual environment for MACE + ML-IAP...")
        create_venv(self.runner, self.venv_dir, self.env)
        self.env = activate(self.env, self.venv_dir)
        install_packages(self.runner, self.venv_dir, self.env,
                         recipe.PIP_BOOTSTRAP, recipe.PIP_PACKAGES)
        print_success("Python environment and dependencies installed.")

    def fetch_source(self) -> None:
        print_status(f"Cloning official LAMMPS {recipe.LAMMPS_BRANCH} branch...")
        self.checkout = clone_lammps(self.runner, self.tmpdir, self.env, dry_run=self.dry_run)
        print_success("LAMMPS source downloaded.")

    def configure_build(self) -> None:
        print_status("Setting up Kokkos GPU preset...")
        write_kokkos_preset(self.checkout, dry_run=self.dry_run)
        print_success("Kokkos GPU preset configured for NVIDIA A100.")

        print_status("Configuring LAMMPS with ML-IAP + Kokkos multi-GPU...")
        self.build_path = configure(self.runner, self.checkout, self.prefix,
                                    self.env, dry_run=self.dry_run)
        print_success("CMake configuration complete.")

    def build_and_install(self) -> None:
        build = self.build_path or self.checkout / "build"

        print_status("Building LAMMPS (this may take several minutes)...")
        compile_lammps(self.runner, build, self.env)
        print_success("LAMMPS built successfully.")

        print_status("Installing LAMMPS...")
        run_install_target(self.runner, build, self.env, "install")
        print_success("LAMMPS installed.")

        print_status("Installing LAMMPS Python package...")
        run_install_target(self.runner, build, self.env, "install-python")
        print_success("LAMMPS Python package installed.")

    def verify(self) -> Optional[bool]:
        """Check for the ``lmp`` binary. Returns ``None`` when skipped (dry run)."""
        if self.dry_run:
            print_warning(f"Dry run: skipping check for {self.binary}")
            return None
        if self.binary.is_file():
            print_success(f"LAMMPS executable found: {self.binary}")
            return True
        logger.info(f"Missing executable: {self.binary}")
        raise VerificationError("LAMMPS executable not found - installation may have failed.")

    def write_manifest(self) -> Path:
        manifest = {
            "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
            "host": platform.node(),
            "username": self.username,
            "project": self.project_name,
            "root": str(self.root),
            "executable": str(self.binary),
            "recipe": recipe.recipe_as_dict(),
            "timings": dict(self.timings),
        }
        path = self.root / MANIFEST_NAME
        safe_write_json(manifest, path)
        logger.info(f"Wrote manifest: {path}")
        return path
