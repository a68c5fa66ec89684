"""Fresh shallow checkout of the LAMMPS repository."""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Mapping

from ..config import recipe
from ..utils.console import print_warning
from ..utils.toolchain import CommandRunner

logger = logging.getLogger(__name__)


def remove_stale_checkout(checkout: Path, dry_run: bool = False) -> bool:
    """Remove a previous checkout directory at ``checkout``.

    Only directories are removed; whatever they contain is discarded without
    checking that it really is a LAMMPS tree. Returns ``True`` if something
    was (or, in a dry run, would be) removed.
    """
    checkout = Path(checkout)
    if not checkout.is_dir():
        return False

    print_warning(f"Removing existing {checkout.name} directory...")
    if dry_run:
        logger.info(f"[dry-run] rm -rf {checkout}")
    elif checkout.is_symlink():
        checkout.unlink()
    else:
        shutil.rmtree(checkout)
    return True


def clone_lammps(
    runner: CommandRunner,
    tmpdir: Path,
    env: Mapping[str, str],
    dry_run: bool = False,
) -> Path:
    """Clone LAMMPS into ``tmpdir`` and return the checkout path."""
    checkout = Path(tmpdir) / recipe.CHECKOUT_NAME
    remove_stale_checkout(checkout, dry_run=dry_run)

    runner.run(
        [
            "git", "clone",
            f"--branch={recipe.LAMMPS_BRANCH}",
            f"--depth={recipe.LAMMPS_CLONE_DEPTH}",
            recipe.LAMMPS_REPO_URL,
            recipe.CHECKOUT_NAME,
        ],
        cwd=Path(tmpdir),
        env=env,
        label="git clone",
    )
    return checkout
