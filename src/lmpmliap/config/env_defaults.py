"""Runtime settings read from the environment.

Only ambient behaviour (where to log, where to clone, whether to execute)
is configurable; the build recipe itself lives in :mod:`lmpmliap.config.recipe`.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_TMPDIR = Path("/tmp")
DEFAULT_LOG_DIR = Path("runlogs")

_TMPDIR_ENV = "TMPDIR"
_LOG_DIR_ENV = "LMPMLIAP_LOG_DIR"
_DRY_RUN_ENV = "LMPMLIAP_DRY_RUN"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    tmpdir: Path = DEFAULT_TMPDIR
    log_dir: Path = DEFAULT_LOG_DIR
    dry_run: bool = False


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    log_dir: Optional[Path] = None,
    dry_run: Optional[bool] = None,
) -> Settings:
    """Build :class:`Settings` from environment variables.

    ``TMPDIR`` is respected when set and non-empty, otherwise ``/tmp``.
    Explicit ``log_dir``/``dry_run`` arguments (from the CLI) win over
    ``LMPMLIAP_LOG_DIR``/``LMPMLIAP_DRY_RUN``.
    """
    env = os.environ if environ is None else environ

    tmpdir = env.get(_TMPDIR_ENV) or str(DEFAULT_TMPDIR)
    if log_dir is None:
        log_dir = Path(env.get(_LOG_DIR_ENV) or DEFAULT_LOG_DIR)
    if dry_run is None:
        dry_run = _flag(env.get(_DRY_RUN_ENV))

    return Settings(tmpdir=Path(tmpdir), log_dir=Path(log_dir), dry_run=bool(dry_run))
