"""Load Lmod environment modules and capture the resulting environment.

``module`` is a shell function, so it cannot be spawned directly. The module
commands run inside a login bash shell which then dumps its environment with
``env -0``; that environment becomes the base for every later step.
"""
from __future__ import annotations

import logging
import os
import re
import shlex
from typing import Dict, Mapping, Optional, Sequence

from ..utils.toolchain import CommandRunner

logger = logging.getLogger(__name__)

ENV_MARKER = "__LMPMLIAP_ENV__"
_ENV_KEY = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def module_script(modules: Sequence[str]) -> str:
    """Shell snippet: purge, load ``modules``, dump the environment."""
    names = " ".join(shlex.quote(m) for m in modules)
    return f"module purge && module load {names} && printf '\\0%s\\0' {ENV_MARKER} && env -0"


def parse_env_dump(dump: str) -> Dict[str, str]:
    """Parse NUL-separated ``KEY=VALUE`` records as printed by ``env -0``.

    Anything before the marker record (login banners, profile output) is
    discarded. Records whose key is not a shell identifier are skipped.
    """
    marker = f"\0{ENV_MARKER}\0"
    if marker in dump:
        dump = dump.rsplit(marker, 1)[1]
    env: Dict[str, str] = {}
    for record in dump.split("\0"):
        if not record or "=" not in record:
            continue
        key, value = record.split("=", 1)
        # exported bash functions (BASH_FUNC_module%%) fail this too
        if not _ENV_KEY.fullmatch(key):
            continue
        env[key] = value
    return env


def load_modules(
    runner: CommandRunner,
    modules: Sequence[str],
    base_env: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Purge and load ``modules``, returning the environment they produce.

    Raises :class:`~lmpmliap.utils.toolchain.CommandFailed` if the shell or any
    module command fails. In a dry run the base environment is returned
    unchanged.
    """
    base = dict(os.environ if base_env is None else base_env)
    dump = runner.capture(["bash", "-lc", module_script(modules)], env=base,
                          label="load modules")
    if not dump:
        return base

    env = parse_env_dump(dump)
    for key in ("TMPDIR", "PROJAPPL"):
        if key in base:
            env[key] = base[key]
    logger.info(f"Loaded modules: {' '.join(modules)}")
    return env
