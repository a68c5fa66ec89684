"""External command execution for the install recipe.

Every command either succeeds or raises :class:`CommandFailed`; there are no
retries. Output of each command is streamed into its own log file so a
failed multi-hour build can be inspected afterwards.
"""
from __future__ import annotations

import logging
import re
import shlex
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

__all__ = ["CommandFailed", "CommandRunner", "format_command"]

TAIL_LINES = 40


class CommandFailed(RuntimeError):
    """An external command could not be started or exited non-zero."""

    def __init__(self, cmd: Sequence[str], returncode: Optional[int],
                 log_path: Optional[Path] = None, output: str = ""):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.log_path = log_path
        self.output = output
        if returncode is None:
            message = f"Command not found: {self.cmd[0]}. Ensure it's installed and in PATH."
        else:
            message = f"Command failed ({returncode}): {format_command(self.cmd)}"
        if log_path:
            message += f"\n--- log: {log_path} ---"
        if output:
            message += f"\n{output}"
        super().__init__(message)


def format_command(cmd: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in cmd)


def _slug(label: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", label).strip("_").lower() or "command"


def _tail(path: Path, lines: int = TAIL_LINES) -> str:
    try:
        content = path.read_text(errors="replace").splitlines()
    except OSError:
        return ""
    return "\n".join(content[-lines:])


class CommandRunner:
    """Run commands one after another, failing fast.

    Args:
        log_dir: Directory for per-command logs (``NN_<label>.log``). When
            ``None`` output goes to the parent's stdout/stderr.
        dry_run: Log commands instead of executing them.
    """

    def __init__(self, log_dir: Optional[Path] = None, dry_run: bool = False):
        self.log_dir = Path(log_dir) if log_dir else None
        self.dry_run = dry_run
        self.history: List[List[str]] = []

    def _log_path(self, label: str) -> Optional[Path]:
        if self.log_dir is None:
            return None
        self.log_dir.mkdir(parents=True, exist_ok=True)
        return self.log_dir / f"{len(self.history):02d}_{_slug(label)}.log"

    def run(self, cmd: Sequence[str], *, cwd: Optional[Path] = None,
            env: Optional[Mapping[str, str]] = None, label: Optional[str] = None) -> None:
        """Run ``cmd`` to completion, streaming its output to a step log."""
        cmd = [str(part) for part in cmd]
        self.history.append(cmd)
        where = f" (in {cwd})" if cwd else ""
        if self.dry_run:
            logger.info(f"[dry-run] {format_command(cmd)}{where}")
            return

        logger.info(f"Running: {format_command(cmd)}{where}")
        log_path = self._log_path(label or cmd[0])
        try:
            if log_path:
                with log_path.open("w") as fh:
                    fh.write(f"Command: {format_command(cmd)}\n")
                    fh.flush()
                    process = subprocess.run(
                        cmd,
                        cwd=str(cwd) if cwd else None,
                        env=dict(env) if env is not None else None,
                        stdout=fh,
                        stderr=subprocess.STDOUT,
                    )
            else:
                process = subprocess.run(
                    cmd,
                    cwd=str(cwd) if cwd else None,
                    env=dict(env) if env is not None else None,
                )
        except FileNotFoundError:
            raise CommandFailed(cmd, None, log_path)

        if process.returncode != 0:
            output = _tail(log_path) if log_path else ""
            raise CommandFailed(cmd, process.returncode, log_path, output)

    def capture(self, cmd: Sequence[str], *, cwd: Optional[Path] = None,
                env: Optional[Mapping[str, str]] = None, label: Optional[str] = None) -> str:
        """Run ``cmd`` and return its stdout. Dry runs return an empty string.

        Only stderr goes to the step log; stdout is returned to the caller.
        """
        cmd = [str(part) for part in cmd]
        self.history.append(cmd)
        if self.dry_run:
            logger.info(f"[dry-run] {format_command(cmd)}")
            return ""

        logger.info(f"Running: {format_command(cmd)}")
        try:
            process = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env is not None else None,
                text=True,
                capture_output=True,
            )
        except FileNotFoundError:
            raise CommandFailed(cmd, None)

        log_path = self._log_path(label or cmd[0])
        if log_path:
            log_path.write_text(
                f"Command: {format_command(cmd)}\n"
                f"Return Code: {process.returncode}\n"
                f"--- stderr ---\n{process.stderr}\n"
            )
        if process.returncode != 0:
            raise CommandFailed(cmd, process.returncode, log_path, process.stderr.strip())
        return process.stdout
