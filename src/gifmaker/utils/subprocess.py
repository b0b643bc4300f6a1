"""Subprocess and external command utilities."""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path


def pretty_command(cmd: list[str]) -> str:
    """Return a shell-quoted string equivalent of ``cmd``."""
    return " ".join(shlex.quote(c) for c in cmd)


def run_subprocess(cmd: list[str], *, cwd: Path | None = None, timeout: int | None = None) -> tuple[int, str]:
    """Run a command to completion and capture its combined output.

    Args:
        cmd: Command and arguments list
        cwd: Working directory for the child process
        timeout: Optional timeout in seconds (None waits indefinitely)

    Returns:
        Tuple of (return_code, combined stdout/stderr). A command that cannot
        be started reports -1 and the OS error text.
    """
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=timeout,
        )
        return result.returncode, result.stdout or ""
    except subprocess.TimeoutExpired:
        return -1, f"Command timed out after {timeout} seconds"
    except OSError as e:
        return -1, str(e)
