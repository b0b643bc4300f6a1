"""
External tool validation utilities for gifmaker.

This module checks that the external executables the pipeline shells out to
are reachable before any file is renamed.
"""

from __future__ import annotations

from shutil import which


def check_tools(ffmpeg_binary: str = "ffmpeg") -> tuple[bool, list[str]]:
    """Check availability of required external tools.

    Args:
        ffmpeg_binary: Name or path of the ffmpeg executable.

    Returns:
        Tuple[bool, List[str]]: (all_ok, problems). If `all_ok` is False, problems lists the issues.
    """
    problems: list[str] = []
    if which(ffmpeg_binary) is None:
        problems.append(f"{ffmpeg_binary} not found in PATH")
    return (len(problems) == 0, problems)
