"""
Temporary sequential renaming of input frames.

ffmpeg reads the frames through a printf-style pattern (``%06d.png``), so the
accepted files are renamed to ``000000.png``, ``000001.png``, ... for the
duration of the run and moved back afterwards.

Both directions go through hidden staging names first. Inputs that already
carry sequential names (``000001.png`` sorting to index 0, for instance)
would otherwise overwrite each other in a chain of direct renames.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from ..core.types import RenameConflictError, RenameReport
from ..output.logger import SimpleLogger

STAGING_PREFIX = ".gifmaker-staging"


def sort_names(names: Iterable[str]) -> list[str]:
    """Sort case-insensitively; ties keep their input order."""
    return sorted(names, key=str.lower)


def sequence_pattern(extension: str, digits: int = 6) -> str:
    """printf-style pattern ffmpeg uses to read the renamed frames."""
    return f"%0{digits}d.{extension}"


def sequential_names(count: int, extension: str, digits: int = 6) -> list[str]:
    """Return ``count`` contiguous names starting at zero."""
    pattern = sequence_pattern(extension, digits)
    return [pattern % i for i in range(count)]


def plan_renames(names: Iterable[str], extension: str, digits: int = 6) -> dict[str, str]:
    """Map each sequential name to the original it will replace."""
    ordered = sort_names(names)
    return dict(zip(sequential_names(len(ordered), extension, digits), ordered))


class RenameManager:
    """Moves frames to sequential names and back.

    The manager tracks where every original currently lives on disk, so a
    restore only ever touches files that were actually moved.
    """

    def __init__(self, directory: Path, logger: SimpleLogger):
        self.directory = directory
        self.logger = logger
        self._locations: dict[str, str] = {}  # original -> current name
        self._staging_tag = f"{STAGING_PREFIX}-{os.getpid()}"

    @property
    def mapping(self) -> dict[str, str]:
        """Current name -> original name for every tracked file."""
        return {current: original for original, current in self._locations.items()}

    def _file_key(self, name: str) -> tuple[int, int] | None:
        try:
            st = os.stat(self.directory / name)
        except OSError:
            return None
        return st.st_dev, st.st_ino

    def find_conflicts(self, plan: dict[str, str]) -> list[str]:
        """Sequential names already taken by files that are not part of ``plan``."""
        inputs = {self._file_key(original) for original in plan.values()}
        conflicts = []
        for new_name in plan:
            key = self._file_key(new_name)
            if key is not None and key not in inputs:
                conflicts.append(new_name)
        return conflicts

    def _move_all(self, moves: list[tuple[str, str]]) -> RenameReport:
        """Move tracked originals to new names in two phases.

        Args:
            moves: (original, destination) pairs; the source is the original's
                current location.
        """
        report = RenameReport()
        staged: list[tuple[str, str, str, str]] = []

        for i, (original, dst) in enumerate(moves):
            src = self._locations.get(original, original)
            stage = f"{self._staging_tag}-{i:06d}"
            try:
                os.rename(self.directory / src, self.directory / stage)
            except OSError as ex:
                report.failed.append((src, dst, str(ex)))
                continue
            self._locations[original] = stage
            staged.append((original, src, stage, dst))

        for original, src, stage, dst in staged:
            try:
                os.rename(self.directory / stage, self.directory / dst)
            except OSError as ex:
                report.failed.append((src, dst, str(ex)))
                continue
            self._locations[original] = dst
            report.succeeded.append((src, dst))

        return report

    def apply(self, names: Iterable[str], extension: str, digits: int = 6) -> RenameReport:
        """Rename ``names`` to contiguous sequential names.

        Raises:
            RenameConflictError: If a sequential name belongs to a file that is
                not an input. Nothing is renamed in that case.
        """
        plan = plan_renames(names, extension, digits)
        conflicts = self.find_conflicts(plan)
        if conflicts:
            raise RenameConflictError(conflicts)

        report = self._move_all([(original, new_name) for new_name, original in plan.items()])
        if report.succeeded:
            self.logger.info(
                f"Found files to convert into gif. Renaming them temporarily {self.mapping}"
            )
        for src, dst, err in report.failed:
            self.logger.warning(f"failed to rename {src} to {dst}: {err}")
        return report

    def restore(self) -> RenameReport:
        """Move every tracked file back to its original name."""
        pending = [(original, original) for original, current in self._locations.items() if current != original]
        report = self._move_all(pending)

        for original, current in list(self._locations.items()):
            if current == original:
                del self._locations[original]

        for src, dst, err in report.failed:
            self.logger.warning(f"failed to restore {src} to {dst}: {err}. Rename it manually")
        if report.succeeded and report.ok:
            self.logger.info(f"restored {len(report.succeeded)} original file names")
        return report
