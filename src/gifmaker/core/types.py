"""
Core data types for gifmaker.

Result containers passed between the rename manager, the ffmpeg runner and
the pipeline orchestration.
"""

from __future__ import annotations

from dataclasses import dataclass, field


class GifMakerError(Exception):
    """Base error for gifmaker."""


class RenameConflictError(GifMakerError):
    """A sequential name is already taken by a file that is not an input."""

    def __init__(self, conflicts: list[str]):
        self.conflicts = conflicts
        super().__init__(
            "sequential names already in use by other files: " + ", ".join(conflicts)
        )


@dataclass
class RenameReport:
    """Per-file outcome of a batch of renames."""

    succeeded: list[tuple[str, str]] = field(default_factory=list)
    failed: list[tuple[str, str, str]] = field(default_factory=list)  # (src, dst, error)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(frozen=True)
class StepResult:
    """Outcome of one ffmpeg invocation."""

    name: str
    returncode: int
    command: str
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class PipelineResult:
    """Everything a caller needs to know about one conversion run."""

    file_count: int = 0
    tile: StepResult | None = None
    palette: StepResult | None = None
    render: StepResult | None = None
    restore: RenameReport | None = None
    undeleted: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def output_created(self) -> bool:
        return self.render is not None and self.render.ok

    @property
    def exit_code(self) -> int:
        """0 when the GIF was produced or there was nothing to do, else 1."""
        if self.error is not None:
            return 1
        if self.file_count == 0:
            return 0
        return 0 if self.output_created else 1
