"""
Conversion pipeline for gifmaker.

discover -> rename -> tile -> palette -> render -> restore -> delete temp files

Restoring the original file names runs on every path once anything has been
renamed, including the early stop after a failed tile step.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from ..config import GifMakerSettings, RunConfig
from ..core.types import PipelineResult, RenameConflictError, StepResult
from ..output.logger import SimpleLogger
from ..utils.subprocess import pretty_command, run_subprocess
from .discovery import discover_files
from .ffmpeg import FFmpegCommandBuilder
from .rename import RenameManager

Runner = Callable[..., tuple[int, str]]


class GifPipeline:
    """Runs one conversion of the frames in ``directory``."""

    def __init__(
        self,
        directory: Path,
        config: RunConfig,
        settings: GifMakerSettings,
        logger: SimpleLogger,
        runner: Runner = run_subprocess,
    ):
        self.directory = directory
        self.config = config
        self.settings = settings
        self.logger = logger
        self.runner = runner
        self.builder = FFmpegCommandBuilder(config, settings)

    def run_step(self, name: str, cmd: list[str]) -> StepResult:
        """Execute one ffmpeg command in the working directory."""
        pretty = pretty_command(cmd)
        self.logger.log(pretty)
        code, output = self.runner(cmd, cwd=self.directory)
        if code != 0:
            if output:
                self.logger.log(output.rstrip())
            self.logger.error(f"{name} step failed with exit code {code}")
        return StepResult(name=name, returncode=code, command=pretty, output=output)

    def delete_temp_file(self, name: str, step: StepResult | None) -> bool:
        """Remove an intermediate artifact if the step that wrote it succeeded.

        Returns False only when deletion was attempted and failed.
        """
        if step is None or not step.ok:
            return True
        try:
            (self.directory / name).unlink()
        except OSError:
            self.logger.warning(f"failed to delete temp file. File can be deleted manually {name}")
            return False
        self.logger.info(f"tmp file {name} deleted successfully")
        return True

    def _run_commands(self, result: PipelineResult) -> None:
        result.tile = self.run_step("tile", self.builder.build_tile_cmd())
        if not result.tile.ok:
            return
        result.palette = self.run_step("palette", self.builder.build_palette_cmd())
        if not result.palette.ok:
            return
        result.render = self.run_step("render", self.builder.build_render_cmd())
        if result.render.ok:
            self.logger.success(f"{self.settings.output_name} generated")

    def run(self) -> PipelineResult:
        """Convert the frames and put every file back under its original name."""
        result = PipelineResult()

        files = discover_files(self.directory, self.config, self.settings, self.logger)
        result.file_count = len(files)
        if not files:
            self.logger.log(f"no files with type '{self.config.extension}' found. Exiting")
            return result

        manager = RenameManager(self.directory, self.logger)
        try:
            renamed = manager.apply(files, self.config.extension, self.settings.sequence_digits)
        except RenameConflictError as ex:
            self.logger.error(str(ex))
            result.error = str(ex)
            return result

        try:
            if renamed.ok:
                self._run_commands(result)
            else:
                result.error = f"{len(renamed.failed)} file(s) could not be renamed"
                self.logger.error(result.error)
        finally:
            result.restore = manager.restore()

        for name, step in ((self.settings.tile_name, result.tile), (self.settings.palette_name, result.palette)):
            if not self.delete_temp_file(name, step):
                result.undeleted.append(name)

        return result
