"""
Configuration for gifmaker.

Two layers live here:

- ``GifMakerSettings``: the fixed parameters of the ffmpeg invocations and the
  artifact file names, overridable via environment variables with the
  ``GIFMAKER_`` prefix (e.g. ``GIFMAKER_TILE_GRID=8x8``).
- ``RunConfig``: the per-run settings read from the optional settings file
  (extension, frame rate, verbosity). It is built once at startup and passed
  explicitly to every component.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .output.logger import SimpleLogger

DEFAULT_EXTENSION = "png"
DEFAULT_FRAME_RATE = "30"
DEFAULT_SETTINGS_FILE = Path("config.txt")

EXTENSION_PATTERN = re.compile(r"^[a-zA-Z0-9]*$")
FRAME_RATE_PATTERN = re.compile(r"^[0-9]*$")

# extension, frame rate, verbosity opt-out
MAX_SETTINGS_LINES = 3


# =============================================================================
# TOOL SETTINGS
# =============================================================================

class GifMakerSettings(BaseSettings):
    """
    Fixed ffmpeg parameters and artifact names.

    All settings can be overridden via environment variables with GIFMAKER_ prefix.
    Example: GIFMAKER_PALETTE_MAX_COLORS=32
    """

    model_config = SettingsConfigDict(env_prefix="GIFMAKER_", case_sensitive=False)

    ffmpeg_binary: Annotated[str, Field(
        min_length=1,
        description="ffmpeg executable name or path"
    )] = "ffmpeg"

    settings_file: Annotated[Path, Field(
        description="Settings file read from the working directory"
    )] = DEFAULT_SETTINGS_FILE

    tile_name: Annotated[str, Field(
        min_length=1,
        description="Temporary contact-sheet image"
    )] = "tile.png"

    palette_name: Annotated[str, Field(
        min_length=1,
        description="Temporary palette image"
    )] = "palette.png"

    output_name: Annotated[str, Field(
        min_length=1,
        description="Final animated output"
    )] = "output.gif"

    sequence_digits: Annotated[int, Field(
        ge=1,
        le=10,
        description="Zero-padding width of sequential frame names"
    )] = 6

    tile_grid: Annotated[str, Field(
        description="Grid layout of the contact sheet (COLSxROWS)"
    )] = "10x10"

    tile_color: Annotated[str, Field(
        min_length=1,
        description="Fill color for unused tile cells"
    )] = "black"

    palette_max_colors: Annotated[int, Field(
        ge=2,
        le=256,
        description="Colors in the palette generated from the tile"
    )] = 64

    render_max_colors: Annotated[int, Field(
        ge=2,
        le=256,
        description="Colors in the palette regenerated while rendering"
    )] = 256

    transparency_color: Annotated[str, Field(
        description="Color reserved for transparency in the final render"
    )] = "ffffff"

    @field_validator("tile_grid")
    @classmethod
    def validate_tile_grid(cls, v):
        """Ensure the grid is written as COLSxROWS."""
        if not re.fullmatch(r"[1-9][0-9]*x[1-9][0-9]*", v):
            raise ValueError(f"tile_grid must look like 10x10, got: {v}")
        return v

    @field_validator("transparency_color")
    @classmethod
    def validate_transparency_color(cls, v):
        """Ensure the color is a 6-digit hex value."""
        if not re.fullmatch(r"[0-9a-fA-F]{6}", v):
            raise ValueError(f"transparency_color must be a 6-digit hex color, got: {v}")
        return v.lower()

    @property
    def artifact_names(self) -> set[str]:
        """Names of files this tool writes into the working directory."""
        return {self.tile_name, self.palette_name, self.output_name}


# =============================================================================
# RUN CONFIGURATION
# =============================================================================

class RunConfig(BaseModel):
    """Per-run settings: input extension, frame rate and verbosity."""

    model_config = ConfigDict(frozen=True)

    extension: str = DEFAULT_EXTENSION
    frame_rate: str = DEFAULT_FRAME_RATE
    verbose: bool = True

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v):
        """Extensions are non-empty, alphanumeric and stored lowercase."""
        if not v or not EXTENSION_PATTERN.fullmatch(v):
            raise ValueError(f"extension must be alphanumeric, got: {v!r}")
        return v.lower()

    @field_validator("frame_rate")
    @classmethod
    def validate_frame_rate(cls, v):
        """Frame rates are non-empty digit strings."""
        if not v or not FRAME_RATE_PATTERN.fullmatch(v):
            raise ValueError(f"frame_rate must be numeric, got: {v!r}")
        return v


def parse_settings_lines(lines: list[str]) -> RunConfig:
    """Build a RunConfig from the lines of a settings file.

    Line 1 is the extension, line 2 the frame rate, and any non-empty line 3
    turns verbose logging off. Invalid values keep their defaults; lines past
    the third are ignored.
    """
    extension = DEFAULT_EXTENSION
    frame_rate = DEFAULT_FRAME_RATE
    verbose = True

    for index, raw in enumerate(lines[:MAX_SETTINGS_LINES]):
        value = raw.rstrip("\r\n").strip(" ")
        if index == 0:
            value = value.lower()
            if value and EXTENSION_PATTERN.fullmatch(value):
                extension = value
        elif index == 1:
            if value and FRAME_RATE_PATTERN.fullmatch(value):
                frame_rate = value
        elif value:
            verbose = False

    return RunConfig(extension=extension, frame_rate=frame_rate, verbose=verbose)


def load_run_config(path: Path) -> RunConfig:
    """Read the settings file at ``path``; a missing or unreadable file yields defaults."""
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            lines = f.read().splitlines()
    except OSError:
        return RunConfig()
    return parse_settings_lines(lines)


def log_run_config(config: RunConfig, logger: SimpleLogger) -> None:
    """Print the effective run parameters."""
    logger.log("running with parameters:")
    logger.log(f"    filetype {config.extension}")
    logger.log(f"    fps {config.frame_rate}")
    logger.log(f"    debug {str(config.verbose).lower()}")
