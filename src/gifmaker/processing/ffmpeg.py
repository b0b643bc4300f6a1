"""
FFmpeg command building module for gifmaker.

The GIF is produced by three ffmpeg invocations:

1. tile: every frame of the numbered sequence is laid out on one contact
   sheet, so palette statistics see the whole animation in a single image.
2. palette: a reduced palette is generated from that contact sheet.
3. render: the sequence is read again at the configured frame rate and
   quantized into the final GIF.
"""

from __future__ import annotations

from ..config import GifMakerSettings, RunConfig
from .rename import sequence_pattern


class FFmpegCommandBuilder:
    """Builder class for constructing the tile/palette/render commands."""

    def __init__(self, config: RunConfig, settings: GifMakerSettings):
        self.config = config
        self.settings = settings

    @property
    def input_pattern(self) -> str:
        """printf-style pattern matching the sequential frame names."""
        return sequence_pattern(self.config.extension, self.settings.sequence_digits)

    def _base(self) -> list[str]:
        return [self.settings.ffmpeg_binary, "-y", "-hide_banner"]

    def build_tile_cmd(self) -> list[str]:
        """Tile all frames into a single RGB contact-sheet image."""
        s = self.settings
        return self._base() + [
            "-i", self.input_pattern,
            "-vf", f"format=rgb24,tile={s.tile_grid}:color={s.tile_color}",
            "-frames:v", "1",
            s.tile_name,
        ]

    def build_palette_cmd(self) -> list[str]:
        """Generate a palette from the contact sheet, reserving one transparent slot."""
        s = self.settings
        return self._base() + [
            "-i", s.tile_name,
            "-vf", f"palettegen=max_colors={s.palette_max_colors}:reserve_transparent=1:stats_mode=single",
            s.palette_name,
        ]

    def build_render_cmd(self) -> list[str]:
        """Render the final GIF at the configured frame rate."""
        s = self.settings
        filter_chain = (
            "split[s0][s1];"
            f"[s0]palettegen=max_colors={s.render_max_colors}:stats_mode=single"
            f":reserve_transparent=on:transparency_color={s.transparency_color}[p];"
            "[s1][p]paletteuse=new=1"
        )
        return self._base() + [
            "-framerate", self.config.frame_rate,
            "-i", self.input_pattern,
            "-i", s.palette_name,
            "-filter_complex", filter_chain,
            s.output_name,
        ]
