#!/usr/bin/env python3
"""
gifmaker: Turn the still images of a directory into an animated GIF with ffmpeg.

The frames are renamed to a temporary numbered sequence, rendered through a
tile/palette/render ffmpeg chain, and always renamed back afterwards.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import GifMakerSettings, RunConfig, load_run_config, log_run_config
from ..core.types import PipelineResult
from ..output.logger import SimpleLogger
from ..processing.pipeline import GifPipeline
from ..tools.check import check_tools

console = Console()
err_console = Console(stderr=True)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    p = argparse.ArgumentParser(
        prog="gifmaker",
        description="Convert the images of a directory into an animated GIF using ffmpeg.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("-d", "--directory", type=Path, default=Path("."), help="Directory holding the frames")
    p.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Settings file (extension, fps, quiet marker). Defaults to config.txt in the frames directory",
    )
    p.add_argument("--log-file", type=Path, default=None, help="Also append log lines to this file")
    p.add_argument("--no-pause", action="store_true", help="Do not wait for Enter before exiting")
    p.add_argument("--check-tools", action="store_true", help="Verify external tools and exit")
    return p.parse_args(argv)


def wait_for_enter(logger: SimpleLogger) -> None:
    """Block until the user presses Enter."""
    logger.log("Press Enter to exit")
    try:
        input()
    except EOFError:
        pass


def pick_confirm(
    args: argparse.Namespace, config: RunConfig, logger: SimpleLogger
) -> Callable[[], None] | None:
    """Pause only for verbose, interactive runs."""
    if args.no_pause or not config.verbose:
        return None
    if not sys.stdin or not sys.stdin.isatty():
        return None
    return lambda: wait_for_enter(logger)


def print_summary(result: PipelineResult, settings: GifMakerSettings) -> None:
    """Show the per-step outcome as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Step")
    table.add_column("Status")
    for step in ("tile", "palette", "render"):
        outcome = getattr(result, step)
        if outcome is None:
            status = "[dim]skipped[/]"
        elif outcome.ok:
            status = "[green]ok[/]"
        else:
            status = f"[red]failed ({outcome.returncode})[/]"
        table.add_row(step, status)
    restored = result.restore
    if restored is not None:
        status = "[green]ok[/]" if restored.ok else f"[red]{len(restored.failed)} failed[/]"
        table.add_row("restore names", status)
    if result.undeleted:
        table.add_row("temp files left", ", ".join(result.undeleted))

    title = f"[bold cyan]{settings.output_name}[/bold cyan] from {result.file_count} frames"
    console.print(Panel(table, title=title, border_style="cyan", title_align="left"))


def main(argv: Sequence[str] | None = None, confirm: Callable[[], None] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Arguments to parse instead of ``sys.argv``.
        confirm: Replaces the interactive pause; called once after the
            ffmpeg steps and cleanup have run.
    """
    args = parse_args(argv)
    settings = GifMakerSettings()

    if args.check_tools:
        ok, probs = check_tools(settings.ffmpeg_binary)
        if ok:
            console.print(f"[bold green]Tools OK:[/] {settings.ffmpeg_binary}")
            return 0
        for p in probs:
            err_console.print(f"[bold red]Missing:[/] {p}")
        return 1

    directory: Path = args.directory
    if not directory.is_dir():
        err_console.print(f"[bold red]Not a directory:[/] {directory}")
        return 1

    settings_path = args.config if args.config is not None else directory / settings.settings_file
    config = load_run_config(settings_path)
    logger = SimpleLogger(args.log_file, enabled=config.verbose)
    log_run_config(config, logger)

    tools_ok, probs = check_tools(settings.ffmpeg_binary)
    if not tools_ok:
        for p in probs:
            err_console.print(f"[bold red]Missing:[/] {p}")
        return 1

    result = GifPipeline(directory, config, settings, logger).run()
    if config.verbose and result.file_count:
        print_summary(result, settings)

    # no pause when nothing was found or the tile step stopped the run
    if result.tile is not None and result.tile.ok:
        if confirm is None:
            confirm = pick_confirm(args, config, logger)
        if confirm is not None:
            confirm()

    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
