"""
Simple console/file logger for gifmaker.

Every line is written as ``[HH:MM:SS] [PREFIX] message``, where the prefix is
one of ``[INFO]``, ``[WARNING]``, ``[ERROR]`` or ``[SUCCESS]`` (plain ``log``
calls carry none). Errors go to stderr, everything else to stdout.

With a log file, each logger appends a session header on creation and then
mirrors every console line into the file. Failures while writing a line to the
file are ignored so logging never stops a run.

Nothing is printed or written when the logger is disabled; the CLI ties this
to the verbose flag of the run configuration.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class SimpleLogger:
    """Simple logger that writes to console and file."""

    def __init__(self, log_file: Optional[Path] = None, enabled: bool = True):
        self.log_file = log_file
        self.enabled = enabled

        if self.log_file and self.enabled:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(f"\n{'='*60}\n")
                f.write(f"Session started: {datetime.now().isoformat()}\n")
                f.write(f"{'='*60}\n")

    def log(self, message: str, prefix: str = "", error: bool = False) -> None:
        """Log a message to console and file.

        Args:
            message: The message to log
            prefix: Optional prefix like [INFO], [ERROR], etc.
            error: Whether to write to stderr instead of stdout
        """
        if not self.enabled:
            return

        timestamp = datetime.now().strftime("%H:%M:%S")

        if prefix:
            formatted = f"[{timestamp}] {prefix} {message}"
        else:
            formatted = f"[{timestamp}] {message}"

        output = sys.stderr if error else sys.stdout
        print(formatted, file=output, flush=True)

        if self.log_file:
            try:
                with open(self.log_file, 'a', encoding='utf-8') as f:
                    f.write(formatted + '\n')
            except OSError:
                pass  # Don't fail on logging errors

    def success(self, message: str) -> None:
        """Log a success message."""
        self.log(message, prefix="[SUCCESS]")

    def error(self, message: str) -> None:
        """Log an error message."""
        self.log(message, prefix="[ERROR]", error=True)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.log(message, prefix="[WARNING]")

    def info(self, message: str) -> None:
        """Log an info message."""
        self.log(message, prefix="[INFO]")
