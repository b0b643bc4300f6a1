from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
import pytest

from gifmaker.config import GifMakerSettings, RunConfig
from gifmaker.output.logger import SimpleLogger


def write_image(path: Path, width: int = 8, height: int = 8, value: int = 120) -> Path:
    img = np.full((height, width, 3), value, dtype=np.uint8)
    ok = cv2.imwrite(str(path), img)
    assert ok, f"failed to write {path}"
    return path


class FakeRunner:
    """Stands in for run_subprocess; writes the step's output file on success."""

    def __init__(self, failures: dict[str, int] | None = None):
        self.failures = failures or {}
        self.calls: list[list[str]] = []
        self.listings: list[list[str]] = []

    def __call__(self, cmd, *, cwd=None, timeout=None):
        self.calls.append(list(cmd))
        self.listings.append(sorted(p.name for p in Path(cwd).iterdir()))
        target = cmd[-1]
        code = self.failures.get(target, 0)
        if code != 0:
            return code, f"{target}: simulated ffmpeg failure"
        (Path(cwd) / target).write_bytes(b"artifact")
        return 0, ""

    @property
    def targets(self) -> list[str]:
        return [c[-1] for c in self.calls]


@pytest.fixture
def settings(monkeypatch) -> GifMakerSettings:
    for key in ("FFMPEG_BINARY", "TILE_NAME", "PALETTE_NAME", "OUTPUT_NAME", "TILE_GRID"):
        monkeypatch.delenv(f"GIFMAKER_{key}", raising=False)
    return GifMakerSettings()


@pytest.fixture
def run_config() -> RunConfig:
    return RunConfig()


@pytest.fixture
def logger() -> SimpleLogger:
    return SimpleLogger()
