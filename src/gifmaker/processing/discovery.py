"""
File discovery and validation for gifmaker.

Candidates are the regular files of the working directory whose name ends
with the configured extension. Each candidate must decode as an image to be
accepted; size differences against the first decoded image only produce a
warning.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

import cv2

from ..config import GifMakerSettings, RunConfig
from ..output.logger import SimpleLogger


def image_dimensions(path: Path) -> tuple[int, int] | None:
    """Return (width, height) of a decodable image, or None when it cannot be decoded.

    Args:
        path (Path): Image file path.

    Returns:
        Optional[Tuple[int, int]]: Width and height in pixels.
    """
    try:
        img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    except cv2.error:
        return None
    if img is None:
        return None
    h, w = img.shape[:2]
    return w, h


def list_candidates(directory: Path, extension: str, exclude: Iterable[str] = ()) -> list[str]:
    """Return names of regular files in ``directory`` ending with ``.extension``.

    Matching is case-insensitive. Names in ``exclude`` are skipped. The result
    is sorted by name so that the reference image is stable between runs.

    Raises:
        OSError: If the directory cannot be listed.
    """
    suffix = "." + extension.lower()
    skipped = set(exclude)
    names: list[str] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.name in skipped or not entry.name.lower().endswith(suffix):
                continue
            if entry.is_file():
                names.append(entry.name)
    names.sort()
    return names


def validate_files(directory: Path, names: Iterable[str], logger: SimpleLogger) -> list[str]:
    """Keep the names that decode as images, warning about size mismatches."""
    accepted: list[str] = []
    reference: tuple[int, int] | None = None
    first_img = ""

    for name in names:
        dims = image_dimensions(directory / name)
        if dims is None:
            logger.warning(f"failed decode image of file {name} skipping it from conversion")
            continue
        if reference is None:
            reference = dims
            first_img = name
        elif dims != reference:
            logger.warning(
                "Output might look unexpected because all files do not match in size. "
                f"Difference in size with {first_img} and {name}"
            )
        accepted.append(name)

    return accepted


def discover_files(
    directory: Path, config: RunConfig, settings: GifMakerSettings, logger: SimpleLogger
) -> list[str]:
    """List and validate the input frames of ``directory``.

    A directory that cannot be listed is reported and treated as empty.
    """
    try:
        candidates = list_candidates(directory, config.extension, exclude=settings.artifact_names)
    except OSError as ex:
        logger.error(f"cannot list {directory}: {ex}")
        return []
    return validate_files(directory, candidates, logger)
