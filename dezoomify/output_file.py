"""Choosing and reserving the name of the output image file."""

from __future__ import annotations

import logging
import os
import re
import unicodedata
from pathlib import Path

from .vec2d import Vec2d

logger = logging.getLogger(__name__)

_FORBIDDEN = re.compile(r'[/\\?%*:|"<>]')
_WHITESPACE = re.compile(r"\s+")
_MAX_NAME_BYTES = 200
_JPEG_MAX_DIMENSION = 2**16 - 1


def sanitize(name: str) -> str:
    """Turn arbitrary text into a readable name that is valid as a file name."""
    cleaned = "".join(
        "_" if unicodedata.category(char).startswith("C") else char for char in name
    )
    cleaned = _FORBIDDEN.sub("_", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip(" ._")
    encoded = cleaned.encode("utf-8")[:_MAX_NAME_BYTES]
    return encoded.decode("utf-8", errors="ignore").rstrip(" ._")


def reserve_output_file(path: str | os.PathLike[str]) -> None:
    """Create ``path`` as an empty file; raises FileExistsError if it already exists."""
    with open(path, "x"):
        pass


def get_outname(
    outfile: str | os.PathLike[str] | None,
    zoom_name: str | None,
    base_dir: str | os.PathLike[str],
    size: Vec2d | None,
) -> Path:
    """The path to save the image to.

    An explicit ``outfile`` is used as given, getting an extension if it has none.
    Otherwise a name is built from ``zoom_name`` in ``base_dir``, with a numeric
    suffix if a file of that name already exists. Images too large for JPEG are
    saved as PNG.
    """
    fits_in_jpg = None if size is None else max(size.x, size.y) <= _JPEG_MAX_DIMENSION
    extension = "jpg" if fits_in_jpg is True else "png"
    if outfile is not None:
        path = Path(outfile)
        if path.suffix:
            if fits_in_jpg is False and path.suffix in (".jpg", ".jpeg"):
                logger.error("This file is too large to be saved as JPEG")
            return path
        return path.with_suffix(f".{extension}")
    base = sanitize(zoom_name) if zoom_name is not None else ""
    path = (Path(base_dir) / (base or "dezoomified")).with_suffix(f".{extension}")
    stem, suffix = path.stem, path.suffix.lstrip(".")
    counter = 1
    while path.exists():
        logger.info("File %s already exists. Trying another file name...", path)
        path = path.with_name(f"{stem}_{counter:04}.{suffix}")
        counter += 1
    return path