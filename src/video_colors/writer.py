"""
JSON output for color tracks.

Files have the form ``{"colors": [[r, g, b], ...]}``.
"""

import json
import logging
from pathlib import Path
from typing import Union

from .models import ColorTrack


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def default_output_path(input_path: PathLike) -> Path:
    """Output path used when none is given: the input path with '.json' appended"""
    return Path(f"{input_path}.json")


def _preview(colors: ColorTrack) -> str:
    head = ', '.join(str(list(c)) for c in colors[:3])
    tail = ', '.join(str(list(c)) for c in colors[-2:])
    return f"[{head}, ... {tail}]"


def write_colors_to_file(colors: ColorTrack, path: PathLike):
    """
    Write a ColorTrack as JSON.

    Args:
        colors: Ordered colors
        path: Destination file
    """
    path = Path(path)
    logger.debug(f"Writing {len(colors)} color(s) to {path}: {_preview(colors)}")

    with open(path, 'w') as f:
        json.dump({'colors': [list(c) for c in colors]}, f)


def load_colors(path: PathLike) -> ColorTrack:
    """Read a ColorTrack written by write_colors_to_file"""
    with open(path, 'r') as f:
        data = json.load(f)

    return [tuple(c) for c in data.get('colors', [])]
