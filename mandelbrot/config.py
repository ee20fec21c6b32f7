"""Render configuration and parsers for its command-line values."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, TypeVar

T = TypeVar("T")

DEFAULT_OUTPUT = "mandelbrot.png"
DEFAULT_BOUNDS = (1000, 750)
DEFAULT_UPPER_LEFT = complex(-1.2, 0.35)
DEFAULT_LOWER_RIGHT = complex(-1.0, 0.20)


def default_threads() -> int:
    return max(1, os.cpu_count() or 1)


@dataclass(frozen=True)
class RenderConfig:
    """Everything a single render needs, built once at startup."""

    output: Path = Path(DEFAULT_OUTPUT)
    bounds: tuple[int, int] = DEFAULT_BOUNDS
    upper_left: complex = DEFAULT_UPPER_LEFT
    lower_right: complex = DEFAULT_LOWER_RIGHT
    threads: int = 1
    backend: str = "numpy"
    device: Optional[str] = None
    image_format: Optional[str] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.threads < 1:
            object.__setattr__(self, "threads", 1)

    @property
    def width(self) -> int:
        return self.bounds[0]

    @property
    def height(self) -> int:
        return self.bounds[1]


def parse_pair(text: str, separator: str, convert: Callable[[str], T]) -> tuple[T, T]:
    """Parse ``"<a><separator><b>"`` into a pair of converted values."""

    left, sep, right = text.partition(separator)
    if not sep:
        raise ValueError(f"expected two values separated by '{separator}'")
    return convert(left), convert(right)


def parse_bounds(text: str) -> tuple[int, int]:
    width, height = parse_pair(text, "x", int)
    if width <= 0 or height <= 0:
        raise ValueError("dimensions must be positive")
    return width, height


def parse_complex(text: str) -> complex:
    re, im = parse_pair(text, ",", float)
    return complex(re, im)


def parse_threads(text: str) -> int:
    return max(1, int(text))
