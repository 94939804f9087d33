"""Utility helpers shared by pdfbuildx modules."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Union

PathLike = Union[str, os.PathLike[str]]


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def configure_logging(verbose: bool = False) -> None:
    """Set the level of the ``pdfbuildx`` logger tree."""

    get_logger("pdfbuildx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def resolve_path(path: PathLike | None) -> Path:
    if path is None:
        raise ValueError("Path must not be None")
    return Path(path).expanduser().resolve()


def ensure_output_directory(path: Path) -> None:
    """Ensure the parent directory of ``path`` exists."""
    path.parent.mkdir(parents=True, exist_ok=True)


def read_stream(stream: IO[bytes] | bytes | bytearray) -> bytes:
    """Return the bytes of *stream*, reading it when it is file-like."""

    if isinstance(stream, (bytes, bytearray, memoryview)):
        return bytes(stream)
    return stream.read()


__all__ = [
    "PathLike",
    "get_logger",
    "configure_logging",
    "resolve_path",
    "ensure_output_directory",
    "read_stream",
]
