from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, NamedTuple

from .errors import StartupIOError

MARKDOWN_SUFFIX = ".md"
README_NAME = "readme.md"

logger = logging.getLogger(__name__)


class ContentFile(NamedTuple):
    path: Path
    data: bytes


def is_readme(path: Path) -> bool:
    return path.name.lower() == README_NAME


def is_markdown_file(path: Path) -> bool:
    return path.name.endswith(MARKDOWN_SUFFIX) and path.is_file() and not path.is_symlink()


def list_markdown_files(root: Path) -> Iterator[Path]:
    """Yield markdown files under ``root`` in sorted, depth-first order.

    README files are skipped whatever their case. Directories are walked
    lazily; an unreadable directory aborts the walk with ``StartupIOError``.
    """
    if not root.exists():
        raise StartupIOError(f"Content directory not found: {root}", root)
    if not root.is_dir():
        raise StartupIOError(f"Content root is not a directory: {root}", root)

    def on_error(exc: OSError) -> None:
        raise StartupIOError(f"Cannot read directory {exc.filename}: {exc.strerror}", root) from exc

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if is_readme(path):
                logger.debug("Skipping %s", path)
                continue
            if is_markdown_file(path):
                yield path


def scan(root: Path) -> Iterator[ContentFile]:
    for path in list_markdown_files(root):
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise StartupIOError(f"Cannot read {path}: {exc.strerror}", path) from exc
        yield ContentFile(path, data)
