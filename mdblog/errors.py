from __future__ import annotations

from pathlib import Path
from typing import Optional


class BlogError(Exception):
    """Base class for every error raised while preparing the blog."""


class StartupIOError(BlogError):
    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class MetadataParseError(BlogError):
    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class DuplicatePathnameError(BlogError):
    def __init__(self, pathname: str, first: Path, second: Path):
        super().__init__(f"Duplicate pathname {pathname!r}: {first} and {second}")
        self.pathname = pathname
        self.first = first
        self.second = second


class ConfigError(BlogError):
    pass
