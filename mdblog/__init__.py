from .errors import (
    BlogError,
    ConfigError,
    DuplicatePathnameError,
    MetadataParseError,
    StartupIOError,
)
from .index import Post, PostIndex, build_index
from .server import create_app

__version__ = "0.1.0"
