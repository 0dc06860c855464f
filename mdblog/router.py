from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional

from .index import Post, PostIndex

STYLESHEET_PATH = "/static/gfm.css"
FEED_PATH = "/feed"
INDEX_PATH = "/"
RESERVED_PATHS = (STYLESHEET_PATH, FEED_PATH, INDEX_PATH)


class Disposition(Enum):
    STYLESHEET = "stylesheet"
    FEED = "feed"
    INDEX = "index"
    POST = "post"
    FALLBACK = "fallback"


class Route(NamedTuple):
    disposition: Disposition
    post: Optional[Post] = None


def resolve(index: PostIndex, pathname: str) -> Route:
    """Map a request path to what should answer it.

    Reserved assets come first, then the index page, then an exact post
    match. A post whose pathname equals a reserved path is never served.
    """
    if pathname == STYLESHEET_PATH:
        return Route(Disposition.STYLESHEET)
    if pathname == FEED_PATH:
        return Route(Disposition.FEED)
    if pathname == INDEX_PATH:
        return Route(Disposition.INDEX)
    post = index.get(pathname)
    if post is not None:
        return Route(Disposition.POST, post)
    return Route(Disposition.FALLBACK)


def shadowed_posts(index: PostIndex) -> list[Post]:
    return [index.posts[path] for path in RESERVED_PATHS if path in index.posts]
