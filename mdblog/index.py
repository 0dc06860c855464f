from __future__ import annotations

import datetime as dt
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .content import PostMeta, default_pathname, parse_front_matter, parse_publish_date
from .errors import ConfigError, DuplicatePathnameError, StartupIOError
from .scanner import ContentFile, scan

DUPLICATE_POLICIES = ("keep", "reject", "drop")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Post:
    title: str
    pathname: str
    publish_date: dt.datetime
    snippet: str
    markdown: str
    cover_html: str = ""
    background: str = ""
    dated: bool = True
    source: Optional[Path] = None


class PostIndex:
    """Posts keyed by request path, plus the newest-first listing.

    Both views are fixed at construction; there is no way to add or
    remove a post afterwards.
    """

    def __init__(self, posts: Iterable[Post], duplicates: str = "keep"):
        if duplicates not in DUPLICATE_POLICIES:
            raise ConfigError(f"Unknown duplicates policy: {duplicates!r}")
        by_path: dict[str, Post] = {}
        ordered: list[Post] = []
        for post in posts:
            previous = by_path.get(post.pathname)
            if previous is not None:
                if duplicates == "reject":
                    raise DuplicatePathnameError(post.pathname, previous.source, post.source)
                logger.warning(
                    "Pathname %s of %s shadows %s", post.pathname, post.source, previous.source
                )
                if duplicates == "drop":
                    ordered = [item for item in ordered if item is not previous]
            by_path[post.pathname] = post
            ordered.append(post)
        ordered.sort(key=lambda post: post.publish_date, reverse=True)
        self._posts: Mapping[str, Post] = MappingProxyType(by_path)
        self._ordered: tuple[Post, ...] = tuple(ordered)

    @property
    def posts(self) -> Mapping[str, Post]:
        return self._posts

    @property
    def ordered(self) -> tuple[Post, ...]:
        return self._ordered

    def get(self, pathname: str) -> Optional[Post]:
        return self._posts.get(pathname)

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self):
        return iter(self._ordered)


def load_post(item: ContentFile, base: Path) -> Post:
    try:
        text = item.data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise StartupIOError(f"{item.path} is not valid UTF-8: {exc}", item.path) from exc
    meta, body = parse_front_matter(text, item.path)
    fields = PostMeta.from_mapping(meta)
    publish_date, dated = parse_publish_date(fields.publish_date)
    return Post(
        title=fields.title,
        pathname=fields.pathname or default_pathname(item.path, base),
        publish_date=publish_date,
        snippet=fields.snippet,
        markdown=body,
        cover_html=fields.cover_html,
        background=fields.background,
        dated=dated,
        source=item.path,
    )


def build_index(root: Path, base: Optional[Path] = None, duplicates: str = "keep") -> PostIndex:
    """Scan ``root`` and build the index.

    Default pathnames are taken relative to ``base`` (the current working
    directory when omitted). Any unreadable file or malformed front matter
    aborts the build.
    """
    base = base if base is not None else Path.cwd()
    started = time.perf_counter()

    def load_all():
        for item in scan(root):
            post = load_post(item, base)
            logger.debug("Indexed %s as %s", item.path, post.pathname)
            yield post

    index = PostIndex(load_all(), duplicates=duplicates)
    elapsed = time.perf_counter() - started
    logger.info("Indexed %d posts from %s in %.2fs.", len(index), root, elapsed)
    return index
