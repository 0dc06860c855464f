from __future__ import annotations

import datetime as dt
import html
from typing import Sequence

from .index import Post
from .router import FEED_PATH
from .utils import iso_date, join_url

FEED_CONTENT_TYPE = "application/atom+xml"


def build_atom(posts: Sequence[Post], site_url: str, site_name: str, feed_limit: int) -> str:
    site_url = site_url.rstrip("/")
    updated = iso_date(posts[0].publish_date) if posts else iso_date(dt.datetime.now(dt.timezone.utc))
    entries = []
    for post in posts[: max(0, feed_limit)]:
        link = html.escape(join_url(site_url, post.pathname), quote=True)
        entries.append(
            "\n".join(
                [
                    "<entry>",
                    f"<title>{html.escape(post.title)}</title>",
                    f'<link href="{link}" />',
                    f"<id>{link}</id>",
                    f"<updated>{iso_date(post.publish_date)}</updated>",
                    f"<summary>{html.escape(post.snippet)}</summary>",
                    "</entry>",
                ]
            )
        )
    site_link = html.escape(site_url, quote=True)
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<feed xmlns="http://www.w3.org/2005/Atom">',
            f"<title>{html.escape(site_name)}</title>",
            f"<id>{site_link}/</id>",
            f"<updated>{updated}</updated>",
            f'<link href="{site_link}{FEED_PATH}" rel="self" />',
            f'<link href="{site_link}/" />',
            "\n".join(entries),
            "</feed>",
        ]
    )
