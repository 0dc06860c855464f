from __future__ import annotations

import datetime as dt

from mdblog.index import Post, PostIndex
from mdblog.router import (
    FEED_PATH,
    STYLESHEET_PATH,
    Disposition,
    resolve,
    shadowed_posts,
)


def make_post(pathname: str) -> Post:
    return Post(
        title=pathname,
        pathname=pathname,
        publish_date=dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc),
        snippet="",
        markdown="",
    )


def test_reserved_routes_take_precedence():
    index = PostIndex([make_post(STYLESHEET_PATH), make_post(FEED_PATH), make_post("/")])
    assert resolve(index, STYLESHEET_PATH).disposition is Disposition.STYLESHEET
    assert resolve(index, FEED_PATH).disposition is Disposition.FEED
    assert resolve(index, "/").disposition is Disposition.INDEX


def test_post_match_is_exact():
    post = make_post("/posts/a")
    index = PostIndex([post])
    route = resolve(index, "/posts/a")
    assert route.disposition is Disposition.POST
    assert route.post is post
    assert resolve(index, "/posts/a/").disposition is Disposition.FALLBACK
    assert resolve(index, "/posts/A").disposition is Disposition.FALLBACK


def test_unmatched_path_falls_back():
    route = resolve(PostIndex([]), "/nonexistent.png")
    assert route.disposition is Disposition.FALLBACK
    assert route.post is None


def test_shadowed_posts_are_reported():
    hidden = make_post(STYLESHEET_PATH)
    index = PostIndex([hidden, make_post("/visible")])
    assert shadowed_posts(index) == [hidden]
