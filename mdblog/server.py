from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from flask import Flask, Request, Response, current_app, request, send_from_directory

from .config import ServerSettings
from .feed import FEED_CONTENT_TYPE, build_atom
from .index import PostIndex
from .pages import build_index_page, build_post_page
from .router import Disposition, resolve, shadowed_posts
from .styles import STYLESHEET_CONTENT_TYPE, build_stylesheet

Fallback = Callable[[Request], Response]

logger = logging.getLogger(__name__)


class StaticFallback:
    """Serve files from ``root`` for paths no post or reserved route claims."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def __call__(self, req: Request) -> Response:
        return send_from_directory(self.root, req.path.lstrip("/"))


class BlogState:
    def __init__(self, index: PostIndex, settings: ServerSettings, fallback: Fallback):
        self.index = index
        self.settings = settings
        self.fallback = fallback
        self.stylesheet = build_stylesheet()


def get_state() -> BlogState:
    return current_app.extensions["mdblog"]


def create_app(
    index: PostIndex,
    settings: Optional[ServerSettings] = None,
    fallback: Optional[Fallback] = None,
) -> Flask:
    settings = settings or ServerSettings()
    app = Flask(__name__, static_folder=None)
    app.debug = settings.debug
    app.extensions["mdblog"] = BlogState(
        index, settings, fallback or StaticFallback(settings.static_dir)
    )
    for post in shadowed_posts(index):
        logger.warning("Post %s at %s is shadowed by a reserved route", post.source, post.pathname)

    @app.route("/", defaults={"subpath": ""}, methods=["GET", "HEAD"])
    @app.route("/<path:subpath>", methods=["GET", "HEAD"])
    def dispatch(subpath: str):
        state = get_state()
        route = resolve(state.index, request.path)
        if route.disposition is Disposition.STYLESHEET:
            return Response(state.stylesheet, content_type=STYLESHEET_CONTENT_TYPE)
        if route.disposition is Disposition.FEED:
            site_url = state.settings.site_url or request.host_url
            body = build_atom(state.index.ordered, site_url, state.settings.site_name, state.settings.feed_limit)
            return Response(body, content_type=FEED_CONTENT_TYPE)
        if route.disposition is Disposition.INDEX:
            return build_index_page(state.index, state.settings.site_name)
        if route.disposition is Disposition.POST:
            return build_post_page(route.post)
        logger.debug("No post for %s, delegating to static files", request.path)
        return state.fallback(request._get_current_object())

    return app
