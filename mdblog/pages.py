from __future__ import annotations

import html
from typing import Iterable

from .index import Post, PostIndex
from .render import read_template, render_markdown, render_template
from .router import FEED_PATH, STYLESHEET_PATH
from .utils import iso_date, pretty_date

FEED_ICON = (
    '<svg class="feed-icon" xmlns="http://www.w3.org/2000/svg" viewBox="0 0 20 20" fill="currentColor">'
    '<path d="M5 3a1 1 0 000 2c5.523 0 10 4.477 10 10a1 1 0 102 0C17 8.373 11.627 3 5 3z"></path>'
    '<path d="M4 9a1 1 0 011-1 7 7 0 017 7 1 1 0 11-2 0 5 5 0 00-5-5 1 1 0 01-1-1z'
    'M3 15a2 2 0 114 0 2 2 0 01-4 0z"></path>'
    "</svg>"
)


def build_date(post: Post) -> str:
    if not post.dated:
        return ""
    return f'<time datetime="{iso_date(post.publish_date)}">{pretty_date(post.publish_date)}</time>'


def build_page(title: str, content: str, head: str = "", body_attrs: str = "") -> str:
    return render_template(
        read_template("base.html"),
        title=html.escape(title),
        stylesheet=STYLESHEET_PATH,
        feed=FEED_PATH,
        head=head,
        body_attrs=body_attrs,
        content=content,
    )


def build_post_cards(posts: Iterable[Post]) -> str:
    cards = []
    for post in posts:
        title = html.escape(post.title)
        snippet = html.escape(post.snippet)
        url = html.escape(post.pathname, quote=True)
        cards.append(
            '<div class="post-card">'
            f'<div class="post-date"><p>{build_date(post)}</p></div>'
            f'<a class="post-link" href="{url}">'
            f'<h3 class="post-title">{title}</h3>'
            f'<div class="post-snippet">{snippet}</div>'
            "</a>"
            "</div>"
        )
    return "\n".join(cards)


def build_index_page(index: PostIndex, site_name: str) -> str:
    content = (
        '<div class="container">'
        f'<h1 class="site-title">{html.escape(site_name)}</h1>'
        f'<div class="post-list">{build_post_cards(index.ordered)}</div>'
        "</div>"
    )
    return build_page(site_name, content)


def build_post_page(post: Post) -> str:
    title = html.escape(post.title)
    head = [f'<meta property="og:title" content="{html.escape(post.title, quote=True)}">']
    if post.snippet:
        head.insert(0, f'<meta name="description" content="{html.escape(post.snippet, quote=True)}">')
    body_attrs = ""
    if post.background:
        body_attrs = f' style="{html.escape(f"background: {post.background}", quote=True)}"'
    cover = f'<div class="post-cover">{post.cover_html}</div>' if post.cover_html else ""
    content = (
        '<div class="page">'
        f"{cover}"
        '<article class="container post">'
        f'<h1 class="post-title">{title}</h1>'
        '<div class="post-meta"><p>'
        f"{build_date(post)}"
        f'<a href="{FEED_PATH}" title="Atom Feed">{FEED_ICON}</a>'
        "</p></div>"
        "<hr>"
        f'<div class="markdown-body">{render_markdown(post.markdown)}</div>'
        "</article>"
        "</div>"
    )
    return build_page(post.title, content, head="\n".join(head), body_attrs=body_attrs)
