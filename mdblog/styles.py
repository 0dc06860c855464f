from __future__ import annotations

from pygments.formatters import HtmlFormatter

from .render import read_template

STYLESHEET_CONTENT_TYPE = "text/css"


def build_stylesheet(style: str = "default") -> str:
    formatter = HtmlFormatter(style=style, cssclass="codehilite")
    highlight_css = formatter.get_style_defs(".markdown-body .codehilite")
    return f"{read_template('gfm.css')}\n{highlight_css}\n"
