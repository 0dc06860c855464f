from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

import markdown

from .content import normalize_list_spacing

TEMPLATES_DIR = Path(__file__).parent / "templates"
MD_EXTENSIONS = ["fenced_code", "tables", "toc", "codehilite"]
MD_EXTENSION_CONFIGS = {"codehilite": {"css_class": "codehilite", "guess_lang": False}}
PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def render_markdown(text: str) -> str:
    # Markdown instances keep per-document state, so each call gets its own.
    md = markdown.Markdown(extensions=MD_EXTENSIONS, extension_configs=MD_EXTENSION_CONFIGS)
    return md.convert(normalize_list_spacing(text))


def render_template(template: str, **context: str) -> str:
    def repl(match: re.Match) -> str:
        key = match.group(1)
        return context.get(key, match.group(0))

    return PLACEHOLDER_RE.sub(repl, template)


@lru_cache(maxsize=None)
def read_template(name: str) -> str:
    return (TEMPLATES_DIR / name).read_text(encoding="utf-8")
