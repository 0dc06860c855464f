from __future__ import annotations

import datetime as dt
import email.utils
import os
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .errors import MetadataParseError
from .scanner import MARKDOWN_SUFFIX
from .utils import to_utc

EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)
LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")
DOUBLE_QUOTE_RE = re.compile(r"^(?P<indent>[ \t]*)>>(?!>)(?P<rest>.*)$")


@dataclass(frozen=True)
class PostMeta:
    """Recognized front-matter keys, with their defaults.

    ``pathname`` stays ``None`` unless the file overrides it; the caller
    then falls back to the location-derived path. ``publish_date`` keeps
    the raw value and is parsed by ``parse_publish_date``.
    """

    title: str = ""
    pathname: Optional[str] = None
    publish_date: object = None
    snippet: str = ""
    cover_html: str = ""
    background: str = ""

    @classmethod
    def from_mapping(cls, meta: dict) -> "PostMeta":
        values = {}
        for field in fields(cls):
            value = meta.get(field.name)
            if value is None:
                continue
            if field.name == "publish_date":
                values[field.name] = value
            else:
                values[field.name] = str(value)
        return cls(**values)


def parse_front_matter(text: str, path: Optional[Path] = None) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end = i
            break
    if end is None:
        return {}, clean_text

    block = "\n".join(lines[1:end])
    try:
        meta = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        raise MetadataParseError(f"Invalid front matter in {path or '<text>'}: {exc}", path) from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise MetadataParseError(f"Front matter must be a mapping in {path or '<text>'}", path)

    body = "\n".join(lines[end + 1 :])
    return {str(key).strip().lower(): value for key, value in meta.items()}, body


def parse_publish_date(value: object) -> tuple[dt.datetime, bool]:
    """Return ``(timestamp, dated)``; unparseable values give the epoch."""
    if isinstance(value, dt.datetime):
        return to_utc(value), True
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time(), tzinfo=dt.timezone.utc), True
    date_value = str(value).strip() if value is not None else ""
    if not date_value:
        return EPOCH, False
    iso_value = date_value[:-1] + "+00:00" if date_value.endswith(("Z", "z")) else date_value
    try:
        return to_utc(dt.datetime.fromisoformat(iso_value)), True
    except ValueError:
        pass
    try:
        return to_utc(email.utils.parsedate_to_datetime(date_value)), True
    except (TypeError, ValueError):
        pass
    return EPOCH, False


def default_pathname(path: Path, base: Path) -> str:
    rel = Path(os.path.relpath(os.path.abspath(path), os.path.abspath(base))).as_posix()
    if rel.endswith(MARKDOWN_SUFFIX):
        rel = rel[: -len(MARKDOWN_SUFFIX)]
    return "/" + rel


def normalize_list_spacing(text: str) -> str:
    lines = text.splitlines()
    out: list[str] = []
    in_fence = False
    fence_marker = ""
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            out.append(line)
            continue
        if in_fence:
            out.append(line)
            continue
        quote_match = DOUBLE_QUOTE_RE.match(line)
        if quote_match:
            rest = quote_match.group("rest").lstrip()
            if rest:
                line = f'{quote_match.group("indent")}> {rest}'
            else:
                line = f'{quote_match.group("indent")}>'
        list_match = LIST_MARKER_RE.match(line)
        if list_match:
            if not list_match.group("indent"):
                if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                    out.append("")
        out.append(line)
    return "\n".join(out)
