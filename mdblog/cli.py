from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import ServerSettings, load_config, resolve_settings
from .errors import BlogError
from .index import DUPLICATE_POLICIES, PostIndex, build_index
from .server import create_app
from .utils import parse_bool, parse_int

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def build_parser(argv: Optional[Sequence[str]] = None) -> argparse.ArgumentParser:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    def cfg_value(key: str, default: object) -> object:
        value = config.get(key)
        return default if value is None else value

    def cfg_str(key: str, default: str) -> str:
        return str(cfg_value(key, default))

    def cfg_bool(key: str, default: bool) -> bool:
        return parse_bool(cfg_value(key, default))

    def cfg_int(key: str, default: int) -> int:
        return parse_int(cfg_value(key, default), default)

    parser = argparse.ArgumentParser(description="Serve a directory of Markdown posts as a blog.")
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--root", default=cfg_str("root", "."), help="Directory scanned for Markdown posts.")
    parser.add_argument(
        "--static",
        default=cfg_str("static", ""),
        help="Directory served for paths that match no post. Defaults to --root.",
    )
    parser.add_argument("--host", default=cfg_str("host", "127.0.0.1"), help="Interface to listen on.")
    parser.add_argument("--port", type=int, default=cfg_int("port", 8000), help="Port to listen on.")
    parser.add_argument("--site-name", default=cfg_str("site_name", "Blog"), help="Site title.")
    parser.add_argument(
        "--site-url",
        default=cfg_str("site_url", ""),
        help="Public site URL used for feed links. Defaults to the request host.",
    )
    parser.add_argument(
        "--feed-limit",
        type=int,
        default=cfg_int("feed_limit", 20),
        help="Maximum number of entries in the Atom feed.",
    )
    parser.add_argument(
        "--duplicates",
        choices=DUPLICATE_POLICIES,
        default=cfg_str("duplicates", "keep"),
        help="What to do when two posts share a pathname.",
    )
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("debug", False),
        help="Enable debug logging and the Flask debugger.",
    )
    return parser


def prepare(settings: ServerSettings) -> PostIndex:
    logger.info("Scanning %s for posts", settings.root.resolve())
    return build_index(settings.root, duplicates=settings.duplicates)


def main(argv: Optional[Sequence[str]] = None) -> None:
    try:
        args = build_parser(argv).parse_args(argv)
        settings = resolve_settings(args)
    except BlogError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO, format=LOG_FORMAT)

    try:
        index = prepare(settings)
    except BlogError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    app = create_app(index, settings)
    print(settings.url)
    app.run(settings.host, settings.port, debug=settings.debug, use_reloader=False)


if __name__ == "__main__":
    main()
