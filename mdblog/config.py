from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import yaml

from .errors import ConfigError
from .index import DUPLICATE_POLICIES
from .utils import parse_bool, parse_int

try:
    import tomllib as toml
except ImportError:
    import tomli as toml


@dataclass(frozen=True)
class ServerSettings:
    root: Path = Path(".")
    static_dir: Path = Path(".")
    host: str = "127.0.0.1"
    port: int = 8000
    site_name: str = "Blog"
    site_url: str = ""
    feed_limit: int = 20
    duplicates: str = "keep"
    debug: bool = False

    @property
    def url(self) -> str:
        host = "localhost" if self.host in {"0.0.0.0", "127.0.0.1"} else self.host
        return f"http://{host}:{self.port}/"


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data


def resolve_settings(args: object) -> ServerSettings:
    root = Path(getattr(args, "root", ".") or ".")
    static_value = getattr(args, "static", "") or ""
    port = parse_int(getattr(args, "port", 8000), -1)
    if not 0 <= port <= 65535:
        raise ConfigError(f"Invalid port: {getattr(args, 'port', None)!r}")
    duplicates = str(getattr(args, "duplicates", "keep") or "keep").strip().lower()
    if duplicates not in DUPLICATE_POLICIES:
        raise ConfigError(
            f"Invalid duplicates policy {duplicates!r}; expected one of {', '.join(DUPLICATE_POLICIES)}"
        )
    return ServerSettings(
        root=root,
        static_dir=Path(static_value) if static_value else root,
        host=str(getattr(args, "host", "127.0.0.1") or "127.0.0.1"),
        port=port,
        site_name=str(getattr(args, "site_name", "Blog") or "Blog"),
        site_url=str(getattr(args, "site_url", "") or "").strip(),
        feed_limit=max(0, parse_int(getattr(args, "feed_limit", 20), 20)),
        duplicates=duplicates,
        debug=parse_bool(getattr(args, "debug", False)),
    )
