from __future__ import annotations

from pathlib import Path

import pytest


def front_matter(**meta: str) -> str:
    lines = ["---"]
    lines.extend(f"{key}: {value}" for key, value in meta.items())
    lines.append("---")
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_post(tmp_path: Path):
    def write(rel: str, body: str = "", **meta: str) -> Path:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        text = (front_matter(**meta) if meta else "") + body
        path.write_text(text, encoding="utf-8")
        return path

    return write
