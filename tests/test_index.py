from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from mdblog.content import EPOCH
from mdblog.errors import (
    ConfigError,
    DuplicatePathnameError,
    MetadataParseError,
    StartupIOError,
)
from mdblog.index import Post, PostIndex, build_index


def make_post(pathname: str, day: int, title: str = "") -> Post:
    return Post(
        title=title or pathname,
        pathname=pathname,
        publish_date=dt.datetime(2024, 1, day, tzinfo=dt.timezone.utc),
        snippet="",
        markdown="",
    )


def test_every_post_is_indexed_once(tmp_path, write_post):
    write_post("posts/a.md", "a", title="A", publish_date="2024-01-01")
    write_post("posts/b.md", "b", title="B", publish_date="2024-01-02")
    write_post("c.md", "c", title="C", publish_date="2024-01-03")
    write_post("README.md", "skip me")

    index = build_index(tmp_path, base=tmp_path)
    assert len(index) == 3
    assert sorted(post.title for post in index.ordered) == ["A", "B", "C"]
    assert set(index.posts) == {"/posts/a", "/posts/b", "/c"}
    for post in index.ordered:
        assert index.get(post.pathname) is post


def test_listing_is_newest_first(tmp_path, write_post):
    write_post("old.md", title="Old", publish_date="2023-05-01")
    write_post("new.md", title="New", publish_date="2024-02-01")
    write_post("mid.md", title="Mid", publish_date="2023-12-31T23:00:00Z")
    write_post("undated.md", title="Undated")

    index = build_index(tmp_path, base=tmp_path)
    assert [post.title for post in index.ordered] == ["New", "Mid", "Old", "Undated"]
    dates = [post.publish_date for post in index.ordered]
    assert all(a >= b for a, b in zip(dates, dates[1:]))
    assert index.ordered[-1].publish_date == EPOCH
    assert not index.ordered[-1].dated


def test_equal_dates_keep_scan_order():
    posts = [make_post("/b", 1), make_post("/a", 1), make_post("/c", 2)]
    index = PostIndex(posts)
    assert [post.pathname for post in index.ordered] == ["/c", "/b", "/a"]


def test_round_trip_fields(tmp_path, write_post):
    write_post("hello.md", "# Hi", title="Hello", publish_date="2024-01-05")
    post = build_index(tmp_path, base=tmp_path).get("/hello")
    assert post.title == "Hello"
    assert post.publish_date == dt.datetime(2024, 1, 5, tzinfo=dt.timezone.utc)
    assert post.markdown == "# Hi"
    assert post.snippet == ""
    assert post.cover_html == ""
    assert post.background == ""


def test_missing_title_is_empty(tmp_path, write_post):
    write_post("untitled.md", "body only")
    post = build_index(tmp_path, base=tmp_path).get("/untitled")
    assert post.title == ""
    assert post.markdown == "body only"


def test_default_pathname_is_relative_to_base(tmp_path, write_post):
    write_post("posts/a.md", "x", title="A")
    index = build_index(tmp_path / "posts", base=tmp_path)
    assert list(index.posts) == ["/posts/a"]


def test_pathname_override(tmp_path, write_post):
    write_post("drafts/2024/long-file-name.md", "x", title="A", pathname="/short")
    index = build_index(tmp_path, base=tmp_path)
    assert list(index.posts) == ["/short"]
    assert index.get("/drafts/2024/long-file-name") is None


def test_optional_fields_are_carried(tmp_path, write_post):
    write_post(
        "styled.md",
        "text",
        title="Styled",
        snippet="A short note",
        cover_html="'<img src=\"/cover.png\">'",
        background="'#fafafa'",
    )
    post = build_index(tmp_path, base=tmp_path).get("/styled")
    assert post.snippet == "A short note"
    assert post.cover_html == '<img src="/cover.png">'
    assert post.background == "#fafafa"


def test_duplicate_pathname_keeps_ghost_entry(tmp_path, write_post):
    write_post("a.md", "first", title="First", pathname="/same", publish_date="2024-01-01")
    write_post("b.md", "second", title="Second", pathname="/same", publish_date="2024-01-02")

    index = build_index(tmp_path, base=tmp_path)
    assert len(index.posts) == 1
    assert index.get("/same").title == "Second"
    assert [post.title for post in index.ordered] == ["Second", "First"]


def test_duplicate_pathname_can_be_dropped(tmp_path, write_post):
    write_post("a.md", "first", title="First", pathname="/same")
    write_post("b.md", "second", title="Second", pathname="/same")

    index = build_index(tmp_path, base=tmp_path, duplicates="drop")
    assert [post.title for post in index.ordered] == ["Second"]
    assert index.get("/same").title == "Second"


def test_duplicate_pathname_can_be_rejected(tmp_path, write_post):
    write_post("a.md", "first", title="First", pathname="/same")
    write_post("b.md", "second", title="Second", pathname="/same")

    with pytest.raises(DuplicatePathnameError) as excinfo:
        build_index(tmp_path, base=tmp_path, duplicates="reject")
    assert excinfo.value.pathname == "/same"
    assert excinfo.value.first == tmp_path / "a.md"
    assert excinfo.value.second == tmp_path / "b.md"


def test_unknown_duplicate_policy():
    with pytest.raises(ConfigError):
        PostIndex([], duplicates="merge")


def test_malformed_front_matter_aborts_build(tmp_path, write_post):
    write_post("good.md", "ok", title="Good")
    (tmp_path / "bad.md").write_text("---\ntitle: [oops\n---\nbody", encoding="utf-8")
    with pytest.raises(MetadataParseError) as excinfo:
        build_index(tmp_path, base=tmp_path)
    assert excinfo.value.path == tmp_path / "bad.md"


def test_invalid_utf8_aborts_build(tmp_path):
    (tmp_path / "binary.md").write_bytes(b"\xff\xfe\x00bad")
    with pytest.raises(StartupIOError):
        build_index(tmp_path, base=tmp_path)


def test_missing_root_aborts_build(tmp_path):
    with pytest.raises(StartupIOError):
        build_index(tmp_path / "nope", base=tmp_path)


def test_index_is_read_only(tmp_path, write_post):
    write_post("a.md", "a", title="A")
    index = build_index(tmp_path, base=tmp_path)
    with pytest.raises(TypeError):
        index.posts["/b"] = index.get("/a")
    with pytest.raises(AttributeError):
        index.ordered.append(index.get("/a"))


def test_symlinked_root_keeps_location_pathname(tmp_path):
    content = tmp_path / "elsewhere" / "content"
    content.mkdir(parents=True)
    (content / "a.md").write_text("---\ntitle: A\n---\nbody", encoding="utf-8")
    site = tmp_path / "site"
    site.mkdir()
    (site / "posts").symlink_to(content, target_is_directory=True)

    index = build_index(site / "posts", base=site)
    assert list(index.posts) == ["/posts/a"]


def test_unreadable_file_aborts_build(tmp_path, write_post, monkeypatch):
    write_post("a.md", "a", title="A")

    def denied(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "read_bytes", denied)
    with pytest.raises(StartupIOError):
        build_index(tmp_path, base=tmp_path)


def test_horizontal_rule_opening_does_not_abort_build(tmp_path):
    (tmp_path / "rule.md").write_text("---\n\nJust a rule.\n", encoding="utf-8")
    post = build_index(tmp_path, base=tmp_path).get("/rule")
    assert post.title == ""
    assert post.markdown == "---\n\nJust a rule.\n"
