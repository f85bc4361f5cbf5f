from __future__ import annotations

from sitewatch.sites import parse_sites, read_sites


def test_parse_sites_skips_blanks_and_comments() -> None:
    text = "http://a.example\n\n  # staging\n  http://b.example  \r\nhttp://c.example"
    assert parse_sites(text) == ["http://a.example", "http://b.example", "http://c.example"]


def test_read_sites_from_file(tmp_path) -> None:
    path = tmp_path / "sites.txt"
    path.write_text("http://ok.example\nhttp://down.example\n", encoding="utf-8")
    assert read_sites(path) == ["http://ok.example", "http://down.example"]


def test_missing_file_is_empty_list(tmp_path) -> None:
    assert read_sites(tmp_path / "nope.txt") == []


def test_directory_path_is_empty_list(tmp_path) -> None:
    assert read_sites(tmp_path) == []
