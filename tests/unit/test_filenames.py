"""Unit tests for URL to filename mapping."""

import pytest

from docmark.storage.filenames import MAX_FILENAME_BYTES, url_to_filename


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://docs.example.com/", "index.md"),
        ("https://docs.example.com", "index.md"),
        ("https://docs.example.com/docs", "docs_index.md"),
        ("https://docs.example.com/docs/", "docs_index.md"),
        ("https://docs.example.com/docs/guide/setup", "docs_guide_setup.md"),
        ("https://docs.example.com/docs/guide/setup/", "docs_guide_setup.md"),
        ("https://docs.example.com/docs/readme.md", "docs_readme.md"),
        ("https://docs.example.com/docs/api?page=2#top", "docs_api.md"),
    ],
)
def test_url_to_filename(url: str, expected: str) -> None:
    assert url_to_filename(url) == expected


def test_mapping_is_deterministic() -> None:
    url = "https://docs.example.com/docs/reference/cli"
    assert url_to_filename(url) == url_to_filename(url) == "docs_reference_cli.md"


def test_docs_root_distinct_from_site_root() -> None:
    assert url_to_filename("https://docs.example.com/docs") != url_to_filename(
        "https://docs.example.com/"
    )


def test_mapping_ignores_host() -> None:
    assert url_to_filename("https://a.example.com/docs/x") == url_to_filename(
        "http://b.example.com/docs/x"
    )


def test_never_raises_on_garbage() -> None:
    assert url_to_filename("http://[invalid") == "http:__[invalid.md"
    assert url_to_filename("") == "index.md"


def test_strips_single_leading_and_trailing_separator() -> None:
    assert url_to_filename("https://docs.example.com//docs/x//") == "_docs_x_.md"


def test_percent_encoding_kept() -> None:
    encoded = url_to_filename("https://docs.example.com/docs/a%2Fb")
    nested = url_to_filename("https://docs.example.com/docs/a/b")

    assert encoded == "docs_a%2Fb.md"
    assert encoded != nested


def test_encoded_null_byte_is_writable(tmp_path) -> None:
    name = url_to_filename("https://docs.example.com/docs/a%00b")

    assert "\x00" not in name
    (tmp_path / name).write_text("ok")


def test_control_characters_replaced() -> None:
    assert url_to_filename("docs/a\x00b\x1fc") == "docs_a_b_c.md"


class TestLongPaths:
    def test_long_path_capped_with_digest(self, tmp_path) -> None:
        url = "https://docs.example.com/docs/" + "x" * 300

        name = url_to_filename(url)

        assert len(name.encode("utf-8")) <= MAX_FILENAME_BYTES
        assert name.startswith("docs_xxx")
        assert name.endswith(".md")
        assert url_to_filename(url) == name
        (tmp_path / name).write_text("ok")

    def test_long_paths_sharing_prefix_stay_distinct(self) -> None:
        base = "https://docs.example.com/docs/" + "x" * 300

        assert url_to_filename(base + "/a") != url_to_filename(base + "/b")

    def test_multibyte_path_capped_on_bytes(self) -> None:
        name = url_to_filename("docs/" + "é" * 200)

        assert len(name.encode("utf-8")) <= MAX_FILENAME_BYTES

    def test_short_names_untouched(self) -> None:
        url = "https://docs.example.com/docs/" + "y" * 150

        assert url_to_filename(url) == "docs_" + "y" * 150 + ".md"
