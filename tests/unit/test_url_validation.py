"""Unit tests for seed URL validation."""

import pytest

from docmark.core.url_validation import validate_url


@pytest.mark.parametrize(
    "url",
    [
        "https://docs.example.com/docs/",
        "http://docs.example.com",
        "HTTPS://Docs.Example.com/guide",
        "https://8.8.8.8/docs",
        "https://docs.example.com:8443/docs",
        "https://1password.example.com/docs",
    ],
)
def test_accepts_public_http_urls(url: str) -> None:
    assert validate_url(url)


@pytest.mark.parametrize(
    "url",
    [
        None,
        "",
        "/docs/intro",
        "docs.example.com/docs",
        "ftp://docs.example.com/docs",
        "javascript:alert(1)",
        "http://",
        "http://docs.example.com:notaport/",
        "http://[invalid",
        "http://metadata.google.internal/computeMetadata/v1/",
    ],
)
def test_rejects_malformed_or_blocked(url) -> None:
    assert not validate_url(url)
    assert not validate_url(url, allow_private=True)


@pytest.mark.parametrize(
    "url",
    [
        "http://localhost:3000/docs",
        "http://127.0.0.1/docs",
        "http://10.0.0.5/docs",
        "http://192.168.1.10/docs",
        "http://169.254.169.254/latest/meta-data/",
        "http://[::1]/docs",
        "http://2130706433/",
        "http://0x7f000001/",
        "http://0177.0.0.1/",
    ],
)
def test_private_addresses_need_opt_in(url: str) -> None:
    assert not validate_url(url)


def test_allow_private_accepts_local_docs() -> None:
    assert validate_url("http://localhost:3000/docs", allow_private=True)
    assert validate_url("http://127.0.0.1:8000/docs", allow_private=True)
