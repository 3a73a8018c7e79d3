from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from docmark.cli.app import app
from docmark.core.errors import RenderError
from docmark.services.crawl import CrawlService
from tests.fixtures.fake_renderer import FakeRenderer, page, url

runner = CliRunner()

SEED = url("/docs")


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer(
        {
            SEED: page("Home", "/docs/a", "/docs/b"),
            url("/docs/a"): page("A"),
        },
        failures={url("/docs/b"): RenderError("browser crashed")},
    )


@pytest.fixture
def env(tmp_path: Path) -> dict[str, str]:
    return {
        "DOCMARK_FAILURE_LOG": str(tmp_path / "failed_pages.jsonl"),
        "DOCMARK_LOG_FILE": str(tmp_path / "docmark.log"),
    }


@pytest.fixture
def created(renderer: FakeRenderer) -> Iterator[list[CrawlService]]:
    services: list[CrawlService] = []

    def build(settings, allow_private=False) -> CrawlService:
        service = CrawlService(
            settings=settings, renderer=renderer, allow_private=allow_private
        )
        services.append(service)
        return service

    with (
        patch("docmark.cli.commands.crawl.CrawlService", side_effect=build),
        patch("docmark.cli.commands.crawl.setup_logging"),
    ):
        yield services


def test_crawl_help() -> None:
    result = runner.invoke(app, ["crawl", "--help"])
    assert result.exit_code == 0
    assert "crawl" in result.output


def test_crawl_prints_tree_and_summary(
    tmp_path: Path, env: dict[str, str], created: list[CrawlService]
) -> None:
    output = tmp_path / "site"

    result = runner.invoke(app, ["crawl", SEED, "-o", str(output)], env=env)

    assert result.exit_code == 0, result.output
    assert "Crawl Summary" in result.output
    assert "Rendered: 2" in result.output
    assert "Failed: 1" in result.output
    assert "docs_index.md" in result.output
    assert (output / "docs_a.md").exists()
    assert (output / "docs_b.md").read_text().startswith("# Error scraping")


def test_crawl_passes_options(
    tmp_path: Path, env: dict[str, str], created: list[CrawlService]
) -> None:
    result = runner.invoke(
        app,
        [
            "crawl",
            SEED,
            "-o",
            str(tmp_path / "site"),
            "--depth",
            "0",
            "--scope",
            "/docs/a",
            "-c",
            "2",
        ],
        env=env,
    )

    assert result.exit_code == 0, result.output
    settings = created[0].settings
    assert settings.scope_prefix == "/docs/a"
    assert settings.max_concurrency == 2
    assert "Pages: 1" in result.output


def test_crawl_invalid_url_exits_2(
    tmp_path: Path, env: dict[str, str], created: list[CrawlService]
) -> None:
    result = runner.invoke(
        app, ["crawl", "not-a-url", "-o", str(tmp_path / "site")], env=env
    )

    assert result.exit_code == 2
    assert "Invalid request" in result.output


def test_crawl_private_requires_flag(
    tmp_path: Path, env: dict[str, str], created: list[CrawlService]
) -> None:
    result = runner.invoke(
        app,
        ["crawl", "http://localhost:3000/docs", "-o", str(tmp_path / "site")],
        env=env,
    )

    assert result.exit_code == 2
    assert created[0].allow_private is False


def test_crawl_seed_failure_exits_1(
    tmp_path: Path, env: dict[str, str], created: list[CrawlService]
) -> None:
    result = runner.invoke(
        app, ["crawl", url("/docs/b"), "-o", str(tmp_path / "site")], env=env
    )

    assert result.exit_code == 1
    assert "Crawl failed" in result.output


def test_crawl_depth_defaults_to_settings(
    tmp_path: Path,
    env: dict[str, str],
    renderer: FakeRenderer,
    created: list[CrawlService],
) -> None:
    env = {**env, "DOCMARK_MAX_DEPTH": "0"}

    result = runner.invoke(app, ["crawl", SEED, "-o", str(tmp_path / "site")], env=env)

    assert result.exit_code == 0, result.output
    assert created[0].settings.max_depth == 0
    assert "Pages: 1" in result.output
    assert renderer.calls == [SEED]
