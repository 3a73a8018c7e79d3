"""Unit tests for HTML content and link extraction."""

from docmark.processing.extractor import (
    blocks_to_markdown,
    extract_blocks,
    extract_links,
)
from docmark.services.models import BlockKind, ContentBlock


class TestExtractBlocks:
    def test_blocks_in_document_order(self) -> None:
        html = """
        <main>
          <h1>Title</h1>
          <p>First   paragraph
             wraps.</p>
          <h2>Section</h2>
          <pre>  indented
  code
</pre>
          <h3>Sub</h3>
        </main>
        """
        blocks = extract_blocks(html)

        assert blocks == [
            ContentBlock(BlockKind.HEADING, "Title", 1),
            ContentBlock(BlockKind.PARAGRAPH, "First paragraph wraps."),
            ContentBlock(BlockKind.HEADING, "Section", 2),
            ContentBlock(BlockKind.CODE, "  indented\n  code"),
            ContentBlock(BlockKind.HEADING, "Sub", 3),
        ]

    def test_empty_and_unsupported_blocks_dropped(self) -> None:
        html = "<main><h1> </h1><p>\n</p><h4>Deep</h4><div>Loose</div><p>Kept</p></main>"

        assert extract_blocks(html) == [ContentBlock(BlockKind.PARAGRAPH, "Kept")]

    def test_content_root_prefers_main(self) -> None:
        html = (
            "<body><nav><p>Menu</p></nav>"
            "<main><p>Body text</p></main>"
            "<footer><p>Copyright</p></footer></body>"
        )

        assert [b.text for b in extract_blocks(html)] == ["Body text"]

    def test_falls_back_to_body(self) -> None:
        html = "<html><body><h2>Only</h2><p>Text</p></body></html>"

        assert [b.text for b in extract_blocks(html)] == ["Only", "Text"]

    def test_inline_markup_flattened(self) -> None:
        html = "<article><p>Run <code>make</code> then <a href='/x'>read</a>.</p></article>"

        assert extract_blocks(html)[0].text == "Run make then read."

    def test_nested_block_taken_once(self) -> None:
        html = "<main><pre><p>inside</p></pre></main>"

        blocks = extract_blocks(html)

        assert len(blocks) == 1
        assert blocks[0].kind is BlockKind.CODE

    def test_empty_html(self) -> None:
        assert extract_blocks("") == []


class TestExtractLinks:
    def test_resolves_and_deduplicates(self) -> None:
        html = """
        <a href="/docs/a">A</a>
        <a href="b">B</a>
        <a href="/docs/a#section">A again</a>
        <a href="https://other.example.com/x">Other</a>
        <a href="mailto:team@example.com">Mail</a>
        <a href="javascript:void(0)">JS</a>
        <a>No href</a>
        """
        links = extract_links(html, "https://docs.example.com/docs/guide/")

        assert links == [
            "https://docs.example.com/docs/a",
            "https://docs.example.com/docs/guide/b",
            "https://other.example.com/x",
        ]

    def test_skips_unparseable_href(self) -> None:
        html = '<a href="http://[broken">bad</a><a href="/docs/ok">ok</a>'

        assert extract_links(html, "https://docs.example.com/") == [
            "https://docs.example.com/docs/ok"
        ]


def test_blocks_to_markdown() -> None:
    blocks = [
        ContentBlock(BlockKind.HEADING, "Title", 1),
        ContentBlock(BlockKind.PARAGRAPH, "Text"),
        ContentBlock(BlockKind.HEADING, "Part", 3),
        ContentBlock(BlockKind.CODE, "x = 1"),
    ]

    assert blocks_to_markdown(blocks) == "# Title\n\nText\n\n### Part\n\n```\nx = 1\n```"
