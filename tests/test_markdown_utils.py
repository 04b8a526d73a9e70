"""Tests for mediablocks markdown utilities."""

from mediablocks import markdown_utils


class TestParseMarkdownFile:
    """Tests for parse_markdown_file() function."""

    def test_reads_frontmatter(self, tmp_path):
        page = tmp_path / "page.md"
        page.write_text("---\ntitle: Hello\npublic: true\n---\n\nBody text\n")

        meta, content = markdown_utils.parse_markdown_file(page)

        assert meta == {"title": "Hello", "public": True}
        assert content == "Body text"

    def test_without_frontmatter(self, tmp_path):
        page = tmp_path / "page.md"
        page.write_text("Just body\n")

        meta, content = markdown_utils.parse_markdown_file(page)

        assert meta == {}
        assert content == "Just body"

    def test_invalid_yaml_warns(self, tmp_path, capsys):
        page = tmp_path / "page.md"
        page.write_text("---\ntitle: [unclosed\n---\nBody\n")

        assert markdown_utils.parse_markdown_file(page) == ({}, "")
        assert "YAML parsing error" in capsys.readouterr().err


class TestRenderMarkdown:
    """Tests for render_markdown() function."""

    def test_basic_markdown(self):
        html = markdown_utils.render_markdown("Some *text* here.")
        assert html == "<p>Some <em>text</em> here.</p>"

    def test_typographic_quotes(self):
        html = markdown_utils.render_markdown('He said "hi" -- twice')
        assert "&ldquo;hi&rdquo;" in html
        assert "&ndash;" in html

    def test_wikilinks_use_base_url(self):
        html = markdown_utils.render_markdown("See [[Ideas]]", base_url="/docs/")
        assert 'href="/docs/Ideas/"' in html

    def test_renders_picture_blocks(self):
        html = markdown_utils.render_markdown(
            "> [!picture]\n> ![[assets/my_image-01.png]]\n"
        )
        assert '<img src="assets/my_image-01.png" alt="my image 01">' in html

    def test_converter_is_cached_per_base_url(self):
        first = markdown_utils.get_markdown_converter("/")
        assert markdown_utils.get_markdown_converter("/") is first
        assert markdown_utils.get_markdown_converter("/other/") is not first

    def test_converter_state_is_reset(self):
        markdown_utils.render_markdown("# Title")
        html = markdown_utils.render_markdown("# Title")
        assert html.count('id="title"') == 1
        assert 'id="title_1"' not in html
