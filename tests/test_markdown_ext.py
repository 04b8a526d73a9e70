"""Tests for the media blocks markdown extension."""

import markdown

from mediablocks.markdown_ext import MediaBlocksExtension, MediaBlocksPreprocessor


def render_markdown(text, logger=None):
    """Helper to render markdown with the media blocks extension."""
    md = markdown.Markdown(extensions=["extra", MediaBlocksExtension()])
    if logger is not None:
        md.preprocessors["mediablocks"].logger = logger
    return md.convert(text)


class TestMediaBlocksExtension:
    """Tests for MediaBlocksExtension."""

    def test_registers_preprocessor(self):
        """The preprocessor runs before raw HTML is stashed."""
        md = markdown.Markdown(extensions=[MediaBlocksExtension()])
        assert "mediablocks" in md.preprocessors
        registry = md.preprocessors
        assert registry.get_index_for_name("mediablocks") < registry.get_index_for_name(
            "html_block"
        )

    def test_renders_picture_block(self):
        """A picture callout becomes a picture element."""
        text = '> [!picture] | --img class="rounded"\n> ![[images/foo.png|Nice]]\n'
        result = render_markdown(text)
        assert '<img src="images/foo.png" alt="Nice" class="rounded">' in result
        assert "[!picture]" not in result
        assert "<blockquote>" not in result

    def test_renders_figure_block(self):
        """A figure callout becomes a figure with a rendered caption."""
        text = (
            "Intro paragraph.\n\n"
            '> [!figure] | --wrap class="wide"\n'
            "> ![[bar.jpg|The *bar*]]\n"
            "> More text.\n\n"
            "Outro paragraph.\n"
        )
        result = render_markdown(text)
        assert '<figure class="wide">' in result
        assert '<img src="bar.jpg" alt="The *bar*">' in result
        assert "<em>bar</em>" in result
        assert "<p>More text.</p>" in result
        assert "<p>Intro paragraph.</p>" in result
        assert "<p>Outro paragraph.</p>" in result

    def test_bare_media_line(self):
        """A line holding only an embed is rendered as a picture."""
        result = render_markdown("![[cat_photo.png]]\n")
        assert '<img src="cat_photo.png" alt="cat photo">' in result

    def test_regular_quotes_untouched(self):
        """Quotes that are not media callouts stay blockquotes."""
        result = render_markdown("> Just a quote\n")
        assert "<blockquote>" in result
        assert "Just a quote" in result

    def test_malformed_block_is_reported(self, mock_logger):
        """A callout without an embed is kept and warned about."""
        result = render_markdown("> [!picture]\n> no image\n", logger=mock_logger)
        assert "<blockquote>" in result
        assert "[!picture]" in result
        assert mock_logger.warnings == [
            "MediaBlocks: Picture block without wikilink "
            "(picture block at line 1), left unchanged"
        ]


class TestMediaBlocksPreprocessor:
    def test_run_keeps_line_structure(self, mock_logger):
        processor = MediaBlocksPreprocessor(logger=mock_logger)
        lines = processor.run(["Hello", "", "world"])
        assert lines == ["Hello", "", "world"]

    def test_default_logger(self):
        from mediablocks.logging import ComponentLogger

        assert isinstance(MediaBlocksPreprocessor().logger, ComponentLogger)
