"""Tests for the quote-aware option tokenizer."""

from mediablocks.tokenizer import QuoteState, split_options, tokenize


class TestQuoteState:
    def test_toggles_own_kind(self):
        state = QuoteState()
        state.feed('"')
        assert state.double and not state.single
        state.feed('"')
        assert not state.active

    def test_other_kind_ignored_inside_quotes(self):
        state = QuoteState()
        state.feed('"')
        state.feed("'")
        assert state.double
        assert not state.single


class TestSplitOptions:
    """Tests for split_options()."""

    def test_empty_and_none(self):
        assert split_options(None, for_figure=False) == ("", "")
        assert split_options("", for_figure=True) == ("", "")

    def test_no_wrap_passes_everything_through(self):
        text = '--img class="rounded" --picture decoding="async"'
        assert split_options(text, for_figure=False) == (text, "")

    def test_figure_wrap_is_removed_from_pass_through(self):
        passthrough, wrap = split_options('--wrap class="wide hero"', for_figure=True)
        assert passthrough == ""
        assert wrap == 'class="wide hero"'

    def test_picture_wrap_becomes_parent(self):
        passthrough, wrap = split_options('--wrap class="x"', for_figure=False)
        assert passthrough == '--parent class="x"'
        assert wrap == 'class="x"'

    def test_wrap_segment_ends_at_next_option(self):
        text = '--img class="a" --wrap class="b" id=c --picture loading="lazy"'
        passthrough, wrap = split_options(text, for_figure=True)
        assert passthrough == '--img class="a" --picture loading="lazy"'
        assert wrap == 'class="b" id=c'

    def test_parent_keeps_original_position(self):
        text = '--img class="a" --wrap class="b" --picture loading="lazy"'
        passthrough, _ = split_options(text, for_figure=False)
        assert passthrough == (
            '--img class="a" --parent class="b" --picture loading="lazy"'
        )

    def test_dashes_inside_quotes_do_not_end_segment(self):
        text = '--wrap title="a --b c" --img class="x"'
        passthrough, wrap = split_options(text, for_figure=True)
        assert wrap == 'title="a --b c"'
        assert passthrough == '--img class="x"'

    def test_wrap_inside_quotes_is_plain_text(self):
        text = '--img alt="see --wrap here"'
        assert split_options(text, for_figure=True) == (text, "")

    def test_wrap_must_be_a_whole_token(self):
        text = "--wrapper x --img-wrap y"
        assert split_options(text, for_figure=True) == (text, "")

    def test_multiple_wrap_segments_accumulate(self):
        text = '--wrap class="a" --img x=1 --wrap id="b"'
        passthrough, wrap = split_options(text, for_figure=True)
        assert wrap == 'class="a" id="b"'
        assert passthrough == "--img x=1"

    def test_empty_wrap_segment_is_dropped(self):
        passthrough, wrap = split_options("--wrap --img x=1", for_figure=False)
        assert wrap == ""
        assert passthrough == "--img x=1"

    def test_unterminated_quote_runs_to_end(self):
        text = '--wrap title="unterminated --img x=1'
        passthrough, wrap = split_options(text, for_figure=True)
        assert wrap == 'title="unterminated --img x=1'
        assert passthrough == ""

    def test_apostrophe_inside_double_quotes(self):
        text = """--wrap title="it's fine" --img class="x\""""
        passthrough, wrap = split_options(text, for_figure=True)
        assert wrap == """title="it's fine\""""
        assert passthrough == '--img class="x"'


class TestTokenize:
    """Tests for tokenize()."""

    def test_splits_on_whitespace(self):
        assert tokenize("a b\tc") == ["a", "b", "c"]

    def test_keeps_quoted_spans_together(self):
        assert tokenize('class="wide hero" id=\'main one\' hidden') == [
            'class="wide hero"',
            "id='main one'",
            "hidden",
        ]

    def test_empty(self):
        assert tokenize("") == []
        assert tokenize(None) == []
        assert tokenize("   ") == []

    def test_unterminated_quote(self):
        assert tokenize('a="b c') == ['a="b c']
