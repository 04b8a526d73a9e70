"""Tests for attribute sanitizing."""

import pytest

from mediablocks.sanitize import (
    escape_attr,
    is_allowed_attribute,
    sanitize_attributes,
    strip_quotes,
)


class TestEscapeAttr:
    def test_escapes_html_specials(self):
        assert escape_attr('5 < 6 & "ok"') == "5 &lt; 6 &amp; &quot;ok&quot;"

    def test_leaves_apostrophes(self):
        assert escape_attr("it's") == "it's"


class TestStripQuotes:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ('"wide hero"', "wide hero"),
            ("'wide'", "wide"),
            ("wide", "wide"),
            ("\"mixed'", "\"mixed'"),
            ('"', '"'),
            ('""', ""),
        ],
    )
    def test_strip_quotes(self, value, expected):
        assert strip_quotes(value) == expected


class TestAllowList:
    @pytest.mark.parametrize(
        "key",
        ["class", "id", "style", "title", "role", "aria-label", "data-x_y:z", "data-1"],
    )
    def test_allowed(self, key):
        assert is_allowed_attribute(key)

    @pytest.mark.parametrize(
        "key", ["onclick", "src", "href", "classname", "aria-", "data-", "Class"]
    )
    def test_rejected(self, key):
        assert not is_allowed_attribute(key)


class TestSanitizeAttributes:
    """Tests for sanitize_attributes()."""

    def test_quoted_value_from_text(self):
        assert sanitize_attributes('class="wide hero"') == 'class="wide hero"'

    def test_single_quotes_are_normalized(self):
        assert sanitize_attributes("id='main'") == 'id="main"'

    def test_unquoted_value(self):
        assert sanitize_attributes("class=wide") == 'class="wide"'

    def test_drops_disallowed_keys(self):
        result = sanitize_attributes('class="a" onclick="alert(1)" data-role="x"')
        assert result == 'class="a" data-role="x"'

    def test_escapes_values(self):
        result = sanitize_attributes('title="a <b> & \'c\'"')
        assert result == "title=\"a &lt;b&gt; &amp; 'c'\""

    def test_boolean_attribute(self):
        assert sanitize_attributes("data-zoomable hidden") == "data-zoomable"

    def test_splits_on_first_equals(self):
        assert sanitize_attributes('style="a=b"') == 'style="a=b"'

    def test_accepts_token_list(self):
        assert sanitize_attributes(['class="x"', "src=y"]) == 'class="x"'

    def test_empty_input(self):
        assert sanitize_attributes("") == ""
        assert sanitize_attributes(None) == ""
        assert sanitize_attributes([]) == ""
