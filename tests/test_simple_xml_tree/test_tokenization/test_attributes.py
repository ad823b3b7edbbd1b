"""Tests for attribute splitting and parsing."""

import pytest

from simple_xml_tree.shared.errors import FailureKind, MalformedAttributes
from simple_xml_tree.tokenization import (
    make_attribute_value_safe,
    parse_attribute_tokens,
    split_attributes,
)


class TestSplitAttributes:
    """Test splitting an opening tag body into name and tokens."""

    def test_split_simple_attributes(self):
        """Test plain attributes are split on whitespace."""
        name, tokens = split_attributes('item id="1" kind="a"')

        assert name == "item"
        assert tokens == ['id="1"', 'kind="a"']

    def test_split_tag_without_attributes(self):
        """Test a bare tag name gives no tokens."""
        assert split_attributes("item") == ("item", [])

    def test_quoted_value_with_spaces_is_rejoined(self):
        """Test tokens split inside quotes are merged back together."""
        name, tokens = split_attributes('item title="a long title" id="2"')

        assert name == "item"
        assert tokens == ['title="a long title"', 'id="2"']

    def test_rejoin_keeps_original_whitespace(self):
        """Test the whitespace between rejoined parts is preserved."""
        _, tokens = split_attributes('item title="a   b"')
        assert tokens == ['title="a   b"']

    def test_single_quoted_value_with_spaces(self):
        """Test single quotes are balanced the same way."""
        _, tokens = split_attributes("item title='x y z'")
        assert tokens == ["title='x y z'"]

    def test_apostrophe_inside_double_quotes(self):
        """Test a stray apostrophe inside a double-quoted value is harmless."""
        _, tokens = split_attributes('item title="it\'s here" id="3"')
        assert tokens == ['title="it\'s here"', 'id="3"']

    def test_unclosed_quote_raises(self):
        """Test an unclosed quote is reported as malformed attributes."""
        with pytest.raises(MalformedAttributes) as exc_info:
            split_attributes('item title="never closed')

        assert exc_info.value.kind is FailureKind.MALFORMED_ATTRIBUTES
        assert "item" in str(exc_info.value)


class TestParseAttributeTokens:
    """Test turning key=value tokens into an attribute map."""

    def test_quotes_are_stripped(self):
        """Test surrounding quotes are removed from values."""
        attributes = parse_attribute_tokens(['id="1"', "name='x y'"])
        assert attributes == {"id": "1", "name": "x y"}

    def test_value_split_on_first_equals_only(self):
        """Test '=' inside a value stays in the value."""
        assert parse_attribute_tokens(['expr="a=b"']) == {"expr": "a=b"}

    def test_empty_tokens_are_skipped(self):
        """Test empty tokens do not produce attributes."""
        assert parse_attribute_tokens(["", 'id="1"', ""]) == {"id": "1"}

    def test_last_duplicate_wins(self):
        """Test a repeated key keeps its last value."""
        assert parse_attribute_tokens(['id="1"', 'id="2"']) == {"id": "2"}

    def test_insertion_order_is_preserved(self):
        """Test attribute order follows the tag."""
        attributes = parse_attribute_tokens(['b="2"', 'a="1"', 'c="3"'])
        assert list(attributes) == ["b", "a", "c"]

    def test_token_without_equals_raises(self):
        """Test a bare word is rejected."""
        with pytest.raises(MalformedAttributes, match="has no value"):
            parse_attribute_tokens(["checked"])


class TestMakeAttributeValueSafe:
    """Test reduction of text to a safe attribute value."""

    def test_spaces_become_underscores(self):
        """Test spaces are replaced."""
        assert make_attribute_value_safe("hello big world") == "hello_big_world"

    def test_unsafe_characters_are_removed(self):
        """Test punctuation and quotes are dropped."""
        assert make_attribute_value_safe('a"b<c>d-e.f!') == "abcdef"

    def test_safe_value_unchanged(self):
        """Test an already safe value is returned as is."""
        assert make_attribute_value_safe("Item_42") == "Item_42"
