"""Tests for sibling splitting and well-formedness checks."""

import pytest

from simple_xml_tree.shared.errors import (
    CannotIdentifyRoot,
    IncompleteTree,
    UnbalancedCloseTag,
)
from simple_xml_tree.tree import OpenTagCounter, check_tree, get_parallel_roots, is_tree
from simple_xml_tree.tree.splitter import preview, tag_fragments


def nested_document(depth: int, width: int) -> str:
    """Build a correctly nested document mixing pairs and self-closing tags."""
    if depth == 0:
        return '<leaf n="0">v</leaf><empty/>'
    inner = "".join(nested_document(depth - 1, width) for _ in range(width))
    return f'<level d="{depth}">{inner}<level/></level>'


class TestOpenTagCounter:
    """Test the per-name open tag counter."""

    def test_open_and_close(self):
        """Test counts go up and back down."""
        counter = OpenTagCounter()
        counter.open("a")
        counter.open("a")
        assert counter.counts == {"a": 2}
        assert not counter.is_settled

        counter.close("a")
        counter.close("a")
        assert counter.is_settled
        assert counter.is_balanced

    def test_close_untracked_raises(self):
        """Test closing a name never seen raises UnbalancedCloseTag."""
        counter = OpenTagCounter()
        with pytest.raises(UnbalancedCloseTag) as exc_info:
            counter.close("b")
        assert exc_info.value.tag_name == "b"

    def test_track_registers_zero(self):
        """Test self-closing tags are tracked with a zero count."""
        counter = OpenTagCounter()
        counter.track("br")
        counter.track("br")

        assert counter.counts == {"br": 0}
        counter.close("br")
        assert counter.counts == {"br": -1}

    def test_negative_count_is_settled_but_not_balanced(self):
        """Test over-closing settles the scan but fails the final check."""
        counter = OpenTagCounter()
        counter.open("a")
        counter.close("a")
        counter.close("a")

        assert counter.is_settled
        assert not counter.is_balanced
        with pytest.raises(IncompleteTree, match="a=-1"):
            counter.ensure_balanced()


class TestGetParallelRoots:
    """Test splitting back-to-back sibling fragments."""

    def test_single_root(self):
        """Test one element gives one fragment."""
        assert get_parallel_roots("<a><b/></a>") == ["<a><b/></a>"]

    def test_sibling_roots(self):
        """Test siblings are split in order."""
        text = '<item id="1"/><item id="2">hi</item><group><x/></group>'
        assert get_parallel_roots(text) == [
            '<item id="1"/>',
            '<item id="2">hi</item>',
            "<group><x/></group>",
        ]

    def test_same_named_siblings(self):
        """Test identical sibling tags are separated."""
        assert get_parallel_roots("<a></a><a></a>") == ["<a></a>", "<a></a>"]

    def test_nested_same_named_tags(self):
        """Test nested tags of one name are tracked by count, not by presence."""
        text = "<a><a><a/></a></a><a>x</a>"
        assert get_parallel_roots(text) == ["<a><a><a/></a></a>", "<a>x</a>"]

    def test_self_closing_tag_does_not_open(self):
        """Test a self-closing tag never leaves a fragment open."""
        assert get_parallel_roots("<br/><br/>") == ["<br/>", "<br/>"]

    def test_text_between_roots_is_its_own_fragment(self):
        """Test top-level text is kept apart from elements."""
        assert get_parallel_roots(" <a/>mid<b>1</b>end") == [
            " ",
            "<a/>",
            "mid",
            "<b>1</b>",
            "end",
        ]

    def test_empty_input(self):
        """Test empty input gives no fragments."""
        assert get_parallel_roots("") == []

    def test_text_only_input(self):
        """Test tagless input is one text fragment."""
        assert get_parallel_roots("hello") == ["hello"]

    def test_unbalanced_close_raises(self):
        """Test closing an unseen tag fails."""
        with pytest.raises(UnbalancedCloseTag):
            get_parallel_roots("<a></b></a>")

    def test_incomplete_tree_raises(self):
        """Test an element left open fails."""
        with pytest.raises(IncompleteTree):
            get_parallel_roots("<a><b></b>")

    @pytest.mark.parametrize("text", [
        "<a><b/></a>",
        ' <a x="1">t</a> <b/>tail',
        nested_document(3, 2),
        "<a></a><a></a><a/>",
    ])
    def test_fragments_concatenate_to_input(self, text):
        """Test the fragments reproduce the input exactly."""
        assert "".join(get_parallel_roots(text)) == text

    def test_tag_fragments_filters_text(self):
        """Test text fragments are dropped."""
        assert tag_fragments([" ", "<a/>", "x", "<b></b>"]) == ["<a/>", "<b></b>"]


class TestIsTree:
    """Test the well-formedness predicate and its raising form."""

    def test_simple_tree(self):
        """Test a simple nested document is a tree."""
        assert is_tree('<root><item id="1"/><item id="2">hi</item></root>')

    @pytest.mark.parametrize("depth,width", [(1, 1), (2, 3), (4, 2)])
    def test_generated_nesting_is_tree(self, depth, width):
        """Test correctly nested documents of any shape pass."""
        document = nested_document(depth, width)
        assert is_tree(document)
        check_tree(document)

    def test_mismatched_close_fails(self):
        """Test a tag left open inside the root fails."""
        assert not is_tree("<a><b></a>")
        with pytest.raises(IncompleteTree):
            check_tree("<a><b></a>")

    def test_close_of_unknown_tag_fails(self):
        """Test a closing tag with no opening fails."""
        assert not is_tree("<a></b></a>")
        with pytest.raises(UnbalancedCloseTag):
            check_tree("<a></b></a>")

    def test_self_closing_only_is_not_tree(self):
        """Test a lone self-closing tag has no root pair."""
        assert not is_tree("<a/>")
        with pytest.raises(CannotIdentifyRoot):
            check_tree("<a/>")

    def test_root_needs_matching_close(self):
        """Test a root pair must share its name."""
        assert not is_tree("<a>text</b>")

    def test_same_named_siblings_pass(self):
        """Test sibling roots are still balanced."""
        assert is_tree("<a></a><a></a>")

    def test_spaces_before_closing_bracket(self):
        """Test a root closing tag may end with spaces."""
        assert is_tree("<root><a/></root >")
        assert is_tree("<root ><a/></root\t>")

    def test_unterminated_tag_is_not_tree(self):
        """Test scanning failures count as not a tree."""
        assert not is_tree("<a></a><b")


class TestPreview:
    """Test message previews."""

    def test_short_text_unchanged(self):
        """Test short text is kept whole."""
        assert preview("<a/>") == "<a/>"

    def test_long_text_truncated(self):
        """Test long text is shortened."""
        shortened = preview("x" * 500)
        assert shortened.endswith("...")
        assert len(shortened) == 103
