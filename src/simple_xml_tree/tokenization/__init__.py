"""Tag lexing for simple XML tree parsing.

Key Components:
    scan_tags: Yields a TagToken for every tag in a document
    TagToken: One tag with its kind, name, raw text and offsets
    TagKind: Opening, closing or self-closing
    split_attributes: Splits an opening tag into name and attribute tokens
    parse_attribute_tokens: Builds an attribute map from those tokens
"""

from .attributes import (
    make_attribute_value_safe,
    parse_attribute_tokens,
    split_attributes,
)
from .tokenizer import (
    TagKind,
    TagToken,
    find_closing_tag,
    is_self_closing,
    match_opening_tag,
    scan_tags,
    strip_formatting,
    strip_header,
)

__all__ = [
    "TagKind",
    "TagToken",
    "find_closing_tag",
    "is_self_closing",
    "make_attribute_value_safe",
    "match_opening_tag",
    "parse_attribute_tokens",
    "scan_tags",
    "split_attributes",
    "strip_formatting",
    "strip_header",
]
