"""Attribute splitting for opening tags."""

import re
from typing import Dict, List, Optional, Tuple

from simple_xml_tree.shared.errors import MalformedAttributes

_QUOTES = "\"'"
_UNSAFE_VALUE_CHARS = re.compile(r"[^A-Za-z0-9_]")


def _unbalanced_quote(token: str) -> Optional[str]:
    """Return the quote character left open by ``token``, if any."""
    for char in token:
        if char in _QUOTES:
            return char if token.count(char) % 2 == 1 else None
    return None


def split_attributes(opening_tag_body: str) -> Tuple[str, List[str]]:
    """Split the inside of an opening tag into its name and raw attribute tokens.

    The body is split on runs of whitespace. A token that opens a quote without
    closing it is joined with the following tokens, using the whitespace that
    originally separated them, until the quote closes. So
    ``'item title="a b" id="1"'`` gives ``("item", ['title="a b"', 'id="1"'])``.

    Args:
        opening_tag_body: Tag text without the angle brackets or a trailing slash

    Returns:
        Tuple of tag name and ``key=value`` tokens

    Raises:
        MalformedAttributes: a quoted value is never closed
    """
    parts = re.split(r"(\s+)", opening_tag_body.strip())
    tag_name = parts[0]
    tokens: List[str] = []

    pending: Optional[str] = None
    quote: Optional[str] = None
    for index in range(2, len(parts), 2):
        part = parts[index]
        if pending is None:
            quote = _unbalanced_quote(part)
            if quote is None:
                tokens.append(part)
            else:
                pending = part
        else:
            pending = pending + parts[index - 1] + part
            if part.count(quote) % 2 == 1:
                tokens.append(pending)
                pending = None
                quote = None

    if pending is not None:
        raise MalformedAttributes(
            f"Attributes of <{tag_name}> leave a quotation unclosed: {pending!r}"
        )
    return tag_name, tokens


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    return value.strip(_QUOTES)


def parse_attribute_tokens(tokens: List[str]) -> Dict[str, str]:
    """Turn ``key=value`` tokens into an attribute map.

    Values lose their surrounding quotes. Empty tokens are skipped and a
    repeated key keeps its last value.

    Raises:
        MalformedAttributes: a token has no ``=``
    """
    attributes: Dict[str, str] = {}
    for token in tokens:
        if not token:
            continue
        key, separator, value = token.partition("=")
        if not separator:
            raise MalformedAttributes(f"Attribute {token!r} has no value")
        attributes[key] = _strip_quotes(value)
    return attributes


def make_attribute_value_safe(text: str) -> str:
    """Reduce ``text`` to letters, digits and underscores, spaces becoming ``_``."""
    return _UNSAFE_VALUE_CHARS.sub("", text.replace(" ", "_"))
