"""
Rendering of pruned subtrees back to markup.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter


class SourceOrderFormatter(HTMLFormatter):
    """bs4's "minimal" formatter without attribute sorting."""

    def attributes(self, tag: Tag):
        if tag.attrs is None:
            return []
        return list(tag.attrs.items())


MINIMAL_FORMATTER = SourceOrderFormatter(entity_substitution=EntitySubstitution.substitute_xml)


def serialize(node: Tag) -> str:
    """Render ``node`` as markup without reflowing or re-indenting.

    Attributes are emitted in source order and text as parsed; only ``&``,
    ``<`` and ``>`` in text are escaped. A whole document renders its
    contents.
    """
    if isinstance(node, BeautifulSoup):
        return node.decode_contents(formatter=MINIMAL_FORMATTER)
    return node.decode(formatter=MINIMAL_FORMATTER)
