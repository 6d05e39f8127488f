"""
HTML Parser Module
Parses markup with BeautifulSoup and classifies the resulting nodes.
"""

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, PreformattedString, Tag
import logging

logger = logging.getLogger(__name__)

ELEMENT = 'element'
TEXT = 'text'
COMMENT = 'comment'
OTHER = 'other'


def node_kind(node) -> str:
    """Classify a BeautifulSoup node as element, text, comment or other."""
    if isinstance(node, Tag):
        return ELEMENT
    if isinstance(node, Comment):
        return COMMENT
    # Doctype, CData, Declaration, ProcessingInstruction
    if isinstance(node, PreformattedString):
        return OTHER
    if isinstance(node, NavigableString):
        return TEXT
    return OTHER


class HTMLParser:
    """Parser for HTML content."""

    def parse(self, html_content: str):
        """
        Parse HTML content and return the body element.

        Without a <body> tag the <html> element is returned, or the document
        itself for fragments. Neither wrapper is rendered when normalized.
        """
        logger.debug(f"Input HTML content length: {len(html_content)}")

        # keep attribute values as written, class included
        soup = BeautifulSoup(html_content, 'html.parser', multi_valued_attributes=None)

        root = soup.body
        if root is None:
            root = soup.html if soup.html is not None else soup
        logger.debug(f"Using root element: {root.name}")
        return root
