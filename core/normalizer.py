"""
Normalizer Module
Flattens a parsed document into an ordered list of structural lines.

Text content and disallowed attribute values are dropped, so two documents
normalize to the same lines exactly when their structure matches.
"""

from typing import List, Optional
import logging

from bs4 import BeautifulSoup

from .config import DiffOptions
from .html_parser import COMMENT, ELEMENT, TEXT, node_kind
from .models import INNER_TEXT_LINE, StructuralLine

logger = logging.getLogger(__name__)


class Normalizer:
    def __init__(self, options: Optional[DiffOptions] = None):
        self.options = options or DiffOptions()

    def normalize(self, root) -> List[StructuralLine]:
        """Walk root in document order and return its structural lines."""
        lines: List[StructuralLine] = []
        if isinstance(root, BeautifulSoup) or root.name == 'html':
            # no <body>: walk the wrapper's children, <head> excluded
            for child in root.children:
                if node_kind(child) == ELEMENT and child.name == 'head':
                    continue
                self._node_to_lines(child, lines)
        else:
            self._node_to_lines(root, lines)
        logger.debug(f"Normalized {len(lines)} lines")
        return lines

    def attribute_allowed(self, name: str) -> bool:
        patterns = self.options.attribute_patterns
        if not patterns:
            return True
        return any(pattern.search(name) for pattern in patterns)

    def render_open_tag(self, node) -> StructuralLine:
        line = '<' + node.name.lower()
        for name, value in node.attrs.items():
            if not self.attribute_allowed(name):
                continue
            if isinstance(value, (list, tuple)):
                value = ' '.join(value)
            line += f' {name}="{value}"'
        return line + '>'

    def _node_to_lines(self, node, lines: List[StructuralLine]) -> None:
        kind = node_kind(node)

        if kind == ELEMENT:
            lines.append(self.render_open_tag(node))
            for child in node.children:
                self._node_to_lines(child, lines)
            lines.append(f'</{node.name.lower()}>')

        elif kind == TEXT:
            if self.options.process_inner_text:
                text = str(node).strip().replace('\n', '')
                if text:
                    lines.append(INNER_TEXT_LINE)

        elif kind == COMMENT:
            lines.append(f'<!--{node}-->')
