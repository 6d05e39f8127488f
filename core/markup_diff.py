"""
Markup Diff Module
Coordinates loading, normalization, module extraction and comparison.
"""

import asyncio
import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from .config import DiffOptions
from .errors import MarkupDiffError
from .html_parser import HTMLParser
from .models import DiffResult, ModuleTable, SourceDocument
from .module_comparator import ModuleComparator
from .module_extractor import ModuleExtractor
from .normalizer import Normalizer
from .source_loader import SourceDescriptor, SourceLoader

logger = logging.getLogger(__name__)

OptionsLike = Union[DiffOptions, Mapping[str, Any], None]


def _resolve_options(options: OptionsLike) -> DiffOptions:
    if options is None:
        return DiffOptions()
    if isinstance(options, DiffOptions):
        return options
    if isinstance(options, Mapping):
        return DiffOptions.from_mapping(options)
    raise TypeError('Options must be a mapping or DiffOptions')


class MarkupDiff:
    """
    Runs a full comparison over an ordered list of sources.

    Sources are loaded one at a time in the given order. Each document is
    normalized and its modules folded into a module table; when two documents
    share an identifier and module name the later one wins. The table is then
    compared and, if a reporter is attached, handed to it.

    Any MarkupDiffError aborts the whole run; nothing is reported.
    """

    def __init__(self, options: OptionsLike = None, reporter=None,
                 loader: Optional[SourceLoader] = None):
        self.options = _resolve_options(options)
        self.reporter = reporter
        self.parser = HTMLParser()
        self.normalizer = Normalizer(self.options)
        self.extractor = ModuleExtractor(self.options)
        self.comparator = ModuleComparator()
        self.loader = loader or SourceLoader(self.options)

    def process_document(self, document: SourceDocument, module_table: ModuleTable) -> ModuleTable:
        """Normalize one document and add its modules to module_table."""
        root = self.parser.parse(document.content)
        lines = self.normalizer.normalize(root)
        logger.debug(f"{document.identifier}: {len(lines)} structural lines")
        return self.extractor.extract_modules(lines, document.identifier, module_table)

    async def compare_async(self, sources: Sequence[SourceDescriptor]) -> DiffResult:
        if isinstance(sources, (str, bytes)) or not isinstance(sources, Sequence):
            raise TypeError('Sources is required, and must be a list')

        module_table: ModuleTable = {}
        try:
            for source in sources:
                documents = await self.loader.load_source(source)
                for document in documents:
                    module_table = self.process_document(document, module_table)

            results = self.comparator.compare(module_table)

        except MarkupDiffError as e:
            logger.error(f"Comparison aborted (code {e.code}): {e.description}", exc_info=True)
            raise

        logger.info(f"Found {len(module_table)} module(s) in {len(sources)} source(s)")
        result = DiffResult(modules=module_table, results=results)
        if self.reporter is not None:
            self.reporter.report(result, self.options)
        return result

    def compare(self, sources: Sequence[SourceDescriptor]) -> DiffResult:
        """Synchronous wrapper around compare_async."""
        return asyncio.run(self.compare_async(sources))


def compare(sources: List[SourceDescriptor], options: OptionsLike = None,
            reporter=None) -> DiffResult:
    """
    Compare modules across sources.

    Args:
        sources: Url/glob descriptors, loaded in order
        options: DiffOptions or a mapping of overrides
        reporter: Optional sink with a report(result, options) method

    Returns:
        DiffResult holding the module table and the comparison report

    Raises:
        MarkupDiffError: a source failed to load or has unbalanced markers
    """
    return MarkupDiff(options, reporter=reporter).compare(sources)
