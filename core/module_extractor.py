"""
Module Extractor Module
Splits a normalized line sequence into named modules.

Modules and ignore regions are delimited by comment markers. A region is
closed by the first end marker following the most recent start marker, so
markers are expected to be flat; nesting is not supported. Ignore regions are
removed before modules are cut out.
"""

from typing import List, Optional, Pattern, Tuple
import logging

from .config import DiffOptions
from .errors import (
    MismatchedIgnoreMarkersError,
    MismatchedModuleMarkersError,
    ModuleMarkerCaptureError,
)
from .models import ModuleTable, StructuralLine

logger = logging.getLogger(__name__)


class ModuleExtractor:
    def __init__(self, options: Optional[DiffOptions] = None):
        self.options = options or DiffOptions()

    def extract_modules(self, lines: List[StructuralLine], identifier: str,
                        module_table: Optional[ModuleTable] = None) -> ModuleTable:
        """
        Cut every module out of lines and record it in module_table.

        lines is consumed: ignore regions and modules are removed from it as
        they are found. A module already recorded for the same name and
        identifier is overwritten.

        Returns:
            The updated module table.

        Raises:
            MismatchedIgnoreMarkersError: ignore start/end counts differ
            MismatchedModuleMarkersError: module start/end counts differ
            ModuleMarkerCaptureError: the start marker captured no module name
        """
        if module_table is None:
            module_table = {}

        self.validate_markers(lines, identifier)
        self.remove_ignored(lines, identifier)

        while True:
            span = self._find_region(
                lines,
                self.options.start_module_regex,
                self.options.end_module_regex,
            )
            if span is None:
                break

            start, end = span
            name = self._module_name(lines[start], identifier)

            # cut the module out including its markers, then drop the markers
            region = lines[start:end + 1]
            del lines[start:end + 1]
            module_table.setdefault(name, {})[identifier] = region[1:-1]
            logger.debug(f"Extracted module '{name}' ({len(region) - 2} lines) from {identifier}")

        self._check_unclosed(lines, self.options.start_module_regex, identifier,
                             MismatchedModuleMarkersError, 'Module')
        return module_table

    def validate_markers(self, lines: List[StructuralLine], identifier: str) -> None:
        """Ensure start and end marker counts match for ignores and modules."""
        opts = self.options
        module_starts = module_ends = ignore_starts = ignore_ends = 0

        for line in lines:
            if opts.start_module_regex.search(line):
                module_starts += 1
            elif opts.end_module_regex.search(line):
                module_ends += 1

            if opts.start_ignore_regex.search(line):
                ignore_starts += 1
            elif opts.end_ignore_regex.search(line):
                ignore_ends += 1

        if ignore_starts != ignore_ends:
            raise MismatchedIgnoreMarkersError(
                f'Ignore start/end mismatch at {identifier}', source=identifier)

        if module_starts != module_ends:
            raise MismatchedModuleMarkersError(
                f'Module start/end mismatch at {identifier}', source=identifier)

    def remove_ignored(self, lines: List[StructuralLine], identifier: str) -> None:
        """Delete every ignore region from lines, markers included."""
        removed = 0
        while True:
            span = self._find_region(
                lines,
                self.options.start_ignore_regex,
                self.options.end_ignore_regex,
            )
            if span is None:
                break
            start, end = span
            del lines[start:end + 1]
            removed += 1

        self._check_unclosed(lines, self.options.start_ignore_regex, identifier,
                             MismatchedIgnoreMarkersError, 'Ignore')
        if removed:
            logger.debug(f"Removed {removed} ignore region(s) from {identifier}")

    @staticmethod
    def _find_region(lines: List[StructuralLine], start_regex: Pattern,
                     end_regex: Pattern) -> Optional[Tuple[int, int]]:
        """Return the first (start, end) span, pairing an end with the last start before it."""
        start = -1
        for i, line in enumerate(lines):
            if start_regex.search(line):
                start = i
            if start != -1 and end_regex.search(line):
                return start, i
        return None

    @staticmethod
    def _check_unclosed(lines: List[StructuralLine], start_regex: Pattern, identifier: str,
                        error_type, label: str) -> None:
        # counts balanced but an end came before its start
        if any(start_regex.search(line) for line in lines):
            raise error_type(f'{label} start without a following end at {identifier}',
                             source=identifier)

    def _module_name(self, line: StructuralLine, identifier: str) -> str:
        match = self.options.start_module_regex.search(line)
        if match.re.groups < 1:
            raise ModuleMarkerCaptureError(
                'Regex for module start marker returned unexpected match count.',
                source=identifier)
        return (match.group(1) or '').strip()
