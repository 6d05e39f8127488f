"""
Module Comparator Module
Compares same-named modules from different sources line by line.

Lines are aligned by position only. After an inserted or deleted line every
following line is reported as a mismatch; there is no resynchronization.
"""

from itertools import combinations
from typing import List, Optional
import logging

from .models import (
    MISSING_LINE,
    ComparisonReport,
    LineRef,
    ModuleTable,
    ModuleWarning,
    StructuralLine,
)

logger = logging.getLogger(__name__)


def _line_at(lines: List[StructuralLine], index: int) -> Optional[StructuralLine]:
    return lines[index] if index < len(lines) else None


class ModuleComparator:
    def compare(self, module_table: ModuleTable) -> ComparisonReport:
        """
        Compare every pair of sources sharing a module name.

        Each unordered pair is visited once, in load order, up to the length of
        its longer module. Mismatches are keyed by module name and 1-based line
        number; if several pairs mismatch on the same line, the last pair wins.
        Modules seen in a single source produce a warning instead.
        """
        report = ComparisonReport()

        for module, sources in module_table.items():
            if len(sources) == 1:
                path = next(iter(sources))
                report.warnings[module] = ModuleWarning(
                    description=f'Only one instance of module "{module}" detected, unable to test.',
                    path=path
                )
                logger.debug(f"Module '{module}' only found in {path}")
                continue

            for source, other in combinations(sources, 2):
                self.compare_lines(module, source, sources[source], other, sources[other], report)

        logger.info(f"Compared {len(module_table)} module(s), "
                    f"{report.mismatch_count()} mismatching line(s)")
        return report

    def compare_lines(self, module: str, source: str, source_lines: List[StructuralLine],
                      other: str, other_lines: List[StructuralLine],
                      report: ComparisonReport) -> None:
        for i in range(max(len(source_lines), len(other_lines))):
            main_line = _line_at(source_lines, i)
            test_line = _line_at(other_lines, i)

            if main_line is not None and main_line == test_line:
                continue

            report.add_mismatch(
                module,
                i + 1,
                LineRef(main_line if main_line is not None else MISSING_LINE, source),
                LineRef(test_line if test_line is not None else MISSING_LINE, other)
            )
