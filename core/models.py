"""
Models Module
Data structures passed between the loading, extraction and comparison stages.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

# One normalized token: open tag, close tag, comment or text marker
StructuralLine = str

# module name -> source identifier -> lines between the module markers
ModuleTable = Dict[str, Dict[str, List[StructuralLine]]]

INNER_TEXT_LINE = '<innertext/>'
MISSING_LINE = '[no corresponding line]'


@dataclass
class SourceDocument:
    content: str
    identifier: str


@dataclass
class LineRef:
    """A rendered line and the source it came from."""
    src: str
    path: str

    def to_dict(self) -> Dict:
        return {'src': self.src, 'path': self.path}


@dataclass
class ModuleWarning:
    description: str
    path: str

    def to_dict(self) -> Dict:
        return {'description': self.description, 'path': self.path}


@dataclass
class ComparisonReport:
    errors: Dict[str, Dict[int, Tuple[LineRef, LineRef]]] = field(default_factory=dict)
    warnings: Dict[str, ModuleWarning] = field(default_factory=dict)

    def add_mismatch(self, module: str, line: int, main: LineRef, other: LineRef) -> None:
        self.errors.setdefault(module, {})[line] = (main, other)

    def mismatch_count(self, module: Optional[str] = None) -> int:
        if module is not None:
            return len(self.errors.get(module, {}))
        return sum(len(lines) for lines in self.errors.values())

    def to_dict(self) -> Dict:
        """Convert the report to plain JSON-friendly types."""
        return {
            'errors': {
                module: {
                    str(line): [pair[0].to_dict(), pair[1].to_dict()]
                    for line, pair in sorted(lines.items())
                }
                for module, lines in self.errors.items()
            },
            'warnings': {module: w.to_dict() for module, w in self.warnings.items()}
        }


@dataclass
class DiffResult:
    """Outcome of a successful run."""
    modules: ModuleTable
    results: ComparisonReport

    def to_dict(self) -> Dict:
        return {
            'modules': {
                name: {path: list(lines) for path, lines in sources.items()}
                for name, sources in self.modules.items()
            },
            'results': self.results.to_dict()
        }
