"""
Errors Module
Fatal conditions raised while loading sources or extracting modules.

Markup mismatches are never raised; they are reported as data.
"""

from typing import Dict, Optional


class MarkupDiffError(Exception):
    """Base error. Carries a human readable description and a numeric code."""

    code = 0

    def __init__(self, description: str, source: Optional[str] = None):
        super().__init__(description)
        self.description = description
        self.source = source

    def to_dict(self) -> Dict:
        result = {'description': self.description, 'code': self.code}
        if self.source is not None:
            result['source'] = self.source
        return result


class InvalidLocationPathError(MarkupDiffError):
    code = 1


class MissingLocationPathError(MarkupDiffError):
    code = 2


class GlobError(MarkupDiffError):
    code = 3


class UnsupportedSourceError(MarkupDiffError):
    code = 4


class MismatchedIgnoreMarkersError(MarkupDiffError):
    code = 5


class MismatchedModuleMarkersError(MarkupDiffError):
    code = 6


class ModuleMarkerCaptureError(MarkupDiffError):
    code = 7


class SourceRequestError(MarkupDiffError):
    code = 8


class InvalidOptionsError(MarkupDiffError):
    code = 9
