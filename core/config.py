"""
Config Module
Options controlling normalization, module markers and console output.
"""

import json
import logging
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Pattern, Union

from .errors import InvalidOptionsError

logger = logging.getLogger(__name__)

PatternLike = Union[str, Pattern]


def _compile(name: str, value: PatternLike) -> Pattern:
    if isinstance(value, re.Pattern):
        return value
    if not isinstance(value, str):
        raise InvalidOptionsError(f'Option "{name}" must be a regex string')
    try:
        return re.compile(value)
    except re.error as e:
        raise InvalidOptionsError(f'Option "{name}" is not a valid regex: {e}')


@dataclass
class DiffOptions:
    # encoding for reading/downloading files
    encoding: str = 'utf-8'

    # write the report to the console once the comparison is done
    console_out: bool = True

    # show only the first mismatching line per module; an inserted line floods the rest
    console_out_first_error_only: bool = True

    # attribute name patterns to compare, empty means all attributes
    attributes: List[str] = field(default_factory=list)

    # count the presence of non-empty text as structure, ignoring its content
    process_inner_text: bool = True

    # must capture the module name in its first group
    start_module_regex: PatternLike = r'<!--module:(\S*)-->'
    end_module_regex: PatternLike = r'<!--/module-->'
    start_ignore_regex: PatternLike = r'<!--module!ignore-->'
    end_ignore_regex: PatternLike = r'<!--/module!ignore-->'

    # seconds, passed to requests for url sources
    request_timeout: float = 30

    def __post_init__(self):
        if isinstance(self.attributes, str):
            self.attributes = [self.attributes]
        if self.attributes is not None and not isinstance(self.attributes, (list, tuple)):
            raise InvalidOptionsError('Option "attributes" must be a list of regex strings')
        self.attributes = list(self.attributes or [])
        for name in ('console_out', 'console_out_first_error_only', 'process_inner_text'):
            if not isinstance(getattr(self, name), bool):
                raise InvalidOptionsError(f'Option "{name}" must be true or false')
        if not isinstance(self.encoding, str):
            raise InvalidOptionsError('Option "encoding" must be a string')
        if isinstance(self.request_timeout, bool) or not isinstance(self.request_timeout, (int, float)):
            raise InvalidOptionsError('Option "request_timeout" must be a number')
        self.attribute_patterns = [_compile('attributes', a) for a in self.attributes]
        self.start_module_regex = _compile('start_module_regex', self.start_module_regex)
        self.end_module_regex = _compile('end_module_regex', self.end_module_regex)
        self.start_ignore_regex = _compile('start_ignore_regex', self.start_ignore_regex)
        self.end_ignore_regex = _compile('end_ignore_regex', self.end_ignore_regex)

    @classmethod
    def from_mapping(cls, overrides: Optional[Mapping[str, Any]] = None,
                     base: Optional['DiffOptions'] = None) -> 'DiffOptions':
        """Merge overrides on top of base (or the defaults)."""
        overrides = dict(overrides or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise InvalidOptionsError(f'Unknown option(s): {", ".join(unknown)}')

        values = {}
        if base is not None:
            values = {name: getattr(base, name) for name in known}
            values['attributes'] = list(base.attributes)
        values.update(overrides)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, re.Pattern):
                value = value.pattern
            result[f.name] = value
        return result


def load_options(config_path: Union[str, Path],
                 overrides: Optional[Mapping[str, Any]] = None) -> DiffOptions:
    """Read options from a JSON file, then apply overrides."""
    path = Path(config_path)
    logger.info(f"Loading options from {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise InvalidOptionsError(f'Unable to read options file {path}: {e}')

    if not isinstance(data, dict):
        raise InvalidOptionsError(f'Options file {path} must contain a JSON object')

    options = DiffOptions.from_mapping(data)
    if overrides:
        options = DiffOptions.from_mapping(overrides, base=options)
    return options
