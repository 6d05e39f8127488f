"""
File Utilities Module
Glob expansion and file reading for filesystem sources.
"""

import glob
from pathlib import Path
from typing import Any, Dict, List, Optional


def expand_glob(pattern: str, options: Optional[Dict[str, Any]] = None) -> List[str]:
    """
    Expand a glob pattern into a sorted list of matching files.

    Args:
        pattern: Glob pattern, e.g. 'site/**/*.html'
        options: Keyword arguments for glob.glob (recursive, root_dir, ...)

    Returns:
        Matching file paths; directories are skipped

    Raises:
        TypeError: If options holds an argument glob.glob does not accept
        OSError: If the filesystem can't be enumerated
    """
    options = dict(options or {})
    root_dir = options.get('root_dir')
    matches = glob.glob(pattern, **options)

    files = []
    for match in sorted(matches):
        full_path = Path(root_dir, match) if root_dir else Path(match)
        if full_path.is_file():
            files.append(str(full_path))
    return files


def ensure_directory(directory: Path) -> None:
    """Ensure directory exists, create if necessary."""
    directory.mkdir(parents=True, exist_ok=True)


def read_file_content(file_path: str | Path, encoding: str = 'utf-8') -> str:
    """
    Read file content with the given encoding.

    Raises:
        FileNotFoundError: If file doesn't exist
        IOError: If file can't be read
    """
    with open(file_path, 'r', encoding=encoding) as f:
        return f.read()
