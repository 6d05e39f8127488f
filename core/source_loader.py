"""
Source Loader Module
Resolves source descriptors into markup documents.

A descriptor is one of:

    {'host': 'www.domain.com', 'port': 80, 'path': '/page.html', 'https': False}
    {'glob': 'site/**/*.html', 'options': {'recursive': True}}
    'https://www.domain.com/page.html'  (url string)
    'site/*.html'                       (glob string)

A url yields one document, a glob yields one document per matching file.
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import urlsplit

import requests

from utils.file_utils import expand_glob, read_file_content

from .config import DiffOptions
from .errors import (
    GlobError,
    InvalidLocationPathError,
    MissingLocationPathError,
    SourceRequestError,
    UnsupportedSourceError,
)
from .models import SourceDocument

logger = logging.getLogger(__name__)

SourceDescriptor = Union[str, Mapping[str, Any]]


def descriptor_from_string(source: str) -> Dict[str, Any]:
    """Turn a url or glob pattern string into a descriptor mapping."""
    if source.startswith(('http://', 'https://')):
        parts = urlsplit(source)
        path = parts.path or '/'
        if parts.query:
            path += '?' + parts.query
        descriptor = {
            'host': parts.hostname,
            'path': path,
            'https': parts.scheme == 'https'
        }
        if parts.port:
            descriptor['port'] = parts.port
        return descriptor
    return {'glob': source}


class SourceLoader:
    def __init__(self, options: Optional[DiffOptions] = None,
                 session: Optional[requests.Session] = None):
        self.options = options or DiffOptions()
        self.session = session

    async def load_source(self, source: SourceDescriptor) -> List[SourceDocument]:
        """Load every document a descriptor points at."""
        if isinstance(source, str):
            source = descriptor_from_string(source)

        if isinstance(source, Mapping) and source.get('host'):
            return [await asyncio.to_thread(self.fetch_url, source)]

        if isinstance(source, Mapping) and source.get('glob'):
            return await asyncio.to_thread(self.read_glob, source)

        raise UnsupportedSourceError(f'Unsupported source. {source!r}')

    def fetch_url(self, source: Mapping[str, Any]) -> SourceDocument:
        host = source['host']
        path = source.get('path')
        use_https = bool(source.get('https'))
        default_port = 443 if use_https else 80
        port = source.get('port') or default_port

        if path is None:
            raise MissingLocationPathError('Url source expects a path argument')

        if not str(path).startswith('/'):
            raise InvalidLocationPathError('path needs to start with /')

        scheme = 'https' if use_https else 'http'
        url = f'{scheme}://{host}:{port}{path}'
        # identifiers omit the default port only
        netloc = host if port == default_port else f'{host}:{port}'
        logger.info(f"Fetching {url}")

        getter = self.session.get if self.session is not None else requests.get
        try:
            response = getter(url, timeout=self.options.request_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SourceRequestError(f'Request for {url} failed: {e}', source=url) from e

        response.encoding = self.options.encoding
        logger.debug(f"Fetched {url}, content length: {len(response.text)}")
        return SourceDocument(content=response.text, identifier=f'{netloc}{path}')

    def read_glob(self, source: Mapping[str, Any]) -> List[SourceDocument]:
        pattern = source['glob']
        try:
            files = expand_glob(pattern, source.get('options'))
        except (OSError, TypeError, ValueError) as e:
            raise GlobError(f'Glob error: {e}', source=pattern) from e

        if not files:
            logger.warning(f'No files found for "{pattern}".')

        documents = []
        for file_path in files:
            try:
                content = read_file_content(file_path, self.options.encoding)
            except (OSError, UnicodeDecodeError) as e:
                raise GlobError(f'Unable to read {file_path}: {e}', source=file_path) from e
            documents.append(SourceDocument(content=content, identifier=file_path))

        logger.info(f"Read {len(documents)} file(s) for \"{pattern}\"")
        return documents
