"""Fetching remote or local resources and resolving relative references."""

from __future__ import annotations

import logging
import os
import re
import urllib.parse
import urllib.request
from pathlib import Path

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:")
_URL_SAFE = "!#$%&'()*+,/:;=?@[]~"
_BOM = b"\xef\xbb\xbf"


def fetch_uri(uri: str, timeout: float | None = None) -> bytes:
    """Return the contents of ``uri``.

    Anything that does not start with ``http://`` or ``https://`` is read as
    a path to a local file. HTTP error statuses raise ``urllib.error.HTTPError``.
    """
    if uri.startswith(("http://", "https://")):
        logger.debug("Loading url: '%s'", uri)
        request = urllib.request.Request(uri)
        if timeout is None:
            response = urllib.request.urlopen(request)
        else:
            response = urllib.request.urlopen(request, timeout=timeout)
        with response:
            contents = response.read()
        logger.debug("Loaded url: '%s'", uri)
        return contents
    logger.debug("Loading file: '%s'", uri)
    contents = Path(uri).read_bytes()
    logger.debug("Loaded file: '%s'", uri)
    return contents


def _scheme(text: str) -> str | None:
    match = _SCHEME.match(text)
    return match.group()[:-1].lower() if match else None


def resolve_relative(base: str, path: str) -> str:
    """Resolve ``path`` against ``base``, which may be a URL or a file path."""
    if _scheme(path) is not None:
        return path
    scheme = _scheme(base)
    if scheme and scheme in urllib.parse.uses_relative:
        joined = urllib.parse.urljoin(base, path)
        return urllib.parse.quote(joined, safe=_URL_SAFE)
    prefix = base.rsplit("/", 1)[0]
    return os.path.join(prefix, path)


def remove_bom(contents: bytes) -> bytes:
    """Strip a leading UTF-8 byte order mark, if there is one."""
    if contents.startswith(_BOM):
        return contents[len(_BOM):]
    return contents