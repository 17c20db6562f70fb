"""Helpers for audio source identifiers: file:// URIs, bare paths and http(s) URLs."""
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests

from transcoder.constants import REMOTE_SCHEMES, SOURCE_FETCH_TIMEOUT


def local_path(source: str) -> Path | None:
    """Return the filesystem path for a local source, or None for remote ones."""
    parsed = urlparse(source)
    match parsed.scheme.lower():
        case "file":
            return Path(url2pathname(parsed.path))
        case scheme if scheme in REMOTE_SCHEMES:
            return None
        case _:
            return Path(source)


def media_input(source: str) -> str:
    """Argument suitable for ffmpeg/ffprobe ``-i``."""
    match local_path(source):
        case None:
            return source
        case path:
            return str(path)


def read_audio(source: str, timeout: float = SOURCE_FETCH_TIMEOUT) -> bytes:
    """Load the raw bytes behind ``source``. Raises on missing files or HTTP errors."""
    match local_path(source):
        case None:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
            return response.content
        case path:
            return path.read_bytes()
