"""
Resource providers: adapt captured traffic into scannable resources.

- HarResource / load_har: entries of a HAR capture file
- RemoteResource: a live URL fetched with requests (in a worker thread)
- TextResource: an in-memory body
"""
import asyncio
import base64
import binascii
import json
import logging
from pathlib import Path
from typing import List, Optional, Union

import requests

from .config import USER_AGENT, DEFAULT_TIMEOUT
from .exceptions import ResourceError, ValidationError

logger = logging.getLogger(__name__)


class TextResource:
    """Resource whose body is already in memory."""

    def __init__(self, url: str, content: Optional[str], mime_type: str = ""):
        self.url = url
        self.mime_type = mime_type
        self._content = content

    async def fetch_content(self) -> Optional[str]:
        return self._content

    def __repr__(self):
        return f"TextResource({self.url!r}, mime_type={self.mime_type!r})"


class HarResource:
    """
    One HAR entry.

    The body comes from response.content.text; base64-encoded bodies are
    decoded as UTF-8 (undecodable bytes are replaced).
    """

    def __init__(self, entry: dict):
        request = entry.get("request") or {}
        response = entry.get("response") or {}
        self._content_info = response.get("content") or {}
        self.url = str(request.get("url") or "")
        self.method = request.get("method") or ""
        self.status = response.get("status")
        self.mime_type = str(self._content_info.get("mimeType") or "")

    async def fetch_content(self) -> Optional[str]:
        text = self._content_info.get("text")
        if not text or not isinstance(text, str):
            return None
        if self._content_info.get("encoding") == "base64":
            try:
                return base64.b64decode(text).decode("utf-8", errors="replace")
            except (binascii.Error, ValueError):
                logger.debug("Invalid base64 body for %s", self.url, exc_info=True)
                return None
        return text

    def __repr__(self):
        return f"HarResource({self.url!r}, mime_type={self.mime_type!r})"


def load_har(har_file: Union[str, Path]) -> List[HarResource]:
    """
    Load every entry of a HAR capture file.

    Args:
        har_file: Path to a .har file (HAR 1.2 JSON)

    Returns:
        list of HarResource in capture order

    Raises:
        ResourceError: File missing or unreadable
        ValidationError: Not valid HAR JSON
    """
    path = Path(har_file)
    if not path.exists():
        raise ResourceError(f"HAR file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in HAR file {path}: {e}")
    except OSError as e:
        raise ResourceError(f"Cannot read HAR file {path}: {e}")

    log = data.get("log") if isinstance(data, dict) else None
    entries = log.get("entries") if isinstance(log, dict) else None
    if not isinstance(entries, list):
        raise ValidationError(f"{path} is not a HAR file (missing log.entries)")

    resources = [HarResource(e) for e in entries if isinstance(e, dict)]
    logger.info("Loaded %d entries from %s", len(resources), path)
    return resources


def open_session() -> requests.Session:
    """requests.Session carrying the scanner User-Agent; close it when done."""
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


class RemoteResource:
    """
    A URL fetched on demand with requests.

    The blocking GET runs in a worker thread so the event loop stays free.
    The body is cached, so scanning the same resource for endpoints and then
    secrets only downloads it once. Non-200 responses and network errors
    yield no content. Pass a shared session (see open_session) when fetching
    many URLs so connections are pooled and closed once.
    """

    def __init__(self, url: str, mime_type: str = "", session=None, timeout: int = DEFAULT_TIMEOUT):
        self.url = url
        self.mime_type = mime_type
        self.timeout = timeout
        if session is None:
            session = open_session()
        self.session = session
        self._fetched = False
        self._content = None

    def _get(self) -> Optional[str]:
        try:
            r = self.session.get(self.url, timeout=self.timeout, allow_redirects=True)
        except Exception:
            logger.debug("Fetch failed: %s", self.url, exc_info=True)
            return None
        logger.debug("Fetched %s -> %s", self.url, getattr(r, "status_code", None))
        if r.status_code != 200:
            return None
        if not self.mime_type:
            self.mime_type = r.headers.get("Content-Type", "")
        return r.text

    async def fetch_content(self) -> Optional[str]:
        if not self._fetched:
            self._content = await asyncio.to_thread(self._get)
            self._fetched = True
        return self._content

    def __repr__(self):
        return f"RemoteResource({self.url!r})"
