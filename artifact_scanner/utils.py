"""
Helper functions shared by the extractors.

- Shannon entropy calculation for randomness detection
- Bounded context windows around a match
- Base URL derivation from a resource URL
- Resource eligibility checks
"""
import math
import urllib.parse

from .config import (
    DEFAULT_PORTS, SCRIPT_SUFFIXES, SCRIPT_MIME_HINTS, SECRET_SUFFIXES, SECRET_MIME_HINTS,
)
from .models import ArtifactKind, Context


def shannon_entropy(s: str) -> float:
    """
    Calculate Shannon entropy of a string to measure randomness.

    High entropy suggests random data (API keys, tokens, hashes); regular
    words and identifiers stay below ~3.0 bits.

    Example:
        shannon_entropy("aaaa") -> 0.0
        shannon_entropy("aK8$mX9#pQ2!") -> ~3.58
    """
    if not s:
        return 0.0

    freq = {}
    for ch in s:
        freq[ch] = freq.get(ch, 0) + 1

    # -Σ(p(x) * log2(p(x)))
    ent = 0.0
    L = len(s)
    for count in freq.values():
        p = count / L
        ent -= p * math.log2(p)

    return ent


def extract_context(content: str, match_index: int, match_length: int = 0,
                    before: int = 100, after: int = 100) -> Context:
    """
    Return the text window around a match, clamped to the content bounds.

    The window spans [match_index - before, match_index + match_length + after).

    Args:
        content: Full resource text
        match_index: Offset where the match starts
        match_length: Length of the matched value (0 to anchor on the start only)
        before: Characters to include before the match
        after: Characters to include after the match

    Returns:
        Context: the window text and its start offset in content
    """
    start = max(0, match_index - before)
    end = min(len(content), match_index + match_length + after)
    if end < start:
        end = start
    return Context(text=content[start:end], start_offset=start)


def derive_base_url(url: str) -> str:
    """
    Best-effort scheme://host[:port] of a resource URL.

    The host is lowercased and a default port (80 for http, 443 for https)
    is dropped. Returns "" when the URL is not absolute or cannot be parsed.
    """
    try:
        parsed = urllib.parse.urlsplit(str(url or ""))
        # Accessing .port validates it (raises ValueError on garbage)
        port = parsed.port
    except ValueError:
        return ""
    host = parsed.hostname
    if not parsed.scheme or not host:
        return ""
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != DEFAULT_PORTS.get(parsed.scheme):
        host = f"{host}:{port}"
    return f"{parsed.scheme}://{host}"


def _url_path(url: str) -> str:
    if "://" not in url:
        return url.split("?", 1)[0]
    try:
        return urllib.parse.urlsplit(url).path
    except ValueError:
        return url.split("?", 1)[0]


def is_eligible(url: str, mime_type: str, kind: ArtifactKind) -> bool:
    """
    Decide whether a resource should be scanned for the given artifact kind.

    Endpoints are only extracted from script content (by URL suffix or
    declared MIME type). Secret scanning also reads JSON bodies and source maps.
    Malformed URLs fall back to the text before any query string.
    """
    url = str(url or "").lower()
    mime = str(mime_type or "").lower()
    path = _url_path(url)

    if kind is ArtifactKind.SECRET:
        suffixes, hints = SECRET_SUFFIXES, SECRET_MIME_HINTS
    else:
        suffixes, hints = SCRIPT_SUFFIXES, SCRIPT_MIME_HINTS

    if url.endswith(suffixes) or path.endswith(suffixes):
        return True
    return any(h in mime for h in hints)
