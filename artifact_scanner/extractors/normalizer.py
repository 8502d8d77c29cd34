"""
Normalization and structural validation of raw candidates.
"""
import re

from ..config import (
    ENDPOINT_DENYLIST, MIN_ENDPOINT_LEN, MIN_SECRET_VALUE_LEN,
)

_QUOTES_RE = re.compile(r"[\"'`]")


def normalize_endpoint(endpoint: str) -> str:
    """
    Strip quote characters and drop the query string.

    Example:
        normalize_endpoint('"/api/items?page=2"') -> "/api/items"
    """
    endpoint = _QUOTES_RE.sub("", endpoint)
    path = endpoint.split("?", 1)[0]
    return path.strip()


def is_valid_endpoint(endpoint: str) -> bool:
    """
    Reject values that cannot be API endpoints.

    Rejected:
        - shorter than 3 characters
        - protocol-relative "//host/..." values
        - paths containing build/static fragments (node_modules, dist, ...)
          or escaped-slash artifacts
        - anything not starting with "/" or "http"
    """
    if len(endpoint) < MIN_ENDPOINT_LEN:
        return False

    if endpoint.startswith("//"):
        return False

    for fragment in ENDPOINT_DENYLIST:
        if fragment in endpoint:
            return False

    if not endpoint.startswith("/") and not endpoint.startswith("http"):
        return False

    return True


def normalize_secret(value: str) -> str:
    """Trim whitespace and any surrounding quotes."""
    return value.strip().strip("\"'`").strip()


def is_valid_secret(value: str) -> bool:
    """Reject short values and single-character runs (e.g. "********")."""
    if len(value) < MIN_SECRET_VALUE_LEN:
        return False
    if len(set(value)) == 1:
        return False
    return True
