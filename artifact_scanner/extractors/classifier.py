"""
HTTP method inference for endpoint candidates.

Explicit evidence in the surrounding code always beats naming heuristics:

1. <client>.<verb>( call signature       -> that verb
2. method: "<VERB>" option literal       -> that verb
3. any quoted HTTP verb in the context   -> that verb
4. endpoint naming (ids, login, edit...) -> guessed verb
5. GET
"""
import re

from ..config import HTTP_METHODS, HTTP_CLIENT_NAMES, DEFAULT_METHOD
from ..models import ArtifactKind

_VERBS = "|".join(m.lower() for m in HTTP_METHODS)

# axios.post / this.http.get / $http.delete ...
CALL_SIGNATURE_RE = re.compile(
    r"(?<![\w$])(?:" + "|".join(re.escape(c) for c in HTTP_CLIENT_NAMES) + r")\.(" + _VERBS + r")\b",
    re.I,
)

# { method: "POST" }
METHOD_OPTION_RE = re.compile(r"""method\s*:\s*["'`](""" + _VERBS + r""")["'`]""", re.I)

QUOTED_VERB_RES = [
    (m, re.compile(r"""["'`]""" + m + r"""["'`]""", re.I)) for m in HTTP_METHODS
]

NUMERIC_SEGMENT_RE = re.compile(r"/\d+")

# Endpoint substrings -> guessed verb, checked in order
NAMING_HINTS = [
    (("/login", "/register", "/upload", "/create"), "POST"),
    (("/update", "/edit"), "PUT"),
    (("/delete", "/remove"), "DELETE"),
]


def infer_method(endpoint: str, context: str) -> str:
    """
    Infer the HTTP method used with an endpoint.

    Args:
        endpoint: Normalized endpoint value
        context: Code surrounding the match (see METHOD_CONTEXT_RADIUS)

    Returns:
        str: Upper-case HTTP verb
    """
    m = CALL_SIGNATURE_RE.search(context)
    if m:
        return m.group(1).upper()

    m = METHOD_OPTION_RE.search(context)
    if m:
        return m.group(1).upper()

    for method, pat in QUOTED_VERB_RES:
        if pat.search(context):
            return method

    # Resource fetch by id
    if "{id}" in endpoint or ":id" in endpoint or NUMERIC_SEGMENT_RE.search(endpoint):
        return "GET"

    for needles, method in NAMING_HINTS:
        if any(n in endpoint for n in needles):
            return method

    return DEFAULT_METHOD


def classify_kind(pattern) -> ArtifactKind:
    """Artifact kind targeted by a pattern."""
    return pattern.kind
