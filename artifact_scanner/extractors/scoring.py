"""
Heuristic confidence scoring.

Both scorers are pure functions of (value, evidence, context text) returning
an integer clamped to [0, 100]. The score is a plausibility heuristic, not
a probability; the acceptance threshold is applied by the orchestrator.
"""
from ..config import (
    BASE_ENDPOINT_CONFIDENCE, DEFAULT_METHOD, QUERY_PROTOCOL_PATHS,
    PATH_PARAM_RE, REST_NOUN_RE, ASSET_EXTENSION_RE,
    ENTROPY_THRESHOLD, MIN_SECRET_LEN, PLACEHOLDER_RE,
    CREDENTIAL_HINT_RE, ASSIGN_CONTEXT_RE,
)
from ..utils import shannon_entropy


def clamp(score: int, low: int = 0, high: int = 100) -> int:
    return min(high, max(low, score))


def score_endpoint(endpoint: str, method: str, context: str) -> int:
    """
    Score how likely a string is a real API endpoint.

    Scoring Criteria (starting at 50):
        +30 starts with /api/
        +25 starts with /v1/ or /v2/
        +30 is exactly /graphql or /gql
        +15 method is not the default GET, or "method" appears in context
        +10 has a {param} or /:param path parameter
        +15 contains a common REST noun (/users, /auth, /login, ...)
        +20 is a full http(s) URL
        -20 shorter than 4 characters
        -15 contains no "/"
        -40 ends with a static asset extension (.js, .css, .png, ...)

    Example:
        score_endpoint("/api/users/123", "GET", 'fetch("/api/users/123")') -> 95
    """
    confidence = BASE_ENDPOINT_CONFIDENCE

    if endpoint.startswith("/api/"):
        confidence += 30
    if endpoint.startswith("/v1/") or endpoint.startswith("/v2/"):
        confidence += 25
    if endpoint.lower() in QUERY_PROTOCOL_PATHS:
        confidence += 30

    # Method was explicitly found
    if method != DEFAULT_METHOD or "method" in context:
        confidence += 15

    if PATH_PARAM_RE.search(endpoint):
        confidence += 10

    if REST_NOUN_RE.search(endpoint):
        confidence += 15

    if endpoint.startswith("http"):
        confidence += 20

    if len(endpoint) < 4:
        confidence -= 20
    if "/" not in endpoint:
        confidence -= 15

    # Probably a file path rather than an endpoint
    if ASSET_EXTENSION_RE.search(endpoint):
        confidence -= 40

    return clamp(confidence)


def has_credential_hint(context: str) -> bool:
    """True if an assignment in context names a key/token/secret-like variable."""
    for m in ASSIGN_CONTEXT_RE.finditer(context):
        candidate = "".join(g for g in m.groups() if g)
        if CREDENTIAL_HINT_RE.search(candidate):
            return True
    return False


def score_secret(value: str, pattern, context: str) -> int:
    """
    Score how likely a matched string is a live credential.

    Scoring Criteria (starting at the pattern's base confidence):
        +10 entropy >= ENTROPY_THRESHOLD (3.5)
        +10 assigned to a variable named like key/token/secret/api/auth/cred/pass
        -30 looks like a placeholder (example, dummy, your_..., xxxx)
        -15 shorter than MIN_SECRET_LEN (16)
    """
    confidence = pattern.confidence

    if shannon_entropy(value) >= ENTROPY_THRESHOLD:
        confidence += 10

    if has_credential_hint(context):
        confidence += 10

    if PLACEHOLDER_RE.search(value):
        confidence -= 30

    if len(value) < MIN_SECRET_LEN:
        confidence -= 15

    return clamp(confidence)
