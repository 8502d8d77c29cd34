"""
Configuration constants for the extraction engine.

Thresholds, deny-lists and content-type hints shared by the extractors.
Pattern definitions live in extractors/patterns.py.
"""
import re

# -------- SCORING CONFIGURATION --------

# Findings scoring below this are dropped by the orchestrator
DEFAULT_MIN_CONFIDENCE = 30

# Every endpoint score starts here before bonuses/penalties
BASE_ENDPOINT_CONFIDENCE = 50

# Shannon entropy at or above this suggests a generated secret
ENTROPY_THRESHOLD = 3.5

# Secrets shorter than this are penalised by the scorer
MIN_SECRET_LEN = 16

# -------- CONTEXT WINDOWS --------

# (before, after) radii around a match, in characters
METHOD_CONTEXT_RADIUS = (100, 100)
SCORE_CONTEXT_RADIUS = (50, 100)
SECRET_CONTEXT_RADIUS = (80, 80)

# -------- HTTP METHODS --------

# Order matters: the quoted-literal rule returns the first verb found
HTTP_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

DEFAULT_METHOD = "GET"

# Objects whose <client>.<verb>(...) calls name the method explicitly
HTTP_CLIENT_NAMES = [
    "axios", "$http", "http", "httpClient", "client",
    "api", "request", "superagent", "ky",
]

# -------- ENDPOINT VALIDATION --------

# Query-protocol endpoints that are almost always real APIs
QUERY_PROTOCOL_PATHS = {"/graphql", "/gql"}

# Fragments that mark a path as build output or static content, not an API
ENDPOINT_DENYLIST = [
    '/\\"',            # Escaped quote artifacts from minified JSON-in-JS
    '/\\',             # Escaped slash artifacts
    '/node_modules/',
    '/webpack/',
    '/dist/',
    '/build/',
    '/__',             # Dunder/internal framework paths (/__webpack_hmr etc.)
    '/static/',
    '/public/',
    '/images/',
    '/fonts/',
    '/styles/',
    '/scripts/',
]

MIN_ENDPOINT_LEN = 3

# Paths ending with these are files, not endpoints (script/style/image/font)
ASSET_EXTENSION_RE = re.compile(
    r"\.(js|css|png|jpg|jpeg|gif|svg|ico|woff|woff2|ttf|eot|webp)$", re.I
)

# REST nouns that earn the scoring bonus
REST_NOUN_RE = re.compile(r"/(users|auth|login|posts|products|orders)")

# {id} or /:id style path parameters
PATH_PARAM_RE = re.compile(r"\{[^{}/]*\}|/:[A-Za-z_]")

# -------- SECRET VALIDATION --------

MIN_SECRET_VALUE_LEN = 8

# Values that look like documentation placeholders rather than real secrets
PLACEHOLDER_RE = re.compile(
    r"(?i)(example|sample|dummy|placeholder|changeme|your[_-]|x{4,}|\*{4,}|test123|^<.*>$)"
)

# Variable-name hint used by the secret scorer (same keywords as literal scoring)
CREDENTIAL_HINT_RE = re.compile(r"key|token|secret|api|auth|cred|pass", re.I)

# ASSIGN_CONTEXT_RE: variable/property name on the left of an assignment
ASSIGN_CONTEXT_RE = re.compile(
    r"(?:([A-Za-z_$][\w$]*)\s*[:=]\s*[\"'`])|(?:[\"']([A-Za-z_$][\w$-]*)[\"']\s*:\s*[\"'`])"
)

# -------- RESOURCE ELIGIBILITY --------

SCRIPT_SUFFIXES = (".js", ".mjs")
SCRIPT_MIME_HINTS = ("javascript", "ecmascript")

# Secret scanning additionally reads JSON payloads and source maps
SECRET_SUFFIXES = SCRIPT_SUFFIXES + (".json", ".map")
SECRET_MIME_HINTS = SCRIPT_MIME_HINTS + ("json",)

# -------- HTTP PROVIDER --------

USER_AGENT = "ArtifactScanner/0.2"
DEFAULT_TIMEOUT = 6

# Ports dropped from a derived base URL
DEFAULT_PORTS = {"http": 80, "https": 443}
