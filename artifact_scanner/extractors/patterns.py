"""
Pattern library for endpoint and secret extraction.

Patterns are declared as data (name, kind, regex, capture slots, base
confidence) and compiled once when a PatternLibrary is built. Any malformed
entry fails library construction with PatternError instead of surfacing
mid-scan.

Extra patterns can be supplied from the YAML config or from a KEY=VALUE
patterns file (see load_patterns_file).
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..exceptions import PatternError
from ..models import ArtifactKind, Candidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionPattern:
    """
    One named matcher.

    capture_slots lists the regex groups to try, in order; the first
    non-empty one is the candidate value. confidence is the base score for
    secret patterns and unused for endpoints.
    """

    name: str
    kind: ArtifactKind
    regex: re.Pattern
    capture_slots: Tuple[int, ...] = (1,)
    confidence: int = 0

    @property
    def title(self) -> str:
        # snake_case key -> Title Case for display
        return self.name.replace("_", " ").title()

    def candidates(self, content: str, source_file: str) -> Iterator[Candidate]:
        """Yield a Candidate for every non-overlapping match in content."""
        for m in self.regex.finditer(content):
            value = None
            for slot in self.capture_slots:
                group = m.group(slot)
                if group:
                    value = group
                    break
            if not value:
                continue
            yield Candidate(
                raw_value=value,
                match_index=m.start(),
                match_length=len(value),
                pattern_name=self.name,
                source_file=source_file,
            )


def compile_pattern(name: str, kind: Union[ArtifactKind, str], regex: str,
                    capture_slots: Sequence[int] = (1,), flags: int = 0,
                    confidence: int = 0) -> ExtractionPattern:
    """
    Compile and validate one pattern declaration.

    Raises:
        PatternError: empty name, unknown kind, invalid regex, capture slot
            outside the regex's group range, or confidence outside [0, 100]
    """
    if not name or not isinstance(name, str):
        raise PatternError(f"Pattern name must be a non-empty string, got {name!r}")

    try:
        kind = ArtifactKind(kind)
    except ValueError:
        raise PatternError(f"Pattern '{name}': unknown kind {kind!r}")

    if isinstance(regex, re.Pattern):
        compiled = regex
    else:
        try:
            compiled = re.compile(regex, flags)
        except (re.error, TypeError) as e:
            raise PatternError(f"Pattern '{name}': invalid regex: {e}")

    slots = tuple(capture_slots)
    if not slots:
        raise PatternError(f"Pattern '{name}': at least one capture slot is required")
    for slot in slots:
        if not isinstance(slot, int) or slot < 0 or slot > compiled.groups:
            raise PatternError(
                f"Pattern '{name}': capture slot {slot!r} out of range "
                f"(regex has {compiled.groups} groups)"
            )

    if not isinstance(confidence, int) or not 0 <= confidence <= 100:
        raise PatternError(f"Pattern '{name}': confidence must be an integer in [0, 100]")

    return ExtractionPattern(
        name=name, kind=kind, regex=compiled,
        capture_slots=slots, confidence=confidence,
    )


# -------- ENDPOINT PATTERNS --------
# (name, regex, capture_slots, flags)

_REST_NOUNS = (
    "users|auth|login|logout|register|profile|settings|posts|comments|products"
    "|orders|payments|upload|download|search|items|entities|resources"
)

ENDPOINT_PATTERNS = [
    # Absolute API paths
    ("api_path", r'''["'`](/api/[a-zA-Z0-9_\-/{}:]+)["'`]''', (1,), 0),
    ("versioned_path", r'''["'`](/v\d+/[a-zA-Z0-9_\-/{}:]+)["'`]''', (1,), 0),

    # Fully-qualified URLs
    ("full_url", r'''["'`](https?://[a-zA-Z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+)["'`]''', (1,), 0),

    # Generic multi-segment relative paths
    ("relative_path", r'''["'`](/[a-zA-Z0-9_\-]+(?:/[a-zA-Z0-9_\-{}:]+)+)["'`]''', (1,), 0),

    # Query-protocol endpoints
    ("graphql_path", r'''["'`](/graphql|/gql)["'`]''', (1,), re.I),

    # fetch("...") / axios("...")
    ("fetch_call", r'''(?:fetch|axios)\s*\(\s*["'`]([^"'`]+)["'`]''', (1,), 0),
    # axios.<verb>("..."); group 1 is the verb, the URL is group 2
    ("axios_method",
     r'''axios\.(get|post|put|patch|delete|head|options)\s*\(\s*["'`]([^"'`]+)["'`]''',
     (2,), re.I),

    # Template literals containing a URL or API prefix
    ("template_url", r'''`([^`]*(?:https?://|/api/|/v\d+/)[^`]*)`''', (1,), 0),

    # Common REST resource nouns
    ("rest_endpoint",
     r'''["'`](/(?:''' + _REST_NOUNS + r''')(?:/[a-zA-Z0-9_\-{}:]*)?(?:/[a-zA-Z0-9_\-{}:]+)*)["'`]''',
     (1,), 0),
]

# -------- SECRET PATTERNS --------
# (name, regex, capture_slots, flags, base confidence)

SECRET_PATTERNS = [
    # Cloud / SaaS credentials with a fixed prefix
    ("aws_access_key", r"\b((?:AKIA|ASIA)[0-9A-Z]{16})\b", (1,), 0, 85),
    ("google_api_key", r"\b(AIza[0-9A-Za-z_\-]{35})", (1,), 0, 80),
    ("stripe_secret_key", r"\b(sk_live_[0-9a-zA-Z]{24,99})", (1,), 0, 90),
    ("stripe_restricted_key", r"\b(rk_live_[0-9a-zA-Z]{24,99})", (1,), 0, 85),
    # Publishable keys are meant to ship to browsers
    ("stripe_publishable_key", r"\b(pk_(?:live|test)_[0-9a-zA-Z]{24,99})", (1,), 0, 30),
    ("github_token", r"\b(gh[pousr]_[A-Za-z0-9]{36,255})", (1,), 0, 90),
    ("slack_token", r"\b(xox[baprs]-[0-9A-Za-z\-]{10,72})", (1,), 0, 85),
    ("slack_webhook",
     r"(https://hooks\.slack\.com/services/T[A-Za-z0-9_]+/B[A-Za-z0-9_]+/[A-Za-z0-9_]+)",
     (1,), 0, 85),
    ("sendgrid_api_key", r"\b(SG\.[A-Za-z0-9_\-]{22}\.[A-Za-z0-9_\-]{43})", (1,), 0, 90),
    ("twilio_api_key", r"\b(SK[0-9a-fA-F]{32})\b", (1,), 0, 60),
    ("mailgun_api_key", r"\b(key-[0-9a-zA-Z]{32})\b", (1,), 0, 70),
    ("json_web_token",
     r"\b(eyJ[A-Za-z0-9_\-]{10,}\.eyJ[A-Za-z0-9_\-]{10,}\.[A-Za-z0-9_\-]{10,})",
     (1,), 0, 65),
    ("private_key",
     r"(-----BEGIN (?:RSA |EC |DSA |OPENSSH |PGP )?PRIVATE KEY(?: BLOCK)?-----)",
     (1,), 0, 95),

    # Generic assignments; value must be a quoted literal
    ("generic_api_key",
     r'''(?:api[_-]?key|apikey)["']?\s*[:=]\s*["'`]([A-Za-z0-9_\-]{16,})["'`]''',
     (1,), re.I, 55),
    ("generic_secret",
     r'''(?:client[_-]?secret|secret[_-]?key|secret)["']?\s*[:=]\s*["'`]([^"'`\s]{12,})["'`]''',
     (1,), re.I, 50),
    ("generic_token",
     r'''(?:access[_-]?token|auth[_-]?token|token)["']?\s*[:=]\s*["'`]([A-Za-z0-9_\-.=]{16,})["'`]''',
     (1,), re.I, 45),
    ("hardcoded_password",
     r'''(?:password|passwd|pwd)["']?\s*[:=]\s*["'`]([^"'`\s]{6,})["'`]''',
     (1,), re.I, 45),
    ("bearer_token", r"\bbearer\s+([A-Za-z0-9\-._~+/]{20,}=*)", (1,), re.I, 50),
]


class PatternLibrary:
    """
    Ordered, validated registry of extraction patterns.

    Iteration order is declaration order, which decides pattern attribution
    when the same value is matched by more than one pattern.
    """

    def __init__(self, patterns: Iterable[ExtractionPattern]):
        self._patterns: Dict[str, ExtractionPattern] = {}
        for pat in patterns:
            if not isinstance(pat, ExtractionPattern):
                raise PatternError(f"Expected ExtractionPattern, got {type(pat).__name__}")
            if pat.name in self._patterns:
                raise PatternError(f"Duplicate pattern name: {pat.name}")
            self._patterns[pat.name] = pat
        logger.debug("Built pattern library with %d patterns", len(self._patterns))

    @classmethod
    def default(cls) -> "PatternLibrary":
        """Library holding the built-in endpoint and secret patterns."""
        return cls(_default_patterns())

    def __iter__(self) -> Iterator[ExtractionPattern]:
        return iter(self._patterns.values())

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, name) -> bool:
        return name in self._patterns

    def get(self, name: str) -> Optional[ExtractionPattern]:
        return self._patterns.get(name)

    def names(self) -> List[str]:
        return list(self._patterns)

    def for_kind(self, kind: ArtifactKind) -> List[ExtractionPattern]:
        return [p for p in self._patterns.values() if p.kind is kind]

    def extend(self, extra: Iterable[ExtractionPattern]) -> "PatternLibrary":
        """Return a new library with extra patterns appended after the existing ones."""
        return PatternLibrary(list(self) + list(extra))


def _default_patterns() -> List[ExtractionPattern]:
    out = []
    for name, regex, slots, flags in ENDPOINT_PATTERNS:
        out.append(compile_pattern(name, ArtifactKind.ENDPOINT, regex, slots, flags))
    for name, regex, slots, flags, confidence in SECRET_PATTERNS:
        out.append(compile_pattern(name, ArtifactKind.SECRET, regex, slots, flags, confidence))
    return out


def patterns_from_config(section: Dict) -> List[ExtractionPattern]:
    """
    Build extra patterns from the "patterns" section of a YAML config.

    Expected shape:

        patterns:
          endpoints:
            internal_rpc: '["''](/rpc/[a-z_]+)["'']'
          secrets:
            acme_token:
              regex: 'acme_[a-f0-9]{32}'
              confidence: 80
              slots: [0]

    Raises:
        PatternError: on any malformed entry
    """
    out = []
    if not section:
        return out
    if not isinstance(section, dict):
        raise PatternError("'patterns' config section must be a mapping")

    for key, kind in (("endpoints", ArtifactKind.ENDPOINT), ("secrets", ArtifactKind.SECRET)):
        entries = section.get(key) or {}
        if not isinstance(entries, dict):
            raise PatternError(f"'patterns.{key}' must be a mapping of name -> regex")
        for name, entry in entries.items():
            if isinstance(entry, str):
                entry = {"regex": entry}
            if not isinstance(entry, dict) or "regex" not in entry:
                raise PatternError(f"Pattern '{name}': expected a regex string or a mapping with 'regex'")
            flags = re.I if entry.get("ignore_case") else 0
            slots = entry.get("slots", [1])
            if isinstance(slots, int):
                slots = [slots]
            confidence = entry.get("confidence", 50 if kind is ArtifactKind.SECRET else 0)
            out.append(compile_pattern(name, kind, entry["regex"], slots, flags, confidence))
    return out


def load_patterns_file(path: Union[str, Path], confidence: int = 60) -> List[ExtractionPattern]:
    """
    Load extra secret patterns from a KEY=VALUE file.

    Blank lines and lines starting with '#' are ignored. Patterns without a
    capture group match as a whole (slot 0).

    Raises:
        PatternError: missing file, malformed line, or invalid regex (with line number)
    """
    env_file = Path(path)
    if not env_file.exists():
        raise PatternError(f"Patterns file not found: {env_file}")

    out = []
    with open(env_file, "r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()

            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                raise PatternError(f"{env_file}:{line_num}: expected KEY=REGEX")

            key, pattern_str = line.split("=", 1)
            key = key.strip().lower()
            pattern_str = pattern_str.strip()
            if not key or not pattern_str:
                raise PatternError(f"{env_file}:{line_num}: empty key or pattern")

            try:
                compiled = re.compile(pattern_str)
            except re.error as e:
                raise PatternError(f"{env_file}:{line_num}: invalid regex: {e}")

            slots = (1,) if compiled.groups else (0,)
            out.append(compile_pattern(key, ArtifactKind.SECRET, compiled, slots, confidence=confidence))

    logger.info("Loaded %d secret patterns from %s", len(out), env_file)
    return out
