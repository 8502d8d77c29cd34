"""
Extraction engine for endpoints and secrets.

Provides:
- Pattern library (declarative, validated at construction)
- HTTP method inference from surrounding code
- Confidence scoring, normalization and validation
- Async scan orchestration with progress reporting
"""

from .patterns import (
    ExtractionPattern,
    PatternLibrary,
    compile_pattern,
    load_patterns_file,
    patterns_from_config,
)
from .classifier import infer_method, classify_kind
from .scoring import score_endpoint, score_secret
from .normalizer import (
    normalize_endpoint,
    is_valid_endpoint,
    normalize_secret,
    is_valid_secret,
)
from .dedup import Deduplicator
from .orchestrator import (
    ScanOptions,
    ScanOrchestrator,
    scan,
    scan_endpoints,
    scan_secrets,
    scan_all,
)

__all__ = [
    'ExtractionPattern',
    'PatternLibrary',
    'compile_pattern',
    'load_patterns_file',
    'patterns_from_config',
    'infer_method',
    'classify_kind',
    'score_endpoint',
    'score_secret',
    'normalize_endpoint',
    'is_valid_endpoint',
    'normalize_secret',
    'is_valid_secret',
    'Deduplicator',
    'ScanOptions',
    'ScanOrchestrator',
    'scan',
    'scan_endpoints',
    'scan_secrets',
    'scan_all',
]
