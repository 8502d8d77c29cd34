"""
Artifact Scanner - endpoint and secret extraction from captured traffic.

This library provides:
- A declarative pattern library for API endpoints and leaked secrets
- HTTP method inference and heuristic confidence scoring
- An async scan orchestrator with progress reporting
- Resource providers for HAR captures and live URLs

Quick Start:
    >>> import asyncio
    >>> from artifact_scanner import load_har, scan_endpoints
    >>>
    >>> resources = load_har("capture.har")
    >>> findings = asyncio.run(scan_endpoints(resources))
    >>> for f in findings:
    ...     print(f.confidence, f.method, f.value)

For CLI usage:
    $ artifact-scanner scan-har capture.har --kind all
    $ artifact-scanner scan-url https://example.com/static/app.js
"""

from .__version__ import (
    __version__,
    __version_info__,
    __title__,
    __description__,
    __author__,
    __license__,
)

_LAZY = {
    # Engine
    "ScanOrchestrator": ".extractors",
    "ScanOptions": ".extractors",
    "PatternLibrary": ".extractors",
    "ExtractionPattern": ".extractors",
    "scan": ".extractors",
    "scan_endpoints": ".extractors",
    "scan_secrets": ".extractors",
    "scan_all": ".extractors",

    # Models
    "ArtifactKind": ".models",
    "Finding": ".models",
    "ScanProgress": ".models",
    "Resource": ".models",

    # Providers
    "HarResource": ".sources",
    "RemoteResource": ".sources",
    "TextResource": ".sources",
    "load_har": ".sources",
    "open_session": ".sources",

    # Exceptions
    "ArtifactScannerError": ".exceptions",
    "ScannerError": ".exceptions",
    "ConfigurationError": ".exceptions",
    "PatternError": ".exceptions",
    "ValidationError": ".exceptions",
    "ResourceError": ".exceptions",
}


# Lazy imports keep `artifact-scanner version` free of heavy imports
def __getattr__(name):
    """Lazy import for the public API."""
    module_name = _LAZY.get(name)
    if module_name is None:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
    import importlib
    module = importlib.import_module(module_name, __name__)
    value = getattr(module, name)
    globals()[name] = value
    return value


__all__ = [
    # Version
    "__version__",
    "__version_info__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
] + list(_LAZY)
