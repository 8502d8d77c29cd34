"""
Scan orchestration: fetch each eligible resource, run the pattern library
over its content and collect ranked findings.

Resources are processed by a bounded pool of asyncio workers (one worker by
default, which fetches and scans strictly one resource at a time). Each
resource produces an ordered list of first sightings; these are merged in
resource order so dedup decisions and tie ordering do not depend on the
worker count.

A failing resource never aborts the scan: fetch errors and processing
faults are logged, the resource counts as processed, and any findings it
produced before the fault are kept.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..config import (
    DEFAULT_MIN_CONFIDENCE, METHOD_CONTEXT_RADIUS, SCORE_CONTEXT_RADIUS,
    SECRET_CONTEXT_RADIUS,
)
from ..exceptions import ConfigurationError, ScannerError
from ..models import ArtifactKind, Finding, Resource
from ..utils import derive_base_url, extract_context, is_eligible
from .classifier import classify_kind, infer_method
from .dedup import Deduplicator
from .normalizer import (
    is_valid_endpoint, is_valid_secret, normalize_endpoint, normalize_secret,
)
from .patterns import ExtractionPattern, PatternLibrary
from .scoring import score_endpoint, score_secret

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], Any]

# (normalized value, source file, finding or None when below threshold)
Sighting = Tuple[str, str, Optional[Finding]]


@dataclass
class ScanOptions:
    """
    Tunables for one scan.

    Attributes:
        min_confidence: Acceptance threshold; lower-scoring findings are dropped
        workers: Number of resources in flight at once
        max_content_size: Skip resources whose body is longer than this (None = no limit)
    """

    min_confidence: int = DEFAULT_MIN_CONFIDENCE
    workers: int = 1
    max_content_size: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.min_confidence, int) or not 0 <= self.min_confidence <= 100:
            raise ConfigurationError("min_confidence must be an integer in [0, 100]")
        if not isinstance(self.workers, int) or self.workers < 1:
            raise ConfigurationError("workers must be a positive integer")
        if self.max_content_size is not None and (
            not isinstance(self.max_content_size, int) or self.max_content_size <= 0
        ):
            raise ConfigurationError("max_content_size must be a positive integer or None")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ScanOptions":
        """Build options from the "scan" section of a YAML config."""
        section = (config or {}).get("scan") or {}
        return cls(
            min_confidence=section.get("min_confidence", DEFAULT_MIN_CONFIDENCE),
            workers=section.get("workers", 1),
            max_content_size=section.get("max_content_size"),
        )


class ScanOrchestrator:
    """
    Runs the extraction pipeline over a set of resources.

    Pipeline per match:
        normalize -> validate -> dedup -> infer method -> score -> threshold

    Attributes:
        library (PatternLibrary): Patterns to apply
        options (ScanOptions): Threshold, worker count, size limit
    """

    def __init__(self, library: Optional[PatternLibrary] = None,
                 options: Optional[ScanOptions] = None):
        self.library = library if library is not None else PatternLibrary.default()
        self.options = options if options is not None else ScanOptions()
        logger.debug(
            "Initialized ScanOrchestrator(patterns=%d, min_confidence=%s, workers=%s, max_content_size=%s)",
            len(self.library), self.options.min_confidence, self.options.workers,
            self.options.max_content_size,
        )

    def eligible(self, resources: Iterable[Resource], kind: ArtifactKind) -> List[Resource]:
        """Resources worth scanning for this artifact kind, in input order."""
        return [
            r for r in resources
            if is_eligible(getattr(r, "url", ""), getattr(r, "mime_type", ""), kind)
        ]

    async def scan(self, resources: Iterable[Resource],
                   on_progress: Optional[ProgressCallback] = None,
                   kind: ArtifactKind = ArtifactKind.ENDPOINT) -> List[Finding]:
        """
        Scan resources and return findings sorted by confidence (highest first).

        Args:
            resources: Captured resources; each is fetched at most once
            on_progress: Optional callable(processed, total), sync or async,
                invoked once after every eligible resource
            kind: Which artifacts to extract

        Returns:
            list of Finding, confidence-descending; ties keep discovery order

        Raises:
            ScannerError: kind is not an artifact kind
        """
        try:
            kind = ArtifactKind(kind)
        except ValueError:
            raise ScannerError(f"Unknown artifact kind: {kind!r}") from None
        targets = self.eligible(resources, kind)
        total = len(targets)
        if total == 0:
            logger.info("No resources eligible for %s extraction", kind.value)
            return []

        patterns = self.library.for_kind(kind)
        logger.info("Scanning %d resources for %ss with %d patterns", total, kind.value, len(patterns))

        results: List[List[Sighting]] = [[] for _ in range(total)]
        queue: asyncio.Queue = asyncio.Queue()
        for item in enumerate(targets):
            queue.put_nowait(item)

        processed = 0

        async def worker():
            nonlocal processed
            while True:
                try:
                    index, resource = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                results[index] = await self._scan_resource(resource, patterns)
                processed += 1
                if on_progress is not None:
                    ret = on_progress(processed, total)
                    if inspect.isawaitable(ret):
                        await ret

        workers = min(self.options.workers, total)
        await asyncio.gather(*(worker() for _ in range(workers)))

        findings = self._merge(results)
        logger.info("Scan complete: %d %s findings from %d resources", len(findings), kind.value, total)
        return findings

    def _merge(self, results: List[List[Sighting]]) -> List[Finding]:
        dedup = Deduplicator()
        findings = []
        for sightings in results:
            for value, source_file, finding in sightings:
                if not dedup.check_and_add(value, source_file):
                    continue
                if finding is not None:
                    findings.append(finding)
        # list.sort is stable, also with reverse=True
        findings.sort(key=lambda f: f.confidence, reverse=True)
        return findings

    async def _scan_resource(self, resource: Resource,
                             patterns: List[ExtractionPattern]) -> List[Sighting]:
        sightings: List[Sighting] = []
        source_file = str(getattr(resource, "url", "") or "")

        try:
            content = await resource.fetch_content()
        except Exception:
            logger.warning("Content fetch failed for %s", source_file, exc_info=True)
            return sightings

        if not content:
            logger.debug("No content for %s, skipping", source_file)
            return sightings

        if isinstance(content, bytes):
            content = content.decode("utf-8", errors="replace")
        if not isinstance(content, str):
            logger.warning("Non-text content (%s) for %s, skipping", type(content).__name__, source_file)
            return sightings

        size = len(content)
        max_size = self.options.max_content_size
        if max_size is not None and size > max_size:
            logger.info("Skipping %s because size %d > max_content_size %d", source_file, size, max_size)
            return sightings

        logger.info("Processing %s (%d chars)", source_file, size)
        try:
            self.extract(content, source_file, patterns, sightings)
        except Exception:
            logger.exception("Error extracting artifacts from %s; keeping %d earlier sightings",
                             source_file, len(sightings))
        return sightings

    def extract(self, content: str, source_file: str,
                patterns: Iterable[ExtractionPattern],
                sightings: Optional[List[Sighting]] = None) -> List[Sighting]:
        """
        Run patterns over one resource's content (synchronous, no I/O).

        Appends first sightings to `sightings` as it goes, so a caller that
        catches an exception still holds everything recorded before it.
        """
        if sightings is None:
            sightings = []
        local = Deduplicator()
        base_url = derive_base_url(source_file)
        min_confidence = self.options.min_confidence

        for pattern in patterns:
            kind = classify_kind(pattern)
            for cand in pattern.candidates(content, source_file):
                if kind is ArtifactKind.ENDPOINT:
                    value = normalize_endpoint(cand.raw_value)
                    if not is_valid_endpoint(value):
                        continue
                    if not local.check_and_add(value, source_file):
                        continue

                    method_ctx = extract_context(content, cand.match_index, len(value), *METHOD_CONTEXT_RADIUS)
                    method = infer_method(value, method_ctx.text)
                    score_ctx = extract_context(content, cand.match_index, 0, *SCORE_CONTEXT_RADIUS)
                    confidence = score_endpoint(value, method, score_ctx.text)
                    finding = None
                    if confidence >= min_confidence:
                        finding = Finding(
                            value=value,
                            kind=kind,
                            confidence=confidence,
                            source_file=source_file,
                            pattern_name=pattern.name,
                            method=method,
                            base_url=base_url,
                        )
                else:
                    value = normalize_secret(cand.raw_value)
                    if not is_valid_secret(value):
                        continue
                    if not local.check_and_add(value, source_file):
                        continue

                    ctx = extract_context(content, cand.match_index, cand.match_length, *SECRET_CONTEXT_RADIUS)
                    confidence = score_secret(value, pattern, ctx.text)
                    finding = None
                    if confidence >= min_confidence:
                        finding = Finding(
                            value=value,
                            kind=kind,
                            confidence=confidence,
                            source_file=source_file,
                            pattern_name=pattern.name,
                        )

                if finding is not None:
                    logger.debug("%s %s (confidence=%d, pattern=%s) @ %s",
                                 kind.value, value, confidence, pattern.name, source_file)
                sightings.append((value, source_file, finding))
        return sightings


async def scan(resources: Iterable[Resource],
               on_progress: Optional[ProgressCallback] = None,
               kind: ArtifactKind = ArtifactKind.ENDPOINT,
               options: Optional[ScanOptions] = None,
               library: Optional[PatternLibrary] = None) -> List[Finding]:
    """Run one scan with a fresh orchestrator (nothing is shared between calls)."""
    orchestrator = ScanOrchestrator(library=library, options=options)
    return await orchestrator.scan(resources, on_progress, kind=kind)


async def scan_endpoints(resources: Iterable[Resource],
                         on_progress: Optional[ProgressCallback] = None,
                         **kwargs) -> List[Finding]:
    """
    Extract candidate API endpoints from script resources.

    Example:
        >>> findings = asyncio.run(scan_endpoints(load_har("capture.har")))
        >>> findings[0].method, findings[0].value
        ('GET', '/api/users/123')
    """
    return await scan(resources, on_progress, kind=ArtifactKind.ENDPOINT, **kwargs)


async def scan_secrets(resources: Iterable[Resource],
                       on_progress: Optional[ProgressCallback] = None,
                       **kwargs) -> List[Finding]:
    """Extract candidate leaked secrets from script and JSON resources."""
    return await scan(resources, on_progress, kind=ArtifactKind.SECRET, **kwargs)


async def scan_all(resources: Iterable[Resource],
                   on_progress: Optional[Callable[[str, int, int], Any]] = None,
                   **kwargs) -> Dict[str, List[Finding]]:
    """
    Run endpoint and secret extraction back to back.

    on_progress receives (kind, processed, total).
    """
    resources = list(resources)
    report = {}
    for key, kind in (("endpoints", ArtifactKind.ENDPOINT), ("secrets", ArtifactKind.SECRET)):
        cb = None
        if on_progress is not None:
            def cb(processed, total, _kind=kind.value):
                return on_progress(_kind, processed, total)
        report[key] = await scan(resources, cb, kind=kind, **kwargs)
    return report
