"""
Value types passed between the extraction stages.

Candidates and contexts are scratch values scoped to a single match; only
Findings and ScanProgress leave the orchestrator.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Protocol, runtime_checkable


class ArtifactKind(str, enum.Enum):
    ENDPOINT = "endpoint"
    SECRET = "secret"


@runtime_checkable
class Resource(Protocol):
    """
    One captured network exchange.

    Providers own how the body is retrieved; the engine only awaits
    fetch_content() once per scan and never mutates the resource.
    """

    url: str
    mime_type: str

    async def fetch_content(self) -> Optional[str]:
        ...


@dataclass(frozen=True)
class Candidate:
    raw_value: str
    match_index: int
    match_length: int
    pattern_name: str
    source_file: str


@dataclass(frozen=True)
class Context:
    text: str
    start_offset: int


@dataclass(frozen=True)
class Finding:
    """
    A scored, validated, deduplicated extraction result.

    Endpoint findings carry method and base_url; secret findings leave both
    as None.
    """

    value: str
    kind: ArtifactKind
    confidence: int
    source_file: str
    pattern_name: str
    method: Optional[str] = None
    base_url: Optional[str] = None

    @property
    def full_url(self) -> str:
        """Absolute URL for relative endpoints when the base is known."""
        if self.value.startswith("/") and self.base_url:
            return self.base_url + self.value
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        if self.kind is ArtifactKind.SECRET:
            data.pop("method")
            data.pop("base_url")
        else:
            data["full_url"] = self.full_url
        return data


@dataclass(frozen=True)
class ScanProgress:
    processed: int
    total: int

    @property
    def percent(self) -> int:
        if self.total <= 0:
            return 100
        return round(self.processed * 100 / self.total)

    @property
    def done(self) -> bool:
        return self.processed >= self.total
