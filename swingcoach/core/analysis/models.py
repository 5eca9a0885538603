"""
Domain models for golf swing analysis.

These models represent the core business concepts. They have no dependencies
on external frameworks or APIs: the domain is expressible without knowing
how a video is uploaded or how a report is rendered.
"""

import asyncio
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Protocol
from uuid import UUID, uuid4


VIDEO_MEDIA_PREFIX = "video/"


class StateKind(Enum):
    """The five lifecycle states the presentation layer can render."""
    IDLE = "idle"
    READY = "ready"
    ANALYZING = "analyzing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FailureKind(Enum):
    """
    Why an attempt failed.

    Kept on the failed state for diagnostics. Users only ever see
    the message, never the kind.
    """
    INVALID_SELECTION = "invalid_selection"
    ENCODING_FAILED = "encoding_failed"
    REQUEST_FAILED = "request_failed"
    EXTRACTION_FAILED = "extraction_failed"


# ---------------------------------------------------------------------------
# Video sources
# ---------------------------------------------------------------------------

class VideoSource(Protocol):
    """Anything that can hand over the full bytes of a video."""

    async def read(self) -> bytes:
        ...


class BytesSource:
    """Video bytes already held in memory (e.g. an upload)."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    async def read(self) -> bytes:
        return self._data


class FileSource:
    """
    Video bytes on local disk.

    The read runs in a worker thread so the event loop stays free
    while large files load.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    async def read(self) -> bytes:
        return await asyncio.to_thread(self._path.read_bytes)


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VideoAsset:
    """
    A user-selected video plus what we know about it without reading it.

    Frozen because a selection is never edited; picking a different
    file produces a new asset.
    """
    filename: str
    media_type: str
    size_bytes: int
    source: VideoSource = field(repr=False, compare=False)
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            raise ValueError("Video size cannot be negative")

    @property
    def is_video(self) -> bool:
        return self.media_type.startswith(VIDEO_MEDIA_PREFIX)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        media_type: str,
        filename: str = "swing.mp4",
    ) -> "VideoAsset":
        return cls(
            filename=filename,
            media_type=media_type or "",
            size_bytes=len(data),
            source=BytesSource(data),
        )

    @classmethod
    def from_path(
        cls,
        path: Path,
        media_type: Optional[str] = None,
    ) -> "VideoAsset":
        """
        Build an asset for a file on disk.

        When no media type is given it is guessed from the extension;
        an unknown extension yields an empty type, which the controller
        rejects as an invalid selection.
        """
        path = Path(path)
        if media_type is None:
            media_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            media_type=media_type or "",
            size_bytes=path.stat().st_size,
            source=FileSource(path),
        )


@dataclass(frozen=True)
class EncodedPayload:
    """Base64 video bytes ready to embed in a request, with their media type."""
    media_type: str
    data: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("Encoded payload cannot be empty")
        if self.data.startswith("data:"):
            raise ValueError("Encoded payload must not carry a data URI prefix")


@dataclass(frozen=True)
class Drill:
    """A practice drill that targets one of the observed issues."""
    name: str
    purpose: str
    steps: tuple[str, ...]
    frequency: str

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("Drill must have at least one step")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "purpose": self.purpose,
            "steps": list(self.steps),
            "frequency": self.frequency,
        }


@dataclass(frozen=True)
class AnalysisReport:
    """
    The structured coaching result for one swing.

    Only the extractor builds these, and only from a document that
    passed validation. There is no such thing as a partial report.
    """
    analysis: str
    issues: tuple[str, ...] = ()
    drills: tuple[Drill, ...] = ()

    def __post_init__(self) -> None:
        if not self.analysis.strip():
            raise ValueError("Report analysis cannot be empty")

    def to_dict(self) -> dict[str, Any]:
        """The report in the same shape the model was asked to produce."""
        return {
            "analysis": self.analysis,
            "issues": list(self.issues),
            "drills": [drill.to_dict() for drill in self.drills],
        }


# ---------------------------------------------------------------------------
# Lifecycle state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalysisState:
    """
    The single source of truth for what the presentation layer renders.

    Build states through the named constructors; they keep the
    kind-specific fields consistent (a succeeded state always has a
    report, a failed state always has a message).
    """
    kind: StateKind = StateKind.IDLE
    asset: Optional[VideoAsset] = None
    report: Optional[AnalysisReport] = None
    message: Optional[str] = None
    failure: Optional[FailureKind] = None
    attempt: int = 0

    @classmethod
    def idle(cls) -> "AnalysisState":
        return cls()

    @classmethod
    def ready(cls, asset: VideoAsset, attempt: int = 0) -> "AnalysisState":
        return cls(kind=StateKind.READY, asset=asset, attempt=attempt)

    @classmethod
    def analyzing(cls, asset: VideoAsset, attempt: int) -> "AnalysisState":
        return cls(kind=StateKind.ANALYZING, asset=asset, attempt=attempt)

    @classmethod
    def succeeded(
        cls,
        report: AnalysisReport,
        asset: Optional[VideoAsset] = None,
        attempt: int = 0,
    ) -> "AnalysisState":
        return cls(
            kind=StateKind.SUCCEEDED,
            asset=asset,
            report=report,
            attempt=attempt,
        )

    @classmethod
    def failed(
        cls,
        message: str,
        failure: FailureKind,
        asset: Optional[VideoAsset] = None,
        attempt: int = 0,
    ) -> "AnalysisState":
        return cls(
            kind=StateKind.FAILED,
            asset=asset,
            message=message,
            failure=failure,
            attempt=attempt,
        )

    @property
    def is_analyzing(self) -> bool:
        return self.kind == StateKind.ANALYZING
