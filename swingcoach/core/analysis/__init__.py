"""
Golf swing analysis logic.

Contains the domain models, the encode -> request -> extract pipeline
stages, and the controller that runs them.
"""

from .models import (
    AnalysisReport,
    AnalysisState,
    BytesSource,
    Drill,
    EncodedPayload,
    FailureKind,
    FileSource,
    StateKind,
    VideoAsset,
)
from .errors import (
    EncodingFailed,
    ExtractionFailed,
    InvalidSelection,
    RequestFailed,
    SwingAnalysisError,
)
from .encoding import encode_video
from .coach import COACHING_PROMPT, SwingCoach, VideoModelClient
from .extraction import extract_report
from .controller import AnalysisController

__all__ = [
    "AnalysisReport",
    "AnalysisState",
    "BytesSource",
    "Drill",
    "EncodedPayload",
    "FailureKind",
    "FileSource",
    "StateKind",
    "VideoAsset",
    "EncodingFailed",
    "ExtractionFailed",
    "InvalidSelection",
    "RequestFailed",
    "SwingAnalysisError",
    "encode_video",
    "COACHING_PROMPT",
    "SwingCoach",
    "VideoModelClient",
    "extract_report",
    "AnalysisController",
]
