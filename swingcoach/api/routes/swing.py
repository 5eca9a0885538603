"""
Swing analysis API endpoints.

Maps the two user actions onto HTTP:
1. Client creates a session (POST /sessions)
2. Client selects a video (POST /sessions/{session_id}/video)
3. Client requests analysis (POST /sessions/{session_id}/analyze)
4. Client polls the session state (GET /sessions/{session_id})

Analysis runs in the background on the server's event loop. The analyze
endpoint returns immediately with the Analyzing state; clients poll
until the state is succeeded or failed.
"""

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from pydantic import BaseModel, Field

from ...core.analysis.controller import AnalysisController
from ...core.analysis.models import AnalysisState, VideoAsset
from ..dependencies import SessionRegistryDep, SettingsDep
from ..sessions import SessionNotFound, SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------

class VideoInfo(BaseModel):
    """The selected video, as far as the client needs to know."""
    filename: str = Field(description="Original filename")
    media_type: str = Field(description="Declared media type, e.g. video/mp4")
    size_bytes: int = Field(description="File size in bytes")


class DrillItem(BaseModel):
    """A single practice drill."""
    name: str = Field(description="Drill name")
    purpose: str = Field(description="What the drill fixes")
    steps: list[str] = Field(description="Step-by-step instructions")
    frequency: str = Field(description="How often to practice")


class ReportBody(BaseModel):
    """The coaching report."""
    analysis: str = Field(description="Narrative swing analysis")
    issues: list[str] = Field(description="Key issues observed")
    drills: list[DrillItem] = Field(description="Recommended drills")


class SessionStateResponse(BaseModel):
    """Current state of an analysis session."""
    session_id: UUID = Field(description="Session identifier")
    status: str = Field(description="idle, ready, analyzing, succeeded or failed")
    attempt: int = Field(description="Monotonic attempt counter for this session")
    video: Optional[VideoInfo] = Field(default=None, description="Selected video, if any")
    report: Optional[ReportBody] = Field(default=None, description="Report when succeeded")
    error: Optional[str] = Field(default=None, description="Message when failed")


def to_response(session_id: UUID, state: AnalysisState) -> SessionStateResponse:
    """Render a controller state for the client."""
    video = None
    if state.asset is not None:
        video = VideoInfo(
            filename=state.asset.filename,
            media_type=state.asset.media_type,
            size_bytes=state.asset.size_bytes,
        )

    report = None
    if state.report is not None:
        report = ReportBody.model_validate(state.report.to_dict())

    return SessionStateResponse(
        session_id=session_id,
        status=state.kind.value,
        attempt=state.attempt,
        video=video,
        report=report,
        error=state.message,
    )


def _get_controller(registry: SessionRegistry, session_id: UUID) -> AnalysisController:
    try:
        return registry.get(session_id)
    except SessionNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found"
        )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/sessions",
    response_model=SessionStateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a session",
    description="Create an empty analysis session",
)
async def create_session(registry: SessionRegistryDep) -> SessionStateResponse:
    session_id, controller = registry.create()
    return to_response(session_id, controller.state)


@router.get(
    "/sessions/{session_id}",
    response_model=SessionStateResponse,
    summary="Get session state",
    description="Current state of the session: the only thing a client renders",
)
async def get_session(session_id: UUID, registry: SessionRegistryDep) -> SessionStateResponse:
    controller = _get_controller(registry, session_id)
    return to_response(session_id, controller.state)


@router.post(
    "/sessions/{session_id}/video",
    response_model=SessionStateResponse,
    summary="Select a swing video",
    description="Upload the video to analyze. Replaces any earlier selection and result.",
)
async def select_video(
    session_id: UUID,
    video: Annotated[UploadFile, File(description="Golf swing video (MP4, MOV, WebM, ...)")],
    registry: SessionRegistryDep,
    settings: SettingsDep,
) -> SessionStateResponse:
    """
    Select a video for the session.

    A non-video upload is not an HTTP error: it puts the session into
    the failed state with an invalid-file-type message, just like
    picking the wrong file in a file dialog.
    """
    controller = _get_controller(registry, session_id)

    logger.info(
        "Receiving video upload",
        extra={
            "session_id": str(session_id),
            "video_filename": video.filename,
            "content_type": video.content_type,
        }
    )

    data = await video.read()

    if len(data) > settings.max_video_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Video exceeds maximum size of {settings.max_video_size_mb}MB"
        )

    asset = VideoAsset.from_bytes(
        data,
        media_type=video.content_type or "",
        filename=video.filename or "swing.mp4",
    )
    state = controller.select_file(asset)
    return to_response(session_id, state)


@router.post(
    "/sessions/{session_id}/analyze",
    response_model=SessionStateResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Analyze the selected video",
    description=(
        "Start analysis in the background. A repeat request while this video "
        "is analyzing returns the current state; a request while an earlier "
        "video's analysis is still finishing is rejected with 409."
    ),
)
async def analyze_video(session_id: UUID, registry: SessionRegistryDep) -> SessionStateResponse:
    controller = _get_controller(registry, session_id)

    if controller.asset is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Select a video before requesting analysis"
        )

    task = controller.start_analysis()
    if task is None:
        logger.info("Analysis request ignored", extra={"session_id": str(session_id)})
        if not controller.state.is_analyzing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A previous analysis is still finishing, try again shortly"
            )

    return to_response(session_id, controller.state)


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="End a session",
    description="Discard the session and its video",
)
async def delete_session(session_id: UUID, registry: SessionRegistryDep) -> None:
    try:
        registry.close(session_id)
    except SessionNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found"
        )
