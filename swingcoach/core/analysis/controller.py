"""
Analysis controller - the state machine behind the swing coach.

The controller owns the selected video and the live AnalysisState, and is
the only thing that writes either. It runs encode -> request -> extract
strictly in sequence and publishes exactly one outcome per attempt.

Two guards keep the published state honest:
- Single flight: a request while a pipeline is still running is a no-op.
- Attempt ids: every selection and every analysis bumps a counter. A
  pipeline that finishes after the user picked another file finds its id
  out of date and its result is dropped instead of overwriting the new
  selection.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .coach import SwingCoach
from .encoding import encode_video
from .errors import EncodingFailed, ExtractionFailed, RequestFailed, SwingAnalysisError
from .extraction import extract_report
from .models import (
    AnalysisReport,
    AnalysisState,
    EncodedPayload,
    FailureKind,
    VideoAsset,
)


logger = logging.getLogger(__name__)

INVALID_FILE_TYPE_MESSAGE = "Invalid file type: please select a valid video file"
ANALYSIS_FAILED_PREFIX = "Failed to analyze swing: "

StateListener = Callable[[AnalysisState], None]
Encoder = Callable[[VideoAsset], Awaitable[EncodedPayload]]
Extractor = Callable[[str], AnalysisReport]


class AnalysisController:
    """
    Orchestrates one user's swing analysis session.

    Designed for a single event loop: all mutation happens between
    awaits, so no locks are needed. The in-flight flag is a logical
    guard, not a memory one.
    """

    def __init__(
        self,
        coach: SwingCoach,
        encoder: Encoder = encode_video,
        extractor: Extractor = extract_report,
    ) -> None:
        self._coach = coach
        self._encoder = encoder
        self._extractor = extractor
        self._state = AnalysisState.idle()
        self._asset: Optional[VideoAsset] = None
        self._attempt = 0
        self._in_flight = False
        self._listeners: list[StateListener] = []
        self._tasks: set[asyncio.Task] = set()

    # -----------------------------------------------------------------------
    # Observation
    # -----------------------------------------------------------------------

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def asset(self) -> Optional[VideoAsset]:
        return self._asset

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called after every transition.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -----------------------------------------------------------------------
    # User actions
    # -----------------------------------------------------------------------

    def select_file(self, asset: VideoAsset) -> AnalysisState:
        """
        Replace the current selection.

        A video becomes Ready and clears any earlier report or error.
        Anything else is an invalid selection and releases the old asset.
        """
        self._attempt += 1

        if not asset.is_video:
            logger.warning(
                "Rejected non-video selection",
                extra={"video_filename": asset.filename, "media_type": asset.media_type},
            )
            self._asset = None
            self._publish(AnalysisState.failed(
                INVALID_FILE_TYPE_MESSAGE,
                FailureKind.INVALID_SELECTION,
                attempt=self._attempt,
            ))
            return self._state

        self._asset = asset
        logger.info(
            "Video selected",
            extra={
                "asset_id": str(asset.id),
                "video_filename": asset.filename,
                "media_type": asset.media_type,
                "size_bytes": asset.size_bytes,
            },
        )
        self._publish(AnalysisState.ready(asset, attempt=self._attempt))
        return self._state

    def start_analysis(self) -> Optional["asyncio.Task[AnalysisState]"]:
        """
        Move to Analyzing and schedule the pipeline on the running loop.

        Returns None when the request is ignored: nothing is selected,
        or a pipeline is already running. Must be called from inside
        the event loop.
        """
        if self._in_flight:
            logger.info("Analysis already in flight, ignoring request")
            return None

        asset = self._asset
        if asset is None:
            logger.info("No video selected, ignoring analysis request")
            return None

        self._attempt += 1
        attempt = self._attempt
        self._in_flight = True

        try:
            self._publish(AnalysisState.analyzing(asset, attempt))
            task = asyncio.get_running_loop().create_task(self._analyze(asset, attempt))
        except BaseException:
            self._in_flight = False
            raise

        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def request_analysis(self) -> AnalysisState:
        """
        Run the pipeline on the selected video and wait for it.

        Returns the state once this call is done with it. When ignored
        the state is returned unchanged.
        """
        task = self.start_analysis()
        if task is not None:
            await task
        return self._state

    def reset(self) -> AnalysisState:
        """End the session: release the asset and go back to Idle."""
        self._attempt += 1
        self._asset = None
        self._publish(AnalysisState.idle())
        return self._state

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------

    async def _analyze(self, asset: VideoAsset, attempt: int) -> AnalysisState:
        try:
            report = await self._run_pipeline(asset)
            outcome = AnalysisState.succeeded(report, asset=asset, attempt=attempt)
        except SwingAnalysisError as e:
            logger.error(
                "Swing analysis failed",
                extra={
                    "asset_id": str(asset.id),
                    "attempt": attempt,
                    "failure": e.kind.value,
                    "error": e.message,
                },
            )
            outcome = AnalysisState.failed(
                ANALYSIS_FAILED_PREFIX + e.message,
                e.kind,
                asset=asset,
                attempt=attempt,
            )
        except asyncio.CancelledError:
            if attempt == self._attempt:
                self._publish(AnalysisState.failed(
                    ANALYSIS_FAILED_PREFIX + "analysis was cancelled",
                    FailureKind.REQUEST_FAILED,
                    asset=asset,
                    attempt=attempt,
                ))
            raise
        finally:
            self._in_flight = False

        if attempt != self._attempt:
            logger.info(
                "Discarding stale analysis result",
                extra={"attempt": attempt, "latest_attempt": self._attempt},
            )
            return self._state

        logger.info(
            "Swing analysis finished",
            extra={"asset_id": str(asset.id), "attempt": attempt, "status": outcome.kind.value},
        )
        self._publish(outcome)
        return self._state

    async def _run_pipeline(self, asset: VideoAsset) -> AnalysisReport:
        try:
            payload = await self._encoder(asset)
        except SwingAnalysisError:
            raise
        except Exception as e:
            raise EncodingFailed(f"Could not encode video: {e}") from e

        try:
            raw_response = await self._coach.request_report(payload)
        except SwingAnalysisError:
            raise
        except Exception as e:
            raise RequestFailed(f"Analysis request failed: {e}") from e

        try:
            return self._extractor(raw_response)
        except SwingAnalysisError:
            raise
        except Exception as e:
            raise ExtractionFailed(f"Could not parse analysis: {e}") from e

    def _publish(self, state: AnalysisState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
