"""
In-memory registry of analysis sessions.

Each session is one AnalysisController. Nothing is persisted: a session
lives until it is deleted or the process exits.
"""

import logging
from typing import Callable
from uuid import UUID, uuid4

from ..core.analysis.controller import AnalysisController


logger = logging.getLogger(__name__)


class SessionNotFound(KeyError):
    """Raised when a session id is unknown."""
    pass


class SessionRegistry:
    """Maps session ids to their controllers."""

    def __init__(self, controller_factory: Callable[[], AnalysisController]) -> None:
        self._controller_factory = controller_factory
        self._sessions: dict[UUID, AnalysisController] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> tuple[UUID, AnalysisController]:
        session_id = uuid4()
        controller = self._controller_factory()
        self._sessions[session_id] = controller
        logger.info("Created analysis session", extra={"session_id": str(session_id)})
        return session_id, controller

    def get(self, session_id: UUID) -> AnalysisController:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFound(str(session_id)) from None

    def close(self, session_id: UUID) -> AnalysisController:
        """Drop a session, releasing its video. Returns the closed controller."""
        controller = self._sessions.pop(session_id, None)
        if controller is None:
            raise SessionNotFound(str(session_id))
        controller.reset()
        logger.info("Closed analysis session", extra={"session_id": str(session_id)})
        return controller
