"""
FastAPI dependency injection.

Dependencies provide instances of services, clients, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden in tests via app.dependency_overrides
- Configuration is centralized

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends

from ..config.settings import Settings, get_settings
from ..core.analysis.coach import SwingCoach
from ..core.analysis.controller import AnalysisController
from ..infrastructure.anthropic.client import create_anthropic_client
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)

# Sessions are process-wide: every request for a session id must see the
# same controller.
_session_registry: Optional[SessionRegistry] = None


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def build_swing_coach(settings: Settings) -> SwingCoach:
    """Create a SwingCoach backed by Claude."""
    model_client = create_anthropic_client(
        api_key=settings.anthropic_api_key,
        model=settings.anthropic_model,
        max_tokens=settings.anthropic_max_tokens,
    )
    return SwingCoach(model_client=model_client)


def get_session_registry(
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionRegistry:
    """
    Provide the shared session registry.

    Created on first use. Every controller shares one coach, and with
    it one Anthropic client and its connection pool.
    """
    global _session_registry

    if _session_registry is None:
        coach = build_swing_coach(settings)
        _session_registry = SessionRegistry(lambda: AnalysisController(coach))
        logger.info("Created session registry", extra={"model": settings.anthropic_model})

    return _session_registry


def reset_session_registry() -> None:
    """Forget every session. Used at shutdown and in tests."""
    global _session_registry
    _session_registry = None


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

SessionRegistryDep = Annotated[SessionRegistry, Depends(get_session_registry)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
