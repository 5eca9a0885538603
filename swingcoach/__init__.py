"""
SwingCoach AI - An AI-powered golf swing coaching service.

This package contains the complete application:
- core: Framework-agnostic swing analysis pipeline and state machine
- infrastructure: External service integrations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
