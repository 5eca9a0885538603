"""
Anthropic Claude API client wrapper.

Implements the VideoModelClient protocol from core.analysis.coach.
"""

from .client import AnthropicConfig, AnthropicVideoClient, create_anthropic_client

__all__ = ["AnthropicVideoClient", "AnthropicConfig", "create_anthropic_client"]
