"""
Infrastructure layer - external service integrations.

- anthropic: Claude API client that sends the encoded swing video

These wrappers translate between external formats and our domain models.
"""
