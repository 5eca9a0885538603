"""
Core business logic for golf swing coaching.

This module is framework-agnostic - it doesn't import FastAPI, the
Anthropic SDK, or any other infrastructure concern. The pipeline can be
exercised end to end with an in-memory model client.
"""
