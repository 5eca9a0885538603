"""
FastAPI layer: routes, dependencies and the in-memory session registry.
"""
