"""API Layer — FastAPI routes and error handlers.

Invariants:
    - All user endpoints return JSON
    - Errors are rendered only by error_handlers.py
"""
