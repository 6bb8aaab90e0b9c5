"""Infrastructure Layer — document store access and cross-cutting concerns.

Invariants:
    - All driver calls wrapped with error mapping to core/errors.py
    - Nothing here imports from api/
"""
