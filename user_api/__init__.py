"""User API Package — CRUD REST API over a MongoDB users collection.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
