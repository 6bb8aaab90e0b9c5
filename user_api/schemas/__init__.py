"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at the system boundary (request bodies, responses)
    - The same models feed the generated OpenAPI document
"""
