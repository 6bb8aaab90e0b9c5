"""Core Layer — domain types, error hierarchy and boundary protocols.

Invariants:
    - No module in core/ imports from api/, infrastructure/, or schemas/
    - No IO happens here
"""
