"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the 24-char hex form of a store-generated ObjectId
    - All valid modes encoded as Enums, no raw string matching
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)


# ─── Enums ───────────────────────────────────────────────────────

class ErrorMode(str, Enum):
    """How structured errors are rendered over HTTP."""
    COMPAT = "compat"   # HTTP 200 + {"message": ...}; missing record -> null
    STRICT = "strict"   # 400 / 404 / 500 + {"error": {...}}


class StoreOperation(str, Enum):
    """Driver operations, surfaced in errors and logs."""
    CONNECT = "connect"
    INSERT = "insert"
    FIND = "find"
    DELETE = "delete"
    UPDATE = "update"
