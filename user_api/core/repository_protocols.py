"""Boundary Protocols — contracts between the routes and the document store.

Invariants:
    - Routes never import the driver; all store IO goes through UserRepository
    - Records cross the boundary as plain dicts keyed "_id", "name", "age", "email"
    - Summaries use the store's camelCase keys (deletedCount, matchedCount, ...)

Design Decisions:
    - Protocol over ABC: structural subtyping, tests and the Mongo implementation
      satisfy it without inheriting
"""

from typing import Any, Protocol

from user_api.core.domain_types import UserId


class UserRepository(Protocol):
    """Contract for user persistence, implemented in infrastructure/."""
    async def insert(self, data: dict[str, Any]) -> dict: ...
    async def find_all(self) -> list[dict]: ...
    async def find_by_id(self, user_id: UserId) -> dict | None: ...
    async def delete_by_id(self, user_id: UserId) -> dict: ...
    async def update_by_id(
        self, user_id: UserId, fields: dict[str, Any],
    ) -> dict: ...
