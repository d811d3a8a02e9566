"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import List, Optional, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic async CRUD operations.

    Implementations raise ConflictError when a write breaks a uniqueness
    constraint and StoreUnavailableError when the store cannot be reached.
    Lookups by a malformed id behave like lookups of a missing id.
    """

    async def get_by_id(self, id: str) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    async def list(self) -> List[T]:
        """List all entities."""
        ...

    async def create(self, obj: T) -> T:
        """Persist a new entity and return it with its assigned ID."""
        ...

    async def replace(self, id: str, obj: T) -> Optional[T]:
        """Replace every mutable field of an existing entity."""
        ...

    async def delete(self, id: str) -> Optional[T]:
        """Delete an entity by ID, returning what was removed."""
        ...
