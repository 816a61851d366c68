"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import Any, List, Optional, Protocol, Sequence, Tuple, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for filter-driven CRUD operations."""

    def get(self, params: Any) -> Optional[T]:
        """Get a single entity matching the filter, or None.

        Raises InvalidInputError when the filter has no field set.
        """
        ...

    def list(self, params: Any) -> Tuple[List[T], int]:
        """List entities matching the filter, with their count."""
        ...

    def create(self, obj_in: Any) -> T:
        """Create a new entity."""
        ...

    def create_batch(self, objs_in: Sequence[Any]) -> None:
        """Create several entities with a single INSERT statement."""
        ...

    def update(self, params: Any, obj_in: Any) -> int:
        """Update entities matching the filter; returns the affected row count."""
        ...

    def delete(self, params: Any) -> int:
        """Delete entities matching the filter; returns the affected row count."""
        ...
