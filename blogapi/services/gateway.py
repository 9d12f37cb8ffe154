"""
Blog API — Abstract Persistence Gateway
=========================================

What:  Abstract base class defining the contract for post storage.
Why:   Handlers and the post service only talk to this interface, so the
       storage engine can be replaced without touching request handling.
How:   Concrete implementations inherit from PostGateway and implement the
       five operations. SqlPostGateway (SQLAlchemy) is the one shipped.
Who:   Called by PostService; provided to routes via FastAPI dependencies.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence

from blogapi.models.post import BlogPost


class PostGateway(ABC):
    """
    Storage interface for blog posts.

    Contract:
        - Absence is reported by raising NotFoundError (get_by_id, update)
        - Store failures are wrapped in DatabaseError; driver details are
          logged, never propagated to the client
        - Each operation is a single round-trip; no retries
    """

    @abstractmethod
    async def list(self) -> Sequence[BlogPost]:
        """Every stored post, in store-default order. Empty when none exist."""
        ...

    @abstractmethod
    async def get_by_id(self, post_id: str) -> BlogPost:
        """
        Fetch one post.

        Raises:
            NotFoundError: No post has the given id.
        """
        ...

    @abstractmethod
    async def create(self, fields: Dict[str, Any]) -> BlogPost:
        """
        Persist a new post from {title, content, author}.

        Returns:
            The stored post, including its newly assigned id.
        """
        ...

    @abstractmethod
    async def update(self, post_id: str, partial_fields: Dict[str, Any]) -> None:
        """
        Apply only the keys present in `partial_fields`; other fields keep
        their stored values. The id is never modified.

        Raises:
            NotFoundError: No post has the given id.
        """
        ...

    @abstractmethod
    async def delete(self, post_id: str) -> None:
        """Remove a post. Deleting an id that does not exist is not an error."""
        ...
