"""
Blog API — SQLAlchemy Persistence Gateway
===========================================

What:  PostGateway implementation over an async SQLAlchemy session.
Why:   Keeps every query and driver error translation in one place.
How:   Each method performs one statement and commits its own writes.
       Update is a single UPDATE ... SET of the supplied columns, so no
       read-modify-write happens in the application.

Error translation:
    SQLAlchemyError → logged with full detail → DatabaseError (generic message)
    None / zero rowcount → NotFoundError
"""

import logging
from typing import Any, Dict, List

from fastapi import Depends
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.database import get_db_session
from blogapi.exceptions import DatabaseError, NotFoundError
from blogapi.models.post import BlogPost
from blogapi.services.gateway import PostGateway

logger = logging.getLogger(__name__)


class SqlPostGateway(PostGateway):
    """Post storage backed by the `blog_posts` table."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list(self) -> List[BlogPost]:
        try:
            result = await self._session.execute(select(BlogPost))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve posts. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def get_by_id(self, post_id: str) -> BlogPost:
        try:
            result = await self._session.execute(
                select(BlogPost).where(BlogPost.id == post_id)
            )
            post = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the post. Please try again.",
                context={"post_id": post_id, "error_type": type(e).__name__},
            ) from e

        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        return post

    async def create(self, fields: Dict[str, Any]) -> BlogPost:
        post = BlogPost(
            title=fields["title"],
            content=fields["content"],
            author=fields["author"],
        )
        try:
            self._session.add(post)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Database error creating post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the post. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Post created: %s", post.id)
        return post

    async def update(self, post_id: str, partial_fields: Dict[str, Any]) -> None:
        try:
            if partial_fields:
                result = await self._session.execute(
                    update(BlogPost)
                    .where(BlogPost.id == post_id)
                    .values(**partial_fields)
                )
                matched = result.rowcount
                await self._session.commit()
            else:
                # Nothing to write, but a missing post is still a 404
                result = await self._session.execute(
                    select(BlogPost.id).where(BlogPost.id == post_id)
                )
                matched = 1 if result.scalar_one_or_none() is not None else 0
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Database error updating post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the post. Please try again.",
                context={"post_id": post_id, "error_type": type(e).__name__},
            ) from e

        if not matched:
            raise NotFoundError(resource="post", resource_id=post_id)
        logger.info("Post %s updated: %s", post_id, sorted(partial_fields))

    async def delete(self, post_id: str) -> None:
        try:
            result = await self._session.execute(
                delete(BlogPost).where(BlogPost.id == post_id)
            )
            removed = result.rowcount
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Database error deleting post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the post. Please try again.",
                context={"post_id": post_id, "error_type": type(e).__name__},
            ) from e

        if removed:
            logger.info("Post deleted: %s", post_id)
        else:
            logger.info("Delete of missing post %s ignored", post_id)


async def get_post_gateway(
    session: AsyncSession = Depends(get_db_session),
) -> PostGateway:
    """FastAPI dependency: a SqlPostGateway bound to the request's session."""
    return SqlPostGateway(session)
