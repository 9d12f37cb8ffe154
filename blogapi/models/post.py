"""
Blog API — BlogPost SQLAlchemy Model
======================================

What:  ORM model representing the `blog_posts` table.
Why:   Maps stored posts to Python objects for the SQL persistence gateway.
Who:   Used by SqlPostGateway for CRUD operations and by Alembic.

Table Design Rationale:
    - id: UUID4 rendered as text, generated on insert. Text (not a native
      UUID type) keeps the column portable between PostgreSQL and SQLite and
      lets any path segment be looked up verbatim.
    - author: JSON document {"firstName": ..., "lastName": ...}. The
      structured form is what we store; the API only ever shows the
      flattened `author_string`.
"""

import uuid
from typing import Any, Dict

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from blogapi.database import Base


def _new_post_id() -> str:
    return str(uuid.uuid4())


class BlogPost(Base):
    """
    A stored blog post.

    Lifecycle:
        1. Created by POST /posts (id assigned here, never changed)
        2. Any subset of title/content/author replaced by PUT /posts/{id}
        3. Removed by DELETE /posts/{id} (hard delete, no versioning)
    """

    __tablename__ = "blog_posts"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_post_id,
        comment="Unique identifier assigned at creation",
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    author: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        comment="Structured author name: {firstName, lastName}",
    )

    @property
    def author_string(self) -> str:
        """Display form of the author, "<firstName> <lastName>". Not persisted."""
        author = self.author or {}
        first = author.get("firstName") or ""
        last = author.get("lastName") or ""
        return f"{first} {last}".strip()

    def __repr__(self) -> str:
        return f"<BlogPost(id={self.id}, title={self.title!r})>"
