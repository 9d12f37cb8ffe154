"""
Blog API — Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the API contract.
Why:   Input value validation, response serialization, and OpenAPI docs.
How:   Request bodies arrive as raw JSON objects; the service layer checks
       required keys and the path/body id first, then validates values with
       these models. Response models define the external projection of a post.

Design Decision:
    Schemas are separate from the SQLAlchemy model because the stored and
    external shapes differ: storage keeps the structured author, the API
    returns the flattened "firstName lastName" string.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from blogapi.models.post import BlogPost


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what clients send
# ══════════════════════════════════════════════════════════════════════════


class AuthorName(BaseModel):
    """Structured author as stored: {"firstName": "...", "lastName": "..."}."""
    firstName: str = Field(description="Author's first name")
    lastName: str = Field(description="Author's last name")


class BlogPostCreate(BaseModel):
    """
    What:  Values accepted by POST /posts.
    Why:   title and content must be non-empty text; author must be a
           structured name. Unknown keys are ignored.
    """
    title: str = Field(min_length=1, description="Post title")
    content: str = Field(min_length=1, description="Post body")
    author: AuthorName = Field(description="Structured author name")

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump()


class BlogPostUpdate(BaseModel):
    """
    What:  Values accepted by PUT /posts/{id}.
    How:   Every updatable field is optional, but a field that is present
           must be valid; an explicit null is rejected rather than stored.
           Only fields the client actually sent end up in the partial update.
    """
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    author: Optional[AuthorName] = None

    @field_validator("title", "content", "author", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("must not be null")
        return v

    def to_partial_fields(self) -> Dict[str, Any]:
        """The subset of fields present in the request body."""
        return self.model_dump(include=self.model_fields_set)


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class BlogPostResponse(BaseModel):
    """
    What:  External projection of a post: {id, title, content, author}.
    Why:   The structured author is flattened to a single display string.
    """
    id: str = Field(description="Unique post identifier")
    title: str
    content: str
    author: str = Field(description='Author display name, "firstName lastName"')

    @classmethod
    def from_post(cls, post: "BlogPost") -> "BlogPostResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author=post.author_string,
        )


class PostListResponse(BaseModel):
    """Response of GET /posts. No pagination."""
    posts: List[BlogPostResponse] = Field(description="Every stored post")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Missing required field author",
            "details": {"field": "author"},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and store status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
