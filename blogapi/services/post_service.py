"""
Blog API — Post Service (Validation and Partial Updates)
==========================================================

What:  Business logic behind the five post endpoints.
Why:   Keeps request validation and partial-update construction out of the
       HTTP layer, so they can be tested without a server or a database.
How:   Every check runs before the gateway is called. A request that fails
       validation never reaches the store.

Validation order (POST /posts):
    1. Body must be a JSON object
    2. Required keys title, content, author, checked in that order; the
       first missing one is named in the 400 response
    3. Field values validated with BlogPostCreate

Validation order (PUT /posts/{id}):
    1. Body must be a JSON object
    2. Body "id" must equal the path id exactly (missing counts as mismatch)
    3. Partial set built from the allow-list; unknown keys ignored
    4. Present values validated with BlogPostUpdate

Design Decision:
    PostService is stateless; it receives the gateway for each call.
"""

import logging
from typing import Any, Dict, Mapping, Tuple, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from blogapi.exceptions import ValidationError
from blogapi.schemas.post import (
    BlogPostCreate,
    BlogPostResponse,
    BlogPostUpdate,
    PostListResponse,
)
from blogapi.services.gateway import PostGateway

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: Tuple[str, ...] = ("title", "content", "author")
UPDATABLE_FIELDS: Tuple[str, ...] = ("title", "content", "author")


def ensure_json_object(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError(message="Request body must be a JSON object")
    return payload


def check_required_fields(payload: Mapping[str, Any]) -> None:
    """Raise for the first required field missing from the body."""
    for field in REQUIRED_FIELDS:
        if field not in payload:
            message = f"Missing required field {field}"
            logger.warning(message)
            raise ValidationError(message=message, field=field)


def check_matching_ids(path_id: str, payload: Mapping[str, Any]) -> None:
    """The id in the body must equal the id in the path, compared verbatim."""
    body_id = payload.get("id")
    if body_id != path_id:
        message = (
            f"Request path id ({path_id}) and request body id ({body_id}) must match"
        )
        logger.warning(message)
        raise ValidationError(
            message=message,
            field="id",
            context={"path_id": path_id, "body_id": body_id},
        )


def select_updatable_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only the allow-listed keys that are present in the body."""
    return {field: payload[field] for field in UPDATABLE_FIELDS if field in payload}


def _validate(model: Type[BaseModel], data: Mapping[str, Any]) -> Any:
    """Run pydantic validation and report the first problem as a 400."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        loc = first.get("loc") or ()
        field = str(loc[0]) if loc else None
        path = ".".join(str(part) for part in loc)
        raise ValidationError(
            message=f"Invalid value for field '{path}': {first.get('msg')}",
            field=field,
        ) from e


class PostService:
    """
    Business logic layer for post operations.

    Responsibilities:
        - list_posts / get_post: fetch and project to the external shape
        - create_post: fail-fast required-field check, value validation
        - update_post: id match, allow-list filtering, value validation
        - delete_post: pass-through, idempotent
    """

    async def list_posts(self, gateway: PostGateway) -> PostListResponse:
        posts = await gateway.list()
        return PostListResponse(posts=[BlogPostResponse.from_post(p) for p in posts])

    async def get_post(self, gateway: PostGateway, post_id: str) -> BlogPostResponse:
        post = await gateway.get_by_id(post_id)
        return BlogPostResponse.from_post(post)

    async def create_post(self, gateway: PostGateway, payload: Any) -> BlogPostResponse:
        """
        Validate a creation body and store it.

        Raises:
            ValidationError: Body not an object, required field missing,
                or a field value is invalid. Raised before any store call.
            DatabaseError: The store failed.
        """
        body = ensure_json_object(payload)
        check_required_fields(body)
        values: BlogPostCreate = _validate(BlogPostCreate, body)

        post = await gateway.create(values.to_fields())
        return BlogPostResponse.from_post(post)

    async def update_post(self, gateway: PostGateway, post_id: str, payload: Any) -> None:
        """
        Apply a partial update.

        Raises:
            ValidationError: Body not an object, id mismatch, or an invalid
                value for a present field. Raised before any store call.
            NotFoundError: No post has this id.
            DatabaseError: The store failed.
        """
        body = ensure_json_object(payload)
        check_matching_ids(post_id, body)
        values: BlogPostUpdate = _validate(BlogPostUpdate, select_updatable_fields(body))

        await gateway.update(post_id, values.to_partial_fields())

    async def delete_post(self, gateway: PostGateway, post_id: str) -> None:
        await gateway.delete(post_id)


# ── Singleton Instance ────────────────────────────────────────────────────
post_service = PostService()
