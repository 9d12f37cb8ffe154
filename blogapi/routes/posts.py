"""
Blog API — Post Route Handlers
================================

What:  HTTP handlers for the blog post resource.
How:   Extract the path id and raw JSON body, delegate to PostService, and
       return the result with the right status code. Failures are raised as
       exceptions and turned into responses by the handlers in main.py.

Route Inventory:
    GET    /posts        200 {posts: [...]}
    GET    /posts/{id}   200 post | 404
    POST   /posts        201 post | 400
    PUT    /posts/{id}   204      | 400 | 404
    DELETE /posts/{id}   204

Request bodies are taken as raw JSON (not a pydantic body model) so a
missing required field is reported as 400 naming the field, checked in a
fixed order before any value validation.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status

from blogapi.schemas.post import BlogPostResponse, ErrorResponse, PostListResponse
from blogapi.services.gateway import PostGateway
from blogapi.services.post_service import post_service
from blogapi.services.sql_gateway import get_post_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

_SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Post not found", "model": ErrorResponse}}
_BAD_REQUEST = {400: {"description": "Invalid request body", "model": ErrorResponse}}


@router.get(
    "",
    response_model=PostListResponse,
    responses=_SERVER_ERROR,
    summary="List all blog posts",
)
async def list_posts(
    gateway: PostGateway = Depends(get_post_gateway),
) -> PostListResponse:
    return await post_service.list_posts(gateway)


@router.get(
    "/{post_id}",
    response_model=BlogPostResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a single blog post by ID",
)
async def get_post(
    post_id: str,
    gateway: PostGateway = Depends(get_post_gateway),
) -> BlogPostResponse:
    """The path id is passed to the store verbatim; unknown ids are a 404."""
    return await post_service.get_post(gateway, post_id)


@router.post(
    "",
    response_model=BlogPostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_BAD_REQUEST, **_SERVER_ERROR},
    summary="Create a blog post",
    description=(
        "Requires title, content and author ({firstName, lastName}). "
        "The response carries the new id and the author as a display string."
    ),
)
async def create_post(
    payload: Any = Body(default=None),
    gateway: PostGateway = Depends(get_post_gateway),
) -> BlogPostResponse:
    return await post_service.create_post(gateway, payload)


@router.put(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_BAD_REQUEST, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Partially update a blog post",
    description=(
        "The body must repeat the path id. Only title, content and author "
        "are updated; other keys are ignored."
    ),
)
async def update_post(
    post_id: str,
    payload: Any = Body(default=None),
    gateway: PostGateway = Depends(get_post_gateway),
) -> Response:
    await post_service.update_post(gateway, post_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_SERVER_ERROR,
    summary="Delete a blog post",
    description="Deleting a post that does not exist also returns 204.",
)
async def delete_post(
    post_id: str,
    gateway: PostGateway = Depends(get_post_gateway),
) -> Response:
    await post_service.delete_post(gateway, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
