"""
Blog API — Post Service Unit Tests
====================================

What:  Tests for PostService validation and partial-update construction.
How:   Uses an AsyncMock gateway, so every test can also assert whether the
       store was touched at all.

What we test:
    ✅ Missing required field is named, checked in title/content/author order
    ✅ Validation failures never reach the gateway
    ✅ Path/body id mismatch rejected before any mutation
    ✅ Partial update keeps only allow-listed, present fields
    ✅ Not-found from the gateway propagates unchanged
"""

import pytest
from unittest.mock import MagicMock

from blogapi.exceptions import NotFoundError, ValidationError
from blogapi.services.post_service import (
    PostService,
    check_required_fields,
    select_updatable_fields,
)


def make_post(**overrides):
    post = MagicMock()
    post.id = overrides.get("id", "0b6f7c1e-8f0e-4c3a-9d51-3f1c2a7d9e10")
    post.title = overrides.get("title", "A blog")
    post.content = overrides.get("content", "Body")
    post.author_string = overrides.get("author_string", "Tom Smith")
    return post


class TestRequiredFields:
    """Tests for the fail-fast required-field check."""

    def test_all_present(self, sample_post_data):
        check_required_fields(sample_post_data)

    @pytest.mark.parametrize("missing", ["title", "content", "author"])
    def test_missing_field_is_named(self, sample_post_data, missing):
        del sample_post_data[missing]
        with pytest.raises(ValidationError, match=f"Missing required field {missing}") as exc:
            check_required_fields(sample_post_data)
        assert exc.value.field == missing

    def test_first_missing_field_reported(self):
        with pytest.raises(ValidationError) as exc:
            check_required_fields({"author": {"firstName": "X", "lastName": "Y"}})
        assert exc.value.field == "title"


class TestSelectUpdatableFields:

    def test_unknown_keys_ignored(self):
        body = {"id": "abc", "title": "New", "views": 10, "createdAt": "now"}
        assert select_updatable_fields(body) == {"title": "New"}

    def test_empty_when_nothing_updatable(self):
        assert select_updatable_fields({"id": "abc"}) == {}


class TestCreatePost:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_create_success(self, mock_gateway, sample_post_data):
        mock_gateway.create.return_value = make_post()

        result = await self.service.create_post(mock_gateway, sample_post_data)

        mock_gateway.create.assert_awaited_once_with(sample_post_data)
        assert result.author == "Tom Smith"
        assert result.id

    @pytest.mark.asyncio
    async def test_create_ignores_extra_keys(self, mock_gateway, sample_post_data):
        mock_gateway.create.return_value = make_post()
        body = {**sample_post_data, "id": "client-chosen", "likes": 3}

        await self.service.create_post(mock_gateway, body)

        mock_gateway.create.assert_awaited_once_with(sample_post_data)

    @pytest.mark.asyncio
    async def test_missing_field_never_reaches_gateway(self, mock_gateway, sample_post_data):
        del sample_post_data["content"]

        with pytest.raises(ValidationError, match="content"):
            await self.service.create_post(mock_gateway, sample_post_data)

        mock_gateway.create.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field,value",
        [
            ("title", ""),
            ("content", ""),
            ("title", 42),
            ("author", "Tom Smith"),
            ("author", {"firstName": "Tom"}),
            ("author", None),
        ],
    )
    async def test_invalid_value_rejected(self, mock_gateway, sample_post_data, field, value):
        sample_post_data[field] = value

        with pytest.raises(ValidationError) as exc:
            await self.service.create_post(mock_gateway, sample_post_data)

        assert exc.value.field == field
        mock_gateway.create.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, [], "title", 7])
    async def test_body_must_be_object(self, mock_gateway, payload):
        with pytest.raises(ValidationError, match="JSON object"):
            await self.service.create_post(mock_gateway, payload)
        mock_gateway.create.assert_not_awaited()


class TestUpdatePost:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_title_only_update(self, mock_gateway):
        await self.service.update_post(mock_gateway, "abc", {"id": "abc", "title": "New"})

        mock_gateway.update.assert_awaited_once_with("abc", {"title": "New"})

    @pytest.mark.asyncio
    async def test_author_update_keeps_structure(self, mock_gateway):
        author = {"firstName": "Ada", "lastName": "Lovelace"}
        await self.service.update_post(mock_gateway, "abc", {"id": "abc", "author": author})

        mock_gateway.update.assert_awaited_once_with("abc", {"author": author})

    @pytest.mark.asyncio
    async def test_unknown_fields_silently_ignored(self, mock_gateway):
        body = {"id": "abc", "content": "Body", "views": 99}
        await self.service.update_post(mock_gateway, "abc", body)

        mock_gateway.update.assert_awaited_once_with("abc", {"content": "Body"})

    @pytest.mark.asyncio
    async def test_id_mismatch_rejected_before_gateway(self, mock_gateway):
        with pytest.raises(ValidationError, match="must match") as exc:
            await self.service.update_post(mock_gateway, "abc", {"id": "xyz", "title": "New"})

        assert exc.value.field == "id"
        mock_gateway.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_body_id_is_mismatch(self, mock_gateway):
        with pytest.raises(ValidationError, match="must match"):
            await self.service.update_post(mock_gateway, "abc", {"title": "New"})
        mock_gateway.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_null_value_rejected(self, mock_gateway):
        with pytest.raises(ValidationError) as exc:
            await self.service.update_post(mock_gateway, "abc", {"id": "abc", "title": None})

        assert exc.value.field == "title"
        mock_gateway.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_found_propagates(self, mock_gateway):
        mock_gateway.update.side_effect = NotFoundError(resource="post", resource_id="abc")

        with pytest.raises(NotFoundError):
            await self.service.update_post(mock_gateway, "abc", {"id": "abc", "title": "New"})


class TestReadAndDelete:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_list_empty(self, mock_gateway):
        result = await self.service.list_posts(mock_gateway)
        assert result.posts == []

    @pytest.mark.asyncio
    async def test_list_projects_author(self, mock_gateway):
        mock_gateway.list.return_value = [make_post(id="1"), make_post(id="2")]

        result = await self.service.list_posts(mock_gateway)

        assert [p.id for p in result.posts] == ["1", "2"]
        assert all(p.author == "Tom Smith" for p in result.posts)

    @pytest.mark.asyncio
    async def test_get_passes_id_verbatim(self, mock_gateway):
        mock_gateway.get_by_id.return_value = make_post(id="not-a-uuid")

        result = await self.service.get_post(mock_gateway, "not-a-uuid")

        mock_gateway.get_by_id.assert_awaited_once_with("not-a-uuid")
        assert result.id == "not-a-uuid"

    @pytest.mark.asyncio
    async def test_delete_calls_gateway(self, mock_gateway):
        await self.service.delete_post(mock_gateway, "abc")
        mock_gateway.delete.assert_awaited_once_with("abc")
