"""
Protofolio Backend — Record Service Unit Tests
================================================

What:  Tests for RecordService and the list query builder.
How:   Mock DB sessions (no real database); the query builder is checked by
       compiling its SELECT for SQLite.

What we test:
    ✅ Create assigns id and equal timestamps, rejects invalid input
    ✅ Get/update/delete raise NotFoundError for unknown or malformed ids
    ✅ Update strictly advances updated_at and clears omitted fields
    ✅ SQLAlchemy failures surface as DatabaseError
    ✅ Query translation of search/category/sortBy
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.dialects import sqlite
from sqlalchemy.exc import OperationalError

from protofolio.exceptions import DatabaseError, NotFoundError, ValidationError
from protofolio.models.record import Record
from protofolio.schemas.record import Category, RecordInput
from protofolio.services.record_service import (
    RecordService,
    build_list_query,
    like_pattern,
    tag_rows_for,
)

VALID_URL = "https://www.figma.com/file/abc/Design"


def make_record(**overrides) -> Record:
    created = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
    values = dict(
        id=uuid.uuid4(),
        title="Design System",
        description="Buttons and inputs",
        external_url=VALID_URL,
        category="ui-kit",
        created_at=created,
        updated_at=created,
    )
    tags = overrides.pop("tags", ["components"])
    values.update(overrides)
    record = Record(**values)
    record.tag_rows = tag_rows_for(tags)
    return record


def result_with(record):
    result = MagicMock()
    result.scalar_one_or_none.return_value = record
    return result


def compiled(query) -> str:
    return str(query.compile(dialect=sqlite.dialect()))


class TestRecordServiceCreate:

    def setup_method(self):
        self.service = RecordService()

    @pytest.mark.asyncio
    async def test_create_success(self, mock_db_session):
        payload = RecordInput(
            title=" Design System ",
            external_url=VALID_URL,
            category="ui-kit",
            tags="a, b ,, c",
        )

        result = await self.service.create_record(mock_db_session, payload)

        assert isinstance(result.id, uuid.UUID)
        assert result.title == "Design System"
        assert result.category is Category.UI_KIT
        assert result.tags == ["a", "b", "c"]
        assert result.created_at == result.updated_at
        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_without_tags(self, mock_db_session):
        for tags in (None, "", " , "):
            payload = RecordInput(title="X", external_url=VALID_URL, tags=tags)
            result = await self.service.create_record(mock_db_session, payload)
            assert result.tags == []

    @pytest.mark.asyncio
    async def test_create_commit_failure_raises_database_error(self, mock_db_session):
        mock_db_session.commit = AsyncMock(
            side_effect=OperationalError("COMMIT", {}, Exception("database is locked"))
        )
        payload = RecordInput(title="X", external_url=VALID_URL)

        with pytest.raises(DatabaseError):
            await self.service.create_record(mock_db_session, payload)

    @pytest.mark.asyncio
    async def test_create_unknown_category_defaults_to_other(self, mock_db_session):
        payload = RecordInput(title="X", external_url=VALID_URL, category="desktop")
        result = await self.service.create_record(mock_db_session, payload)
        assert result.category is Category.OTHER

    @pytest.mark.asyncio
    async def test_create_invalid_input_never_touches_db(self, mock_db_session):
        payload = RecordInput(title="", external_url=VALID_URL)

        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_record(mock_db_session, payload)

        assert exc_info.value.field == "title"
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_db_failure_raises_database_error(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("disk I/O error"))
        )
        payload = RecordInput(title="X", external_url=VALID_URL)

        with pytest.raises(DatabaseError):
            await self.service.create_record(mock_db_session, payload)


class TestRecordServiceGet:

    def setup_method(self):
        self.service = RecordService()

    @pytest.mark.asyncio
    async def test_get_found(self, mock_db_session):
        record = make_record()
        mock_db_session.execute.return_value = result_with(record)

        result = await self.service.get_record(mock_db_session, str(record.id))

        assert result.id == record.id
        assert result.tags == ["components"]

    @pytest.mark.asyncio
    async def test_get_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = result_with(None)

        with pytest.raises(NotFoundError):
            await self.service.get_record(mock_db_session, str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_get_malformed_id_is_not_found(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_record(mock_db_session, "not-a-uuid")
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_db_failure_raises_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection lost"))
        )
        with pytest.raises(DatabaseError):
            await self.service.get_record(mock_db_session, str(uuid.uuid4()))


class TestRecordServiceUpdate:

    def setup_method(self):
        self.service = RecordService()

    @pytest.mark.asyncio
    async def test_update_is_full_replacement(self, mock_db_session):
        record = make_record(tags=["old", "tags"])
        original_id, original_created = record.id, record.created_at
        mock_db_session.execute.return_value = result_with(record)

        result = await self.service.update_record(
            mock_db_session,
            str(record.id),
            RecordInput(title="Renamed", external_url="https://figma.com/proto/xyz/New"),
        )

        assert result.id == original_id
        assert result.created_at == original_created
        assert result.title == "Renamed"
        assert result.description == ""
        assert result.category is Category.OTHER
        assert result.tags == []
        assert result.updated_at > original_created
        mock_db_session.flush.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_strictly_advances_updated_at_on_clock_tie(self, mock_db_session):
        record = make_record()
        mock_db_session.execute.return_value = result_with(record)

        with patch(
            "protofolio.services.record_service._utcnow",
            return_value=record.updated_at,
        ):
            result = await self.service.update_record(
                mock_db_session, str(record.id), RecordInput(title="X", external_url=VALID_URL)
            )

        assert result.updated_at == result.created_at + timedelta(microseconds=1)

    @pytest.mark.asyncio
    async def test_update_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = result_with(None)

        with pytest.raises(NotFoundError):
            await self.service.update_record(
                mock_db_session, str(uuid.uuid4()), RecordInput(title="X", external_url=VALID_URL)
            )

    @pytest.mark.asyncio
    async def test_update_validates_before_lookup(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.update_record(
                mock_db_session,
                str(uuid.uuid4()),
                RecordInput(title="X", external_url="https://example.com/file/1"),
            )
        mock_db_session.execute.assert_not_awaited()


class TestRecordServiceDelete:

    def setup_method(self):
        self.service = RecordService()

    @pytest.mark.asyncio
    async def test_delete_success(self, mock_db_session):
        record = make_record()
        mock_db_session.execute.return_value = result_with(record)

        result = await self.service.delete_record(mock_db_session, str(record.id))

        assert result.message == "Record deleted successfully"
        mock_db_session.delete.assert_awaited_once_with(record)
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_missing_record(self, mock_db_session):
        mock_db_session.execute.return_value = result_with(None)

        with pytest.raises(NotFoundError):
            await self.service.delete_record(mock_db_session, str(uuid.uuid4()))
        mock_db_session.delete.assert_not_awaited()


class TestRecordServiceList:

    def setup_method(self):
        self.service = RecordService()

    @pytest.mark.asyncio
    async def test_list_empty(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = mock_result

        assert await self.service.list_records(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_list_returns_responses_in_query_order(self, mock_db_session):
        records = [make_record(title=f"Record {i}") for i in range(3)]
        mock_result = MagicMock()
        mock_result.scalars.return_value.all.return_value = records
        mock_db_session.execute.return_value = mock_result

        result = await self.service.list_records(mock_db_session, sort_by="alphabetical")

        assert [r.title for r in result] == ["Record 0", "Record 1", "Record 2"]

    @pytest.mark.asyncio
    async def test_list_db_failure_raises_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection refused"))
        )
        with pytest.raises(DatabaseError):
            await self.service.list_records(mock_db_session)


class TestBuildListQuery:

    def test_default_is_newest_first(self):
        sql = compiled(build_list_query())
        assert "ORDER BY records.created_at DESC" in sql
        assert "WHERE" not in sql

    @pytest.mark.parametrize("sort_by", [None, "", "newest", "popular"])
    def test_unknown_sort_falls_back_to_newest(self, sort_by):
        assert "ORDER BY records.created_at DESC" in compiled(build_list_query(sort_by=sort_by))

    def test_oldest(self):
        assert "ORDER BY records.created_at ASC" in compiled(build_list_query(sort_by="oldest"))

    def test_alphabetical(self):
        assert "ORDER BY records.title ASC" in compiled(build_list_query(sort_by="alphabetical"))

    def test_search_covers_title_description_and_tags(self):
        sql = compiled(build_list_query(search="kit"))
        assert "lower(records.title) LIKE lower(" in sql
        assert "lower(records.description) LIKE lower(" in sql
        assert "EXISTS" in sql and "record_tags" in sql
        assert " OR " in sql

    def test_category_is_anded_with_search(self):
        sql = compiled(build_list_query(search="kit", category="ui-kit"))
        assert "records.category = " in sql
        assert ") AND records.category" in sql

    def test_empty_filters_are_ignored(self):
        assert "WHERE" not in compiled(build_list_query(search="", category=""))

    def test_like_pattern_escapes_wildcards(self):
        assert like_pattern("kit") == "%kit%"
        assert like_pattern("100%") == "%100\\%%"
        assert like_pattern("a_b") == "%a\\_b%"
        assert like_pattern("back\\slash") == "%back\\\\slash%"
