"""
Protofolio Backend — Record Service (Record Store Logic)
==========================================================

What:  Validates, normalizes, persists and queries catalog records.
Why:   Keeps the record lifecycle and the list query contract independent of
       HTTP concerns so both can be tested without a server.
How:   Each method receives the request's AsyncSession. Writes commit here,
       before the handler returns, so a 2xx answer means the change is durable
       and a failed commit is reported as a 500.
Who:   Called by the /records route handlers and the diagnostics probe.

List Query Contract:
    search    case-insensitive literal substring; matches title OR description
              OR any tag (EXISTS over record_tags)
    category  exact equality, ANDed with search; unknown values match nothing
    sortBy    newest (default) → created_at DESC
              oldest           → created_at ASC
              alphabetical     → title ASC, store-native collation
              anything else    → newest
    Ties are broken by id so repeated queries return a stable order.
    No pagination: every matching record is returned.

Design Decision:
    RecordService is stateless — it receives the db session for each call.
    Only SQLAlchemy failures are wrapped into DatabaseError; NotFoundError and
    ValidationError propagate untouched to the global handlers.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import Select, asc, desc, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from protofolio.exceptions import DatabaseError, NotFoundError, ValidationError
from protofolio.models.record import Record, RecordTag
from protofolio.schemas.record import (
    DeleteResponse,
    RecordInput,
    RecordResponse,
    SortOrder,
)
from protofolio.validation import InvalidRecord, RecordFields, validate_record_input

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def like_pattern(term: str) -> str:
    """Wrap `term` for a substring LIKE, escaping LIKE wildcards so they match literally."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def tag_rows_for(tags: List[str]) -> List[RecordTag]:
    """Build the ordered child rows for a tag list."""
    return [RecordTag(value=value, position=i) for i, value in enumerate(tags)]


def build_list_query(
    search: Optional[str] = None,
    category: Optional[str] = None,
    sort_by: Optional[str] = None,
) -> Select:
    """
    Translate a catalog filter into a SELECT over records.

    Empty strings count as "not supplied" for search and category.
    """
    query = select(Record)

    if search:
        pattern = like_pattern(search)
        query = query.where(
            or_(
                Record.title.ilike(pattern, escape=LIKE_ESCAPE),
                Record.description.ilike(pattern, escape=LIKE_ESCAPE),
                Record.tag_rows.any(RecordTag.value.ilike(pattern, escape=LIKE_ESCAPE)),
            )
        )

    if category:
        query = query.where(Record.category == category)

    order = SortOrder.parse(sort_by)
    if order is SortOrder.OLDEST:
        query = query.order_by(asc(Record.created_at), asc(Record.id))
    elif order is SortOrder.ALPHABETICAL:
        query = query.order_by(asc(Record.title), asc(Record.id))
    else:
        query = query.order_by(desc(Record.created_at), asc(Record.id))

    return query


class RecordService:
    """
    Business logic layer for record operations.

    Responsibilities:
        - create_record(): validate → assign id/timestamps → persist
        - get_record(): single lookup with not-found handling
        - update_record(): validate → full overwrite → refresh updated_at
        - delete_record(): hard delete with not-found handling
        - list_records(): filtered, ordered listing
    """

    @staticmethod
    def _require_valid(payload: RecordInput) -> RecordFields:
        result = validate_record_input(payload)
        if isinstance(result, InvalidRecord):
            raise ValidationError(message=result.message, field=result.field)
        return result.fields

    @staticmethod
    def _parse_id(record_id: str) -> uuid.UUID:
        # A malformed id can never name a stored record
        try:
            return uuid.UUID(str(record_id))
        except ValueError:
            raise NotFoundError(resource="record", resource_id=str(record_id))

    async def _load(self, db: AsyncSession, record_id: str) -> Record:
        uid = self._parse_id(record_id)
        result = await db.execute(select(Record).where(Record.id == uid))
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFoundError(resource="record", resource_id=str(record_id))
        return record

    async def create_record(self, db: AsyncSession, payload: RecordInput) -> RecordResponse:
        """
        Validate and store a new record.

        Raises:
            ValidationError: Missing/invalid title or link, over-long fields (→ 400)
            DatabaseError: Insert failed (→ 500)
        """
        fields = self._require_valid(payload)
        now = _utcnow()

        record = Record(
            id=uuid.uuid4(),
            title=fields.title,
            description=fields.description,
            external_url=fields.external_url,
            category=fields.category.value,
            created_at=now,
            updated_at=now,
        )
        # Assign the relationship itself; the proxy leaves an empty list unloaded
        record.tag_rows = tag_rows_for(fields.tags)

        try:
            db.add(record)
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error creating record: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the record. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Record created: %s (%s)", record.id, record.category)
        return RecordResponse.from_record(record)

    async def get_record(self, db: AsyncSession, record_id: str) -> RecordResponse:
        """
        Retrieve a single record by id.

        Raises:
            NotFoundError: No record with that id (→ 404)
            DatabaseError: Query failed (→ 500)
        """
        try:
            record = await self._load(db, record_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching record %s: %s", record_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the record. Please try again.",
                context={"record_id": str(record_id)},
            ) from e
        return RecordResponse.from_record(record)

    async def update_record(
        self, db: AsyncSession, record_id: str, payload: RecordInput
    ) -> RecordResponse:
        """
        Replace every mutable field of an existing record.

        This is a full overwrite, not a merge: omitted tags clear the tag list,
        an omitted category resets to "other". `id` and `created_at` never change;
        `updated_at` is strictly later than its previous value.

        Raises:
            ValidationError: Same rules as create (→ 400)
            NotFoundError: No record with that id (→ 404)
            DatabaseError: Query or write failed (→ 500)
        """
        fields = self._require_valid(payload)

        try:
            record = await self._load(db, record_id)

            now = _utcnow()
            if now <= record.updated_at:
                now = record.updated_at + timedelta(microseconds=1)

            record.title = fields.title
            record.description = fields.description
            record.external_url = fields.external_url
            record.category = fields.category.value
            record.tag_rows = tag_rows_for(fields.tags)
            record.updated_at = now
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error updating record %s: %s", record_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the record. Please try again.",
                context={"record_id": str(record_id), "error_type": type(e).__name__},
            ) from e

        logger.info("Record updated: %s", record.id)
        return RecordResponse.from_record(record)

    async def delete_record(self, db: AsyncSession, record_id: str) -> DeleteResponse:
        """
        Hard-delete a record and its tags.

        Raises:
            NotFoundError: No record with that id (→ 404)
            DatabaseError: Delete failed (→ 500)
        """
        try:
            record = await self._load(db, record_id)
            await db.delete(record)
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting record %s: %s", record_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the record. Please try again.",
                context={"record_id": str(record_id), "error_type": type(e).__name__},
            ) from e

        logger.info("Record deleted: %s", record_id)
        return DeleteResponse()

    async def list_records(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        category: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> List[RecordResponse]:
        """
        List every record matching the filter, in the requested order.

        Raises:
            DatabaseError: Query failed (→ 500)
        """
        query = build_list_query(search=search, category=category, sort_by=sort_by)
        try:
            result = await db.execute(query)
            records = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing records: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve records. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        return [RecordResponse.from_record(record) for record in records]


# Stateless; safe to share across requests
record_service = RecordService()
