"""
Protofolio Backend — Record SQLAlchemy Models
===============================================

What:  ORM models for the `records` table and its ordered `record_tags` child.
Why:   Maps Python objects to rows for type-safe database operations.
How:   Inherits from the shared DeclarativeBase; Alembic mirrors this schema
       in versions/001_create_records_table.py.

Table Design Rationale:
    - UUID primary key generated in Python, so ids are known before flush
      and never collide across concurrent inserts.
    - Tags are rows, not a serialized list: search can match each tag with
      a case-insensitive LIKE via EXISTS, and `position` keeps input order.
    - `Record.tags` is an association proxy, so callers read and assign
      plain lists of strings.
    - Timestamps are timezone-aware UTC on every backend (see UTCDateTime).

    Index on created_at: the default "newest first" listing sorts on it.
    Index on title: the alphabetical listing sorts on it.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

from protofolio.database import Base


class UTCDateTime(TypeDecorator):
    """
    DateTime that always comes back timezone-aware in UTC.

    SQLite drops tzinfo on the way in; PostgreSQL keeps it. Normalizing here
    keeps createdAt/updatedAt comparisons valid on both.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class RecordTag(Base):
    """One tag of a record; `position` preserves the user's ordering."""

    __tablename__ = "record_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("records.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    value: Mapped[str] = mapped_column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_record_tags_record_id", "record_id"),
    )

    def __repr__(self) -> str:
        return f"<RecordTag(record_id={self.record_id}, position={self.position}, value='{self.value}')>"


class Record(Base):
    """
    A cataloged prototype link.

    Lifecycle:
        1. Created by RecordService.create_record (id and both timestamps assigned)
        2. Mutable fields fully replaced by update_record (updated_at refreshed)
        3. Hard-deleted by delete_record (tag rows cascade)
    """

    __tablename__ = "records"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    external_url: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False, default="other")
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # selectin: tags load in one extra query per list, never lazily (async-safe)
    tag_rows: Mapped[List[RecordTag]] = relationship(
        order_by=RecordTag.position,
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    tags: AssociationProxy[List[str]] = association_proxy(
        "tag_rows", "value", creator=lambda value: RecordTag(value=value)
    )

    __table_args__ = (
        Index("idx_records_created_at", "created_at"),
        Index("idx_records_title", "title"),
        Index("idx_records_category", "category"),
    )

    def __repr__(self) -> str:
        return (
            f"<Record(id={self.id}, title='{self.title}', "
            f"category='{self.category}', created_at='{self.created_at}')>"
        )
