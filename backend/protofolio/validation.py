"""
Protofolio — Record Input Validation
======================================

What:  Turns a raw `RecordInput` into normalized record fields, or explains
       why it cannot be stored.
Why:   Keeps the record rules in one pure function with no database or HTTP
       dependency, so create and update share them and tests need no fixtures.
How:   Returns a tagged result: `ValidRecord(fields)` or
       `InvalidRecord(message, field)`. Callers branch on the type.
       `RecordService` converts `InvalidRecord` into a `ValidationError`.

Rules:
    title         required, trimmed, 1..200 chars
    description   optional, trimmed, <= 1000 chars, defaults to ""
    externalUrl   required, trimmed, must pass `is_valid_external_url`
    category      Category member; missing or unrecognized → "other"
    tags          comma-split, trimmed, empties dropped, each <= 50 chars,
                  order and duplicates preserved
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from protofolio.links import is_valid_external_url
from protofolio.schemas.record import Category, RecordInput

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
TAG_MAX_LENGTH = 50


@dataclass(frozen=True)
class RecordFields:
    """Normalized, storable values of a record's mutable fields."""

    title: str
    external_url: str
    description: str = ""
    category: Category = Category.OTHER
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ValidRecord:
    fields: RecordFields


@dataclass(frozen=True)
class InvalidRecord:
    message: str
    field: Optional[str] = None


ValidationResult = Union[ValidRecord, InvalidRecord]


def normalize_category(value: Optional[str]) -> Category:
    try:
        return Category(value)
    except ValueError:
        return Category.OTHER


def split_tags(raw: Optional[str]) -> List[str]:
    """
    Split a comma-separated tag string.

    >>> split_tags("a, b ,, c")
    ['a', 'b', 'c']
    """
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def validate_record_input(payload: RecordInput) -> ValidationResult:
    """Validate and normalize one create/update payload."""
    title = (payload.title or "").strip()
    external_url = (payload.external_url or "").strip()
    description = (payload.description or "").strip()

    if not title:
        return InvalidRecord("Title is required", field="title")
    if len(title) > TITLE_MAX_LENGTH:
        return InvalidRecord(
            f"Title must be at most {TITLE_MAX_LENGTH} characters", field="title"
        )
    if not external_url:
        return InvalidRecord("External URL is required", field="externalUrl")
    if not is_valid_external_url(external_url):
        return InvalidRecord("Please provide a valid Figma URL", field="externalUrl")
    if len(description) > DESCRIPTION_MAX_LENGTH:
        return InvalidRecord(
            f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters",
            field="description",
        )

    tags = split_tags(payload.tags)
    for tag in tags:
        if len(tag) > TAG_MAX_LENGTH:
            return InvalidRecord(
                f"Tag '{tag[:20]}...' exceeds {TAG_MAX_LENGTH} characters", field="tags"
            )

    return ValidRecord(
        RecordFields(
            title=title,
            external_url=external_url,
            description=description,
            category=normalize_category(payload.category),
            tags=tags,
        )
    )
