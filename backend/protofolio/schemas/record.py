"""
Protofolio Backend — Pydantic Request/Response Schemas
========================================================

What:  Pydantic models defining the API contract between the catalog
       controller and the backend.
Why:   Automatic serialization, camelCase JSON field names, and OpenAPI docs.
How:   FastAPI parses request bodies into `RecordInput` and serializes
       `RecordResponse` objects using their camelCase aliases.

Design Decision:
    `RecordInput` is deliberately lenient (every field optional, plain
    strings). Business rules such as "title required" and the link shape
    live in `protofolio.validation`, so violations are reported as 400
    validation errors with a readable message rather than FastAPI's
    field-level 422 payload.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    """Fixed set of prototype categories."""

    MOBILE_APP = "mobile-app"
    WEB_APP = "web-app"
    WEBSITE = "website"
    UI_KIT = "ui-kit"
    OTHER = "other"


CATEGORY_DISPLAY_NAMES = {
    Category.MOBILE_APP: "Mobile App",
    Category.WEB_APP: "Web App",
    Category.WEBSITE: "Website",
    Category.UI_KIT: "UI Kit",
    Category.OTHER: "Other",
}


class SortOrder(str, Enum):
    """Accepted values of the `sortBy` list parameter."""

    NEWEST = "newest"
    OLDEST = "oldest"
    ALPHABETICAL = "alphabetical"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortOrder":
        """Unrecognized or missing values fall back to NEWEST."""
        try:
            return cls(value)
        except ValueError:
            return cls.NEWEST


class CamelModel(BaseModel):
    """Base for API models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RecordInput(CamelModel):
    """
    Body of POST /records and PUT /records/{id}.

    `tags` is the raw comma-separated string typed into the form
    (e.g. "mobile, onboarding, dark mode").
    PUT is a full replacement: omitted fields reset to their defaults.
    """
    title: Optional[str] = Field(default=None, description="Prototype title (required)")
    description: Optional[str] = Field(default=None, description="Free-text description")
    external_url: Optional[str] = Field(
        default=None,
        description="Figma prototype or file link (required)",
    )
    category: Optional[str] = Field(default=None, description="One of the Category values")
    tags: Optional[str] = Field(default=None, description="Comma-separated tag list")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class RecordResponse(CamelModel):
    """Full representation of a stored record."""
    id: uuid.UUID = Field(description="Unique record identifier (UUID)")
    title: str
    description: str = ""
    external_url: str
    category: Category
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(description="When the record was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the record was last updated (UTC ISO 8601)")

    @classmethod
    def from_record(cls, record) -> "RecordResponse":
        """Build a response from a `Record` ORM instance."""
        return cls(
            id=record.id,
            title=record.title,
            description=record.description,
            external_url=record.external_url,
            category=record.category,
            tags=list(record.tags),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class DeleteResponse(BaseModel):
    """Confirmation returned by DELETE /records/{id}."""
    message: str = "Record deleted successfully"


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Title is required",
            "details": {"field": "title"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(CamelModel):
    """Health check response: service status and store connectivity."""
    status: str = Field(description="healthy or unhealthy")
    store_connected: bool = Field(description="Whether the record store answered a ping")
    version: str
    timestamp: datetime
    uptime_seconds: float
