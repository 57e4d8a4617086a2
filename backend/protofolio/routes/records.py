"""
Protofolio Backend — Record Route Handlers
============================================

What:  CRUD endpoints over catalog records plus the filtered list.
How:   Extract query/body parameters, delegate to RecordService, return JSON.
Who:   Called by the catalog controller (protofolio.client).

Caching Strategy:
    Records are mutable, so nothing here is cacheable; responses carry
    Cache-Control: no-store so a refresh after a mutation always hits the store.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from protofolio.database import get_db_session
from protofolio.schemas.record import (
    DeleteResponse,
    ErrorResponse,
    RecordInput,
    RecordResponse,
)
from protofolio.services.record_service import record_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/records", tags=["Records"])

NO_STORE = "no-store"


@router.get(
    "",
    response_model=List[RecordResponse],
    responses={500: {"description": "Store fault", "model": ErrorResponse}},
    summary="List records matching a filter",
    description=(
        "Returns every record matching the optional search text and category, "
        "ordered by sortBy (newest, oldest, alphabetical). No pagination."
    ),
)
async def list_records(
    response: Response,
    search: str | None = Query(
        default=None,
        description="Case-insensitive substring matched against title, description and tags",
    ),
    category: str | None = Query(
        default=None,
        description="Exact category to restrict to (mobile-app, web-app, website, ui-kit, other)",
    ),
    sort_by: str | None = Query(
        default=None,
        alias="sortBy",
        description="newest (default), oldest or alphabetical; unknown values mean newest",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[RecordResponse]:
    records = await record_service.list_records(
        db=db,
        search=search,
        category=category,
        sort_by=sort_by,
    )
    response.headers["X-Total-Count"] = str(len(records))
    response.headers["Cache-Control"] = NO_STORE
    return records


@router.post(
    "",
    response_model=RecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid record", "model": ErrorResponse},
        500: {"description": "Store fault", "model": ErrorResponse},
    },
    summary="Create a record",
)
async def create_record(
    payload: RecordInput,
    db: AsyncSession = Depends(get_db_session),
) -> RecordResponse:
    return await record_service.create_record(db=db, payload=payload)


@router.get(
    "/{record_id}",
    response_model=RecordResponse,
    responses={
        404: {"description": "Record not found", "model": ErrorResponse},
        500: {"description": "Store fault", "model": ErrorResponse},
    },
    summary="Get a single record by ID",
)
async def get_record(
    record_id: str,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> RecordResponse:
    """
    Args:
        record_id: Kept as a plain string so malformed ids answer 404
                   (they cannot name a record) instead of FastAPI's 422.
    """
    result = await record_service.get_record(db=db, record_id=record_id)
    response.headers["Cache-Control"] = NO_STORE
    return result


@router.put(
    "/{record_id}",
    response_model=RecordResponse,
    responses={
        400: {"description": "Invalid record", "model": ErrorResponse},
        404: {"description": "Record not found", "model": ErrorResponse},
        500: {"description": "Store fault", "model": ErrorResponse},
    },
    summary="Replace a record's fields",
    description="Full replacement: omitted tags clear the tag list.",
)
async def update_record(
    record_id: str,
    payload: RecordInput,
    db: AsyncSession = Depends(get_db_session),
) -> RecordResponse:
    return await record_service.update_record(db=db, record_id=record_id, payload=payload)


@router.delete(
    "/{record_id}",
    response_model=DeleteResponse,
    responses={
        404: {"description": "Record not found", "model": ErrorResponse},
        500: {"description": "Store fault", "model": ErrorResponse},
    },
    summary="Delete a record",
)
async def delete_record(
    record_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    return await record_service.delete_record(db=db, record_id=record_id)
