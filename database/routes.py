"""
API Routes for Persistent Storage

- Sessions: create and fetch
- Series: save imported batches, page through them, assemble the full
  history, delete
"""

import logging
from typing import Union
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db, crud
from database.schemas import (
    # Sessions
    SessionCreate,
    Session as SessionSchema,
    SessionDetail,
    # Series
    SeriesCreate,
    Series as SeriesSchema,
    SeriesSaved,
    SeriesDuplicate,
    SeriesPage,
    AssembledNumbers,
)

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()


# =============================================================================
# SESSION ROUTES
# =============================================================================

@router.post("/session", response_model=SessionSchema)
async def create_session(
    session_data: SessionCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Start a new working session.
    """
    session = await crud.create_session(db, session_data)
    return SessionSchema.model_validate(session)


@router.get("/session/{session_id}", response_model=SessionDetail)
async def get_session(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a session with its recorded prediction sequences.
    """
    session = await crud.get_session(db, session_id, include_sequences=True)

    if not session:
        raise HTTPException(status_code=404, detail="Session not found")

    return SessionDetail.model_validate(session)


# =============================================================================
# SERIES ROUTES
# =============================================================================

@router.post("/series", response_model=Union[SeriesSaved, SeriesDuplicate])
async def save_series(
    series_data: SeriesCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Save an imported batch.
    Re-sending the session's latest batch is reported as a duplicate and not stored.
    """
    session = await crud.get_session(db, series_data.session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")

    if await crud.check_duplicate(db, series_data.session_id, series_data.numbers):
        logger.info(f"Duplicate series ignored for session {series_data.session_id}")
        return SeriesDuplicate()

    series = await crud.save_series(
        db,
        series_data.session_id,
        series_data.numbers,
        series_data.source,
    )

    return SeriesSaved(series=SeriesSchema.model_validate(series))


@router.get("/series/{session_id}", response_model=SeriesPage)
async def list_series(
    session_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """
    List a session's batches, newest first.
    """
    series, total = await crud.get_session_series(db, session_id, page=page, limit=limit)

    return SeriesPage(
        series=[SeriesSchema.model_validate(s) for s in series],
        total=total,
        page=page,
        total_pages=crud.total_pages(total, limit),
    )


@router.get("/series/{session_id}/all", response_model=AssembledNumbers)
async def get_all_numbers(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    The session's full history, assembled from its batches without duplicates.
    """
    numbers = await crud.get_all_session_numbers(db, session_id)

    return AssembledNumbers(numbers=numbers, count=len(numbers))


@router.delete("/series/{series_id}")
async def delete_series(
    series_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a batch.
    """
    deleted = await crud.delete_series(db, series_id)

    if not deleted:
        raise HTTPException(status_code=404, detail="Series not found")

    return {"success": True, "message": "Series deleted"}
