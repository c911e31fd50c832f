"""
Series CRUD Operations

Handles imported batches: saving, pagination, duplicate checks and
assembly of a session's full history.
"""

import logging
import math
from typing import Optional, List
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from engine.assembly import assemble_series, is_duplicate

from ..models import NumberSeries, SeriesSource

logger = logging.getLogger(__name__)


async def save_series(
    db: AsyncSession,
    session_id: UUID,
    numbers: List[float],
    source: SeriesSource,
) -> NumberSeries:
    """
    Save a new batch.
    
    Args:
        db: Database session
        session_id: Session UUID
        numbers: Observations in reading order
        source: HTML, OCR or MANUAL
        
    Returns:
        Created series
    """
    series = NumberSeries(
        session_id=session_id,
        numbers=list(numbers),
        source=SeriesSource(source),
        count=len(numbers),
    )
    
    db.add(series)
    await db.flush()
    await db.refresh(series)
    
    logger.info(f"Saved {series.source.value} series with {series.count} numbers for session {session_id}")
    return series


async def get_series(
    db: AsyncSession,
    series_id: UUID,
) -> Optional[NumberSeries]:
    """Get series by ID."""
    result = await db.execute(
        select(NumberSeries).where(NumberSeries.id == series_id)
    )
    return result.scalar_one_or_none()


async def get_session_series(
    db: AsyncSession,
    session_id: UUID,
    page: int = 1,
    limit: int = 10,
) -> tuple[List[NumberSeries], int]:
    """
    Get a page of series for a session, newest first.
    
    Args:
        db: Database session
        session_id: Session UUID
        page: 1-based page number
        limit: Series per page
        
    Returns:
        Tuple of (series, total_count)
    """
    count_query = select(func.count(NumberSeries.id)).where(NumberSeries.session_id == session_id)
    total = await db.execute(count_query)
    total_count = total.scalar() or 0
    
    query = (
        select(NumberSeries)
        .where(NumberSeries.session_id == session_id)
        .order_by(NumberSeries.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    
    result = await db.execute(query)
    return list(result.scalars().all()), total_count


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


async def get_latest_series(
    db: AsyncSession,
    session_id: UUID,
) -> Optional[NumberSeries]:
    """Most recently saved batch of a session."""
    query = (
        select(NumberSeries)
        .where(NumberSeries.session_id == session_id)
        .order_by(NumberSeries.created_at.desc())
        .limit(1)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def check_duplicate(
    db: AsyncSession,
    session_id: UUID,
    numbers: List[float],
) -> bool:
    """True when `numbers` repeats the session's latest batch exactly."""
    latest = await get_latest_series(db, session_id)
    return is_duplicate(latest.numbers if latest else None, numbers)


async def get_all_session_numbers(
    db: AsyncSession,
    session_id: UUID,
) -> List[float]:
    """
    The session's history assembled from all of its batches.
    
    Batches already contained in a newer batch are skipped; the remaining
    batches are concatenated in chronological order.
    """
    query = (
        select(NumberSeries.numbers)
        .where(NumberSeries.session_id == session_id)
        .order_by(NumberSeries.created_at.desc())
    )
    result = await db.execute(query)
    batches = [row[0] for row in result.all()]
    
    return assemble_series(batches)


async def delete_series(
    db: AsyncSession,
    series_id: UUID,
) -> bool:
    """
    Delete a series.
    
    Returns:
        True if deleted, False if not found
    """
    series = await get_series(db, series_id)
    if not series:
        return False
    
    await db.delete(series)
    await db.flush()
    
    logger.info(f"Deleted series: {series_id}")
    return True
