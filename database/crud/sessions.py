"""
Session CRUD Operations

Handles session creation and retrieval.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import Session
from ..schemas import SessionCreate

logger = logging.getLogger(__name__)


async def create_session(
    db: AsyncSession,
    session_data: SessionCreate,
) -> Session:
    """
    Create a new working session.
    
    Args:
        db: Database session
        session_data: Student name (defaults to "Anonymous") and mode
        
    Returns:
        Created session
    """
    session = Session(
        student_name=session_data.student_name or "Anonymous",
        mode=session_data.mode or "EDUCATION",
    )
    
    db.add(session)
    await db.flush()
    await db.refresh(session)
    
    logger.info(f"Created session {session.id} for {session.student_name}")
    return session


async def get_session(
    db: AsyncSession,
    session_id: UUID,
    include_sequences: bool = False,
) -> Optional[Session]:
    """
    Get session by ID.
    
    Args:
        db: Database session
        session_id: Session UUID
        include_sequences: Eagerly load recorded prediction sequences
        
    Returns:
        Session if found, None otherwise
    """
    query = select(Session).where(Session.id == session_id)
    
    if include_sequences:
        query = query.options(selectinload(Session.number_sequences))
    
    result = await db.execute(query)
    return result.scalar_one_or_none()
