"""
Prediction Record CRUD Operations

Stores each history sent for prediction together with the forecast.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..models import NumberSequence, PredictionLog
from ..schemas import SequenceCreate

logger = logging.getLogger(__name__)


async def create_sequence(
    db: AsyncSession,
    sequence_data: SequenceCreate,
) -> NumberSequence:
    """
    Record a prediction.
    
    Args:
        db: Database session
        sequence_data: Input history, determinism flag, confidence and forecast
        
    Returns:
        Created sequence (with one prediction log attached)
    """
    sequence = NumberSequence(
        session_id=sequence_data.session_id,
        input_values=list(sequence_data.input_values),
        is_deterministic=sequence_data.is_deterministic,
        confidence_score=sequence_data.confidence_score,
    )
    sequence.prediction_logs.append(
        PredictionLog(predicted_values=list(sequence_data.predicted_values))
    )
    
    db.add(sequence)
    await db.flush()
    await db.refresh(sequence)
    
    logger.info(f"Recorded prediction sequence {sequence.id} for session {sequence.session_id}")
    return sequence

