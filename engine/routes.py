"""
Forecast Engine — FastAPI Routes
================================

API endpoints for prediction and number extraction.

Mounted in main.py:
    from engine.routes import predict_router, upload_router
    app.include_router(predict_router, prefix="/api/predict", tags=["predict"])
    app.include_router(upload_router, prefix="/api/upload", tags=["upload"])
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .engine import InsufficientDataError, InvalidSequenceError, SequenceAnalyzer
from .extraction import (
    OcrWord,
    extract_from_html,
    extract_from_words,
    normalize_manual,
    summarize,
)

logger = logging.getLogger(__name__)

predict_router = APIRouter()
upload_router = APIRouter()


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class PredictRequest(BaseModel):
    """Request for a forecast."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    history: Optional[Any] = Field(None, description="Observations in insertion order")
    session_id: Optional[UUID] = Field(None, description="Session to record the prediction against")


class HtmlUploadRequest(BaseModel):
    html: Optional[str] = Field(None, description="Markup containing <span> values")


class BoundingBoxInput(BaseModel):
    x0: float
    y0: float
    x1: float
    y1: float


class OcrWordInput(BaseModel):
    text: str
    bbox: BoundingBoxInput


class OcrUploadRequest(BaseModel):
    words: List[OcrWordInput] = Field(..., description="Recognised words with bounding boxes")


class ManualUploadRequest(BaseModel):
    numbers: Optional[Any] = Field(None, description="Values typed by the user")


# =============================================================================
# ANALYZER DEPENDENCY
# =============================================================================

_analyzer: Optional[SequenceAnalyzer] = None


def get_analyzer() -> SequenceAnalyzer:
    """Get or create the sequence analyzer."""
    global _analyzer
    if _analyzer is None:
        _analyzer = SequenceAnalyzer()
    return _analyzer


def _extraction_response(numbers: List[float], with_stats: bool = True) -> Dict[str, Any]:
    response: Dict[str, Any] = {
        "success": True,
        "numbers": numbers,
        "count": len(numbers),
    }
    if with_stats:
        response["stats"] = summarize(numbers)
    return response


def _validate_history(history: Any) -> List[float]:
    if not isinstance(history, list):
        raise HTTPException(
            status_code=400,
            detail="Invalid history. Must be an array of at least 3 numbers.",
        )
    try:
        values = [float(v) for v in history]
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=400,
            detail="Invalid history. Every value must be a number.",
        )
    if not all(math.isfinite(v) for v in values):
        raise HTTPException(
            status_code=400,
            detail="Invalid history. Every value must be a finite number.",
        )
    return values


# =============================================================================
# ENDPOINTS
# =============================================================================

@predict_router.post("")
async def predict(request: PredictRequest):
    """
    Forecast the next three values of a history.

    When sessionId is given, the history, determinism flag, confidence and
    forecast are stored against that session.
    """
    history = _validate_history(request.history)

    try:
        prediction = get_analyzer().predict(history)
    except InsufficientDataError as e:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid history. Must be an array of at least 3 numbers. ({e})",
        )
    except InvalidSequenceError as e:
        raise HTTPException(status_code=400, detail=f"Invalid history. {e}")
    except Exception as e:
        logger.error(f"Prediction error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal Server Error")

    if request.session_id is not None:
        await _record_prediction(request.session_id, history, prediction)

    return prediction.to_dict()


async def _record_prediction(session_id: UUID, history: List[float], prediction) -> None:
    from database import get_db_context, crud
    from database.schemas import SequenceCreate

    try:
        async with get_db_context() as db:
            if await crud.get_session(db, session_id) is None:
                raise HTTPException(status_code=404, detail="Session not found")

            await crud.create_sequence(
                db,
                SequenceCreate(
                    session_id=session_id,
                    input_values=history,
                    is_deterministic=prediction.is_deterministic,
                    confidence_score=prediction.confidence,
                    predicted_values=prediction.next_values,
                ),
            )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to record prediction for session {session_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@upload_router.post("/html")
async def upload_html(request: HtmlUploadRequest):
    """
    Extract numbers from pasted markup (text of every <span>).
    """
    if not request.html:
        raise HTTPException(status_code=400, detail="HTML content is required")

    return _extraction_response(extract_from_html(request.html))


@upload_router.post("/ocr")
async def upload_ocr(request: OcrUploadRequest):
    """
    Extract numbers from recognised OCR words, in reading order.
    """
    words = [OcrWord.from_dict(w.model_dump()) for w in request.words]
    return _extraction_response(extract_from_words(words))


@upload_router.post("/manual")
async def upload_manual(request: ManualUploadRequest):
    """
    Normalize manually typed numbers.
    """
    if not isinstance(request.numbers, list):
        raise HTTPException(status_code=400, detail="Numbers must be an array")

    return _extraction_response(normalize_manual(request.numbers), with_stats=False)
