"""
Pydantic Schemas

API request and response models for validation and serialization.
Separate from SQLAlchemy models to maintain clean separation.
Field names are camelCase on the wire and snake_case in Python.
"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
import enum

from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS (matching database enums)
# =============================================================================

class SeriesSource(str, enum.Enum):
    HTML = "HTML"
    OCR = "OCR"
    MANUAL = "MANUAL"


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# SESSION SCHEMAS
# =============================================================================

class SessionCreate(CamelModel):
    """Create a session."""
    student_name: Optional[str] = Field(None, max_length=255)
    mode: str = Field(default="EDUCATION", max_length=50)


class NumberSequence(CamelModel):
    """A history recorded with its prediction outcome."""
    id: UUID
    session_id: UUID
    input_values: List[float]
    is_deterministic: bool
    confidence_score: float
    created_at: datetime


class Session(CamelModel):
    """Session response."""
    id: UUID
    student_name: str
    mode: str
    created_at: datetime


class SessionDetail(Session):
    """Session with its recorded prediction sequences."""
    number_sequences: List[NumberSequence] = Field(default_factory=list)


# =============================================================================
# SERIES SCHEMAS
# =============================================================================

class SeriesCreate(CamelModel):
    """Save an imported batch of numbers."""
    session_id: UUID
    numbers: List[float]
    source: SeriesSource


class Series(CamelModel):
    """Series response."""
    id: UUID
    session_id: UUID
    numbers: List[float]
    source: SeriesSource
    count: int
    created_at: datetime


class SeriesSaved(CamelModel):
    """Result of saving a batch."""
    success: bool = True
    series: Series


class SeriesDuplicate(CamelModel):
    """Returned when the batch equals the session's latest batch."""
    message: str = "Series already exists"
    duplicate: bool = True


class SeriesPage(CamelModel):
    """Paginated series for a session, newest first."""
    series: List[Series]
    total: int
    page: int
    total_pages: int


class AssembledNumbers(CamelModel):
    """All numbers of a session after deduplication."""
    success: bool = True
    numbers: List[float]
    count: int


# =============================================================================
# PREDICTION RECORD
# =============================================================================

class SequenceCreate(BaseModel):
    """Record a prediction against a session."""
    session_id: UUID
    input_values: List[float]
    is_deterministic: bool
    confidence_score: float
    predicted_values: List[float]
