"""
Database Models

SQLAlchemy ORM models for the sequence forecast backend.
Defines the database schema and relationships.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import (
    JSON,
    String,
    Integer,
    Float,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from .connection import Base


# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================

class SeriesSource(str, enum.Enum):
    """Where an imported batch of numbers came from."""
    HTML = "HTML"
    OCR = "OCR"
    MANUAL = "MANUAL"


# =============================================================================
# SESSIONS
# =============================================================================

class Session(Base):
    """
    Session model - one user's working session.

    Every imported batch and every recorded prediction belongs to a session.
    """
    __tablename__ = "sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    student_name: Mapped[str] = mapped_column(String(255), default="Anonymous", nullable=False)
    mode: Mapped[str] = mapped_column(String(50), default="EDUCATION", nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )

    # Relationships
    number_sequences: Mapped[List["NumberSequence"]] = relationship(
        "NumberSequence",
        back_populates="session",
        cascade="all, delete-orphan",
    )
    number_series: Mapped[List["NumberSeries"]] = relationship(
        "NumberSeries",
        back_populates="session",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Session {self.id} {self.student_name}>"


# =============================================================================
# PREDICTIONS
# =============================================================================

class NumberSequence(Base):
    """
    NumberSequence model - a history that was sent for prediction.

    Stores the input and the engine's determinism flag and confidence.
    """
    __tablename__ = "number_sequences"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    input_values: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    is_deterministic: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    confidence_score: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )

    # Relationships
    session: Mapped["Session"] = relationship("Session", back_populates="number_sequences")
    prediction_logs: Mapped[List["PredictionLog"]] = relationship(
        "PredictionLog",
        back_populates="sequence",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<NumberSequence {self.id} n={len(self.input_values or [])}>"


class PredictionLog(Base):
    """PredictionLog model - forecast values produced for a sequence."""
    __tablename__ = "prediction_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    sequence_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("number_sequences.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    predicted_values: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )

    sequence: Mapped["NumberSequence"] = relationship("NumberSequence", back_populates="prediction_logs")


# =============================================================================
# IMPORTED SERIES
# =============================================================================

class NumberSeries(Base):
    """
    NumberSeries model - one imported batch of observations.

    A session's full history is assembled from its batches, newest first,
    dropping batches already contained in a newer one.
    """
    __tablename__ = "number_series"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    numbers: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    source: Mapped[SeriesSource] = mapped_column(SQLEnum(SeriesSource), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )

    session: Mapped["Session"] = relationship("Session", back_populates="number_series")

    __table_args__ = (
        Index("ix_number_series_session_created", "session_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<NumberSeries {self.id} {self.source.value} count={self.count}>"
