"""
Database Package

Provides database connectivity, models, schemas, and CRUD operations.

Usage:
    from database import get_db, Session, NumberSeries
    from database.crud import create_session, get_all_session_numbers
"""

# Connection management
from .connection import (
    Base,
    get_db,
    get_db_context,
    get_engine,
    get_session_factory,
    init_database,
    create_tables,
    close_database,
    check_database_connection,
)

# Configuration
from .config import (
    get_database_settings,
    get_database_url,
    DatabaseSettings,
)

# Models
from .models import (
    Session,
    NumberSequence,
    PredictionLog,
    NumberSeries,
    SeriesSource,
)

# Schemas
from .schemas import (
    SessionCreate,
    Session as SessionSchema,
    SessionDetail,
    NumberSequence as NumberSequenceSchema,
    SequenceCreate,
    SeriesCreate,
    Series as SeriesSchema,
    SeriesSaved,
    SeriesDuplicate,
    SeriesPage,
    AssembledNumbers,
)

# CRUD operations
from . import crud

__all__ = [
    # Connection
    "Base",
    "get_db",
    "get_db_context",
    "get_engine",
    "get_session_factory",
    "init_database",
    "create_tables",
    "close_database",
    "check_database_connection",
    # Config
    "get_database_settings",
    "get_database_url",
    "DatabaseSettings",
    # Models
    "Session",
    "NumberSequence",
    "PredictionLog",
    "NumberSeries",
    "SeriesSource",
    # Schemas
    "SessionCreate",
    "SessionSchema",
    "SessionDetail",
    "NumberSequenceSchema",
    "SequenceCreate",
    "SeriesCreate",
    "SeriesSchema",
    "SeriesSaved",
    "SeriesDuplicate",
    "SeriesPage",
    "AssembledNumbers",
    # CRUD
    "crud",
]
