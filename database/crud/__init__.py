"""
CRUD Operations

Database Create, Read, Update, Delete operations.
Each module handles a specific entity.
"""

from .sessions import (
    create_session,
    get_session,
)

from .sequences import (
    create_sequence,
)

from .series import (
    save_series,
    get_series,
    get_session_series,
    get_latest_series,
    check_duplicate,
    get_all_session_numbers,
    delete_series,
    total_pages,
)

__all__ = [
    # Sessions
    "create_session",
    "get_session",
    # Prediction records
    "create_sequence",
    # Series
    "save_series",
    "get_series",
    "get_session_series",
    "get_latest_series",
    "check_duplicate",
    "get_all_session_numbers",
    "delete_series",
    "total_pages",
]
