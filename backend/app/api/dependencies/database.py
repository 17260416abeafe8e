# backend/app/api/dependencies/database.py
"""
Database-related dependencies.

Re-exports the session generator so dependency overrides keyed on
``app.database.get_db`` apply to every route.
"""

from ...database import get_db

__all__ = ["get_db"]
