"""
Database Package Initialization.

============================================================
DATABASE PERSISTENCE LAYER
============================================================

Engine, sessions and schema bootstrap for the violation log
and vehicle score tables. ORM models live with their domain
in violation_scoring.models.

REQUIRED:
- Every failure raises hard exceptions
- All transactions are explicit with commit/rollback

============================================================
"""

from .engine import (
    # Declarative base
    Base,

    # Engine creation
    DEFAULT_DATABASE_URL,
    get_database_url,
    create_database_engine,
    get_engine,
    configure_engine,
    dispose_engine,

    # Session management
    create_session_factory,
    get_session_factory,
    transaction_scope,

    # Database initialization
    REQUIRED_TABLES,
    verify_database_connection,
    create_all_tables,
    missing_tables,
    verify_required_tables,
    initialize_database,

    # Exceptions
    DatabasePersistenceError,
    DatabaseConnectionError,
    DatabaseInitializationError,
)

__all__ = [
    "Base",
    "DEFAULT_DATABASE_URL",
    "get_database_url",
    "create_database_engine",
    "get_engine",
    "configure_engine",
    "dispose_engine",
    "create_session_factory",
    "get_session_factory",
    "transaction_scope",
    "REQUIRED_TABLES",
    "verify_database_connection",
    "create_all_tables",
    "missing_tables",
    "verify_required_tables",
    "initialize_database",
    "DatabasePersistenceError",
    "DatabaseConnectionError",
    "DatabaseInitializationError",
]
