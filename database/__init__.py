"""
Database Package Initialization.

============================================================
DATABASE PERSISTENCE LAYER
============================================================

Engine, session and transaction management shared by the
NFS calculation repository. Every failure raises; nothing
is swallowed.

============================================================
"""

from .engine import (
    # Declarative base
    Base,

    # Engine creation
    create_database_engine,
    configure_engine,
    dispose_engine,
    get_database_url,
    get_engine,

    # Session management
    get_session_factory,
    transaction_scope,

    # Database initialization
    initialize_database,
    verify_database_connection,
    create_all_tables,

    # Exceptions
    DatabasePersistenceError,
    DatabaseConnectionError,
    DatabaseInitializationError,
)


__all__ = [
    "Base",
    "create_database_engine",
    "configure_engine",
    "dispose_engine",
    "get_database_url",
    "get_engine",
    "get_session_factory",
    "transaction_scope",
    "initialize_database",
    "verify_database_connection",
    "create_all_tables",
    "DatabasePersistenceError",
    "DatabaseConnectionError",
    "DatabaseInitializationError",
]
