"""
DuckDB connection and schema management.

The whole application shares one database file holding the ``users``,
``usernames`` and ``albums`` tables.
"""

from pathlib import Path
from typing import Any

import duckdb

from ..logging_config import get_logger
from .schema import REQUIRED_COLUMNS, get_schema_statements, validate_schema_compatibility

logger = get_logger(__name__)

MEMORY_DATABASE = ":memory:"

Parameters = list | tuple | None


class DatabaseManager:
    """Owns a lazily opened DuckDB connection. Usable as a context manager that closes it."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._connection: duckdb.DuckDBPyConnection | None = None

    def connect(self) -> duckdb.DuckDBPyConnection:
        if self._connection is None:
            self._connection = duckdb.connect(self.db_path)
            logger.info("database_connected", db_path=self.db_path)
        return self._connection

    def close(self) -> None:
        if self._connection is None:
            return
        self._connection.close()
        self._connection = None
        logger.info("database_closed", db_path=self.db_path)

    def initialize_schema(self) -> None:
        """
        Create missing tables and indexes.

        Raises:
            RuntimeError: If the DDL no longer covers the columns the models read
            duckdb.Error: If a statement fails
        """
        if not validate_schema_compatibility():
            raise RuntimeError("Schema is not compatible with the Lens models")

        conn = self.connect()
        for statement in get_schema_statements():
            conn.execute(statement)
        conn.commit()
        logger.info("database_schema_initialized", db_path=self.db_path)

    def _existing_columns(self) -> dict[str, set[str]]:
        rows = self.execute_query(
            "SELECT table_name, column_name FROM information_schema.columns WHERE table_name IN (?, ?, ?)",
            list(REQUIRED_COLUMNS),
        )
        columns: dict[str, set[str]] = {}
        for table_name, column_name in rows:
            columns.setdefault(table_name, set()).add(column_name)
        return columns

    def verify_schema(self) -> bool:
        """True when every table exists with at least the columns the models need."""
        try:
            existing = self._existing_columns()
        except duckdb.Error as e:
            logger.error("schema_verification_failed", error=str(e))
            return False

        for table, required in REQUIRED_COLUMNS.items():
            missing = required - existing.get(table, set())
            if missing:
                logger.warning("schema_incomplete", table=table, missing_columns=sorted(missing))
                return False
        return True

    def _run(self, query: str, parameters: Parameters) -> duckdb.DuckDBPyConnection:
        conn = self.connect()
        try:
            return conn.execute(query, parameters) if parameters else conn.execute(query)
        except duckdb.Error as e:
            logger.error("query_failed", query=query, error=str(e))
            raise

    def execute_query(self, query: str, parameters: Parameters = None) -> list[tuple]:
        """
        Run a statement.

        Returns:
            Result rows as tuples, or an empty list for statements without a result set
        """
        result = self._run(query, parameters)
        return result.fetchall() if result.description is not None else []

    def fetch_dicts(self, query: str, parameters: Parameters = None) -> list[dict[str, Any]]:
        """Run a SELECT and return each row keyed by column name."""
        result = self._run(query, parameters)
        columns = [column[0] for column in result.description]
        return [dict(zip(columns, row)) for row in result.fetchall()]

    def checkpoint(self) -> None:
        """Flush the write-ahead log so the file can be copied."""
        self.connect().execute("CHECKPOINT")

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def create_database(db_path: str) -> DatabaseManager:
    """
    Create a database with the full schema, making parent directories as needed.

    Raises:
        RuntimeError: If the database cannot be created
    """
    try:
        if db_path != MEMORY_DATABASE:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        db_manager = DatabaseManager(db_path)
        db_manager.initialize_schema()
        if not db_manager.verify_schema():
            raise RuntimeError("Schema verification failed after creation")
    except Exception as e:
        logger.error("database_creation_failed", db_path=db_path, error=str(e))
        raise RuntimeError(f"Database creation failed: {e}") from e

    logger.info("database_created", db_path=db_path)
    return db_manager


def get_database_manager(db_path: str, create_if_missing: bool = True) -> DatabaseManager:
    """
    Open an existing database, or create it.

    An existing file with an incomplete schema gets the missing tables added.

    Raises:
        FileNotFoundError: If the file is missing and create_if_missing is False
    """
    if db_path == MEMORY_DATABASE or not Path(db_path).exists():
        if not create_if_missing:
            raise FileNotFoundError(f"Database file not found: {db_path}")
        return create_database(db_path)

    db_manager = DatabaseManager(db_path)
    if not db_manager.verify_schema():
        logger.warning("schema_reinitializing", db_path=db_path)
        db_manager.initialize_schema()
    return db_manager
