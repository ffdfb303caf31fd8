"""
Database schema definitions for the Lens application.

Three tables back the application: user profiles, the username index used
to resolve profile URLs, and album documents.
"""

USERS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    uid TEXT PRIMARY KEY,
    username TEXT NOT NULL,
    full_name TEXT,
    email TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

USERNAMES_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS usernames (
    username TEXT PRIMARY KEY,
    uid TEXT NOT NULL,
    created_at TEXT NOT NULL
);
"""

# images holds the JSON-encoded list of AlbumImage dictionaries; timestamps are UTC ISO-8601 strings
ALBUMS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS albums (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    owner_username TEXT,
    owner_name TEXT,
    title TEXT NOT NULL,
    description TEXT,
    privacy TEXT NOT NULL DEFAULT 'private',
    images TEXT NOT NULL DEFAULT '[]',
    images_count INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

ALBUMS_TABLE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_albums_owner_id ON albums(owner_id);",
    "CREATE INDEX IF NOT EXISTS idx_albums_owner_username ON albums(owner_username);",
    "CREATE INDEX IF NOT EXISTS idx_albums_created_at ON albums(created_at DESC);",
]

ALL_SCHEMA_STATEMENTS = [USERS_TABLE_SCHEMA, USERNAMES_TABLE_SCHEMA, ALBUMS_TABLE_SCHEMA] + ALBUMS_TABLE_INDEXES

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "users": {"uid", "username", "full_name", "email", "password_hash", "created_at", "updated_at"},
    "usernames": {"username", "uid", "created_at"},
    "albums": {
        "id",
        "owner_id",
        "owner_username",
        "owner_name",
        "title",
        "description",
        "privacy",
        "images",
        "images_count",
        "created_at",
        "updated_at",
    },
}

ALBUM_COLUMNS = [
    "id",
    "owner_id",
    "owner_username",
    "owner_name",
    "title",
    "description",
    "privacy",
    "images",
    "images_count",
    "created_at",
    "updated_at",
]

USER_COLUMNS = ["uid", "username", "full_name", "email", "created_at", "updated_at"]


def get_schema_statements() -> list[str]:
    """
    Get all database schema creation statements.

    Returns:
        List of SQL statements to create tables and indexes
    """
    return ALL_SCHEMA_STATEMENTS


def validate_schema_compatibility() -> bool:
    """
    Validate that the schema covers every column the models read and write.

    Returns:
        True if schema is compatible, False otherwise
    """
    table_schemas = {
        "users": USERS_TABLE_SCHEMA.lower(),
        "usernames": USERNAMES_TABLE_SCHEMA.lower(),
        "albums": ALBUMS_TABLE_SCHEMA.lower(),
    }

    for table, columns in REQUIRED_COLUMNS.items():
        schema = table_schemas[table]
        for column in columns:
            if column not in schema:
                return False

    return True
