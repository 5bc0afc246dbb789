# catalog/migrations.py
"""
Versioned schema migrations for the painting catalog.

Each entry in MIGRATIONS moves the schema from version N-1 to N. The
applied version is kept in SQLite's ``PRAGMA user_version``. Run them at
deploy time with ``python migrate.py``; the web app never alters the
schema.
"""

import sqlite3

from logger_setup import service_logger

from .db import get_db
from .errors import CatalogError

log = service_logger('catalog')

MIGRATIONS = [
    # 1: base catalog
    """
    CREATE TABLE IF NOT EXISTS painting (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        artist TEXT NOT NULL,
        year TEXT,
        description TEXT,
        museum TEXT,
        wiki_link TEXT,
        view_count INTEGER NOT NULL DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """,
    # 2: feature vectors
    """
    ALTER TABLE painting ADD COLUMN features TEXT;
    ALTER TABLE painting ADD COLUMN processing_status TEXT DEFAULT 'pending';
    """,
    # 3: recognition log
    """
    CREATE TABLE IF NOT EXISTS recognition_log (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        painting_id INTEGER REFERENCES painting(id),
        confidence_score REAL NOT NULL,
        success INTEGER NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    CREATE INDEX IF NOT EXISTS idx_recognition_log_painting ON recognition_log(painting_id);
    """,
]

LATEST_VERSION = len(MIGRATIONS)


def current_version(conn):
    return conn.execute("PRAGMA user_version").fetchone()[0]


def apply_migrations(db_path, target=None):
    """Apply every pending migration up to ``target`` and return the new version."""
    target = LATEST_VERSION if target is None else target
    if not 0 <= target <= LATEST_VERSION:
        raise ValueError(f"Unknown schema version {target}")

    try:
        with get_db(db_path) as conn:
            version = current_version(conn)
            if version > LATEST_VERSION:
                raise CatalogError(
                    f"Database is at version {version}, newer than this code ({LATEST_VERSION})"
                )
            for number in range(version + 1, target + 1):
                script = MIGRATIONS[number - 1]
                conn.executescript(f"BEGIN;\n{script}\nPRAGMA user_version = {number};\nCOMMIT;")
                log.info(f"Applied migration {number}")
            return max(version, current_version(conn))
    except sqlite3.Error as e:
        raise CatalogError(f"Migration failed: {e}") from e
