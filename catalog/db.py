# catalog/db.py
import os
import sqlite3
from contextlib import contextmanager
from typing import Generator


def ensure_db_directory(db_path):
    directory = os.path.dirname(db_path)
    if directory:
        os.makedirs(directory, exist_ok=True)


@contextmanager
def get_db(db_path) -> Generator[sqlite3.Connection, None, None]:
    """Open a connection, commit on success, roll back on error."""
    ensure_db_directory(db_path)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
