# catalog/catalog.py
"""
SQLite-backed painting catalog.

Feature vectors are stored as JSON arrays in ``painting.features``; a
NULL column means the painting has not been processed yet. Every method
opens its own connection, so one catalog can be shared across request
threads and the background writer.
"""

import json
import sqlite3
from typing import List, Optional, Tuple

from matcher import CatalogEntry

from .db import get_db
from .errors import CatalogError, PaintingNotFound

_SELECT = """
    SELECT id, title, artist, year, description, museum, wiki_link,
           view_count, processing_status, created_at, features
    FROM painting
"""


def _row_to_entry(row) -> CatalogEntry:
    features = None
    if row["features"] is not None:
        try:
            features = json.loads(row["features"])
        except ValueError as e:
            raise CatalogError(f"Painting {row['id']} has corrupt features: {e}") from e
    metadata = {
        "title": row["title"],
        "artist": row["artist"],
        "year": row["year"],
        "description": row["description"],
        "museum": row["museum"],
        "wiki_link": row["wiki_link"],
        "view_count": row["view_count"] or 0,
        "processing_status": row["processing_status"],
        "created_at": row["created_at"],
    }
    return CatalogEntry(id=row["id"], features=features, metadata=metadata)


class PaintingCatalog:

    def __init__(self, db_path):
        self.db_path = db_path

    def _query(self, sql, params=()):
        try:
            with get_db(self.db_path) as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise CatalogError(str(e)) from e

    def list_paintings(self) -> List[CatalogEntry]:
        return [_row_to_entry(r) for r in self._query(_SELECT + " ORDER BY id")]

    def get(self, painting_id) -> CatalogEntry:
        rows = self._query(_SELECT + " WHERE id = ?", (painting_id,))
        if not rows:
            raise PaintingNotFound(painting_id)
        return _row_to_entry(rows[0])

    def list_entries_with_features(self) -> List[CatalogEntry]:
        rows = self._query(_SELECT + " WHERE features IS NOT NULL ORDER BY id")
        return [_row_to_entry(r) for r in rows]

    def list_pending(self) -> List[CatalogEntry]:
        rows = self._query(_SELECT + " WHERE features IS NULL ORDER BY id")
        return [_row_to_entry(r) for r in rows]

    def add_painting(self, title, artist, year=None, description=None,
                     museum=None, wiki_link=None, features=None) -> CatalogEntry:
        encoded = _encode_features(features)
        status = "completed" if encoded is not None else "pending"
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO painting (title, artist, year, description, museum,
                                          wiki_link, view_count, features, processing_status)
                    VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?)
                    """,
                    (title, artist, year, description, museum, wiki_link, encoded, status),
                )
                painting_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise CatalogError(str(e)) from e
        return self.get(painting_id)

    def store_features(self, painting_id, features) -> CatalogEntry:
        encoded = _encode_features(features)
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.execute(
                    "UPDATE painting SET features = ?, processing_status = 'completed' WHERE id = ?",
                    (encoded, painting_id),
                )
                updated = cursor.rowcount
        except sqlite3.Error as e:
            raise CatalogError(str(e)) from e
        if updated == 0:
            raise PaintingNotFound(painting_id)
        return self.get(painting_id)

    def increment_view_count(self, painting_id):
        try:
            with get_db(self.db_path) as conn:
                conn.execute(
                    "UPDATE painting SET view_count = view_count + 1 WHERE id = ?",
                    (painting_id,),
                )
        except sqlite3.Error as e:
            raise CatalogError(str(e)) from e

    def log_recognition(self, painting_id: Optional[int], score: float, success: bool):
        try:
            with get_db(self.db_path) as conn:
                conn.execute(
                    "INSERT INTO recognition_log (painting_id, confidence_score, success) VALUES (?, ?, ?)",
                    (painting_id, float(score), int(success)),
                )
        except sqlite3.Error as e:
            raise CatalogError(str(e)) from e

    def recognition_log(self, limit=100):
        rows = self._query(
            "SELECT painting_id, confidence_score, success FROM recognition_log ORDER BY id DESC LIMIT ?",
            (limit,),
        )
        return [dict(r) for r in rows]

    def stats(self) -> Tuple[int, int]:
        row = self._query("SELECT COUNT(*) AS total, COUNT(features) AS with_features FROM painting")[0]
        return int(row["total"]), int(row["with_features"])


def _encode_features(features):
    if features is None:
        return None
    return json.dumps([float(x) for x in features])
