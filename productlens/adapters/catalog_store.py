"""
Catalog Store Adapter for ProductLens.
Persists approved products as JSON documents in a SQLite database.
"""
import asyncio
import json
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional

from productlens.models.product import CanonicalProduct
from productlens.utils.logger import LayerLogger


CANONICAL_PRODUCTS_COLLECTION = "canonical_products"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    id TEXT PRIMARY KEY,
    collection TEXT NOT NULL,
    body TEXT NOT NULL,
    created_at TEXT NOT NULL,
    approved_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents (collection, created_at);
"""


class PersistenceError(Exception):
    """A catalog write or read failed."""


class CatalogStore:
    """
    Document store for canonical products.

    Each call opens its own connection and runs in a worker thread, so the
    store is safe to share across requests.
    """

    def __init__(self, db_path: str = "data/catalog.db"):
        self.db_path = db_path
        self.logger = LayerLogger("catalog_store")
        self._initialized = False

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row  # Return rows as dicts
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _ensure_schema(self):
        if self._initialized:
            return
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
        self._initialized = True

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _from_row(row: sqlite3.Row) -> CanonicalProduct:
        body = json.loads(row["body"])
        return CanonicalProduct(
            id=row["id"],
            created_at=row["created_at"],
            approved_at=row["approved_at"],
            **body,
        )

    # =========================================================================
    # Sync operations (run in a worker thread)
    # =========================================================================

    def _insert(self, product: CanonicalProduct) -> str:
        self._ensure_schema()
        doc_id = uuid.uuid4().hex
        timestamp = self._now()
        body = product.model_dump(include={"name", "price", "link", "source_url"})
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO documents (id, collection, body, created_at, approved_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (doc_id, CANONICAL_PRODUCTS_COLLECTION, json.dumps(body), timestamp, timestamp),
            )
        return doc_id

    def _select_one(self, doc_id: str) -> Optional[CanonicalProduct]:
        self._ensure_schema()
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM documents WHERE id = ? AND collection = ?",
                (doc_id, CANONICAL_PRODUCTS_COLLECTION),
            ).fetchone()
        return self._from_row(row) if row else None

    def _select_all(self) -> List[CanonicalProduct]:
        self._ensure_schema()
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM documents WHERE collection = ? ORDER BY created_at DESC, rowid DESC",
                (CANONICAL_PRODUCTS_COLLECTION,),
            ).fetchall()
        return [self._from_row(row) for row in rows]

    # =========================================================================
    # Async API
    # =========================================================================

    async def add(self, product: CanonicalProduct) -> str:
        """
        Save an approved product.

        Returns:
            The generated record id

        Raises:
            PersistenceError: if the write failed
        """
        self.logger.log_action("add_canonical_product", "started", link=product.link)
        try:
            doc_id = await asyncio.to_thread(self._insert, product)
        except (sqlite3.Error, OSError) as e:
            self.logger.log_error(
                f"Error adding canonical product: {str(e)}",
                error_type="persistence_error",
                link=product.link,
            )
            raise PersistenceError("Failed to save approved product.") from e

        self.logger.log_action("add_canonical_product", "completed", id=doc_id)
        return doc_id

    async def get(self, doc_id: str) -> Optional[CanonicalProduct]:
        """Fetch one canonical product by id."""
        try:
            return await asyncio.to_thread(self._select_one, doc_id)
        except (sqlite3.Error, OSError) as e:
            self.logger.log_error(f"Error reading canonical product: {str(e)}", error_type="persistence_error")
            raise PersistenceError("Failed to read approved product.") from e

    async def list_all(self) -> List[CanonicalProduct]:
        """All canonical products, newest first."""
        try:
            return await asyncio.to_thread(self._select_all)
        except (sqlite3.Error, OSError) as e:
            self.logger.log_error(f"Error listing canonical products: {str(e)}", error_type="persistence_error")
            raise PersistenceError("Failed to list approved products.") from e
