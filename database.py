from __future__ import annotations
import asyncio
import os
from sqlite3 import Row
from typing import Any, Optional

import aiosqlite
from pydantic_settings import BaseSettings

from logger import get_logger
from schemas import OrderIn

_logger = get_logger(__name__)

class Settings(BaseSettings):
    DATABASE_URL: str = os.getenv("DATABASE_URL", ":memory:")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 3000))
    STATIC_DIR: str = os.getenv("STATIC_DIR", "public")

settings = Settings()

SCHEMA = """
CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT NOT NULL,
    price REAL NOT NULL,
    image_url TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS customers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    phone TEXT NOT NULL,
    address TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS orders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    customer_id INTEGER NOT NULL,
    product_id INTEGER NOT NULL,
    quantity INTEGER NOT NULL,
    order_date TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (customer_id) REFERENCES customers(id),
    FOREIGN KEY (product_id) REFERENCES products(id)
);
"""

TABLES = ("products", "customers", "orders")

SEED_PRODUCTS: list[dict] = [
    {"name": "Smart Watch", "description": "Feature-rich smart watch", "price": 399.99, "image_url": "https://via.placeholder.com/150"},
    {"name": "Neckband", "description": "Comfortable neckband with clear sound", "price": 150.50, "image_url": "https://via.placeholder.com/150"},
    {"name": "Sneakers", "description": "Trendy sneakers for all-day wear", "price": 200.00, "image_url": "https://via.placeholder.com/150"},
    {"name": "Earpods", "description": "Wireless earpods with great sound", "price": 399.00, "image_url": "https://via.placeholder.com/150"},
]


class StorageError(Exception):
    """A statement against the store failed."""


class Database:
    """Owns the single aiosqlite connection behind the storefront.

    An in-memory SQLite database lives exactly as long as its connection, so
    the catalog is rebuilt and seeded on every ``connect()``.
    """

    def __init__(self, path: str = ":memory:"):
        self.path = path
        self._conn: Optional[aiosqlite.Connection] = None
        self._write_lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._conn is not None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StorageError("Database is not connected")
        return self._conn

    async def connect(self) -> None:
        try:
            self._conn = await aiosqlite.connect(self.path)
            self._conn.row_factory = Row
            # foreign_keys stays off: orders may name products outside the catalog
            await self._conn.executescript(SCHEMA)
            await self._conn.commit()
            await self._seed()
        except aiosqlite.Error as e:
            await self.close()
            raise StorageError(str(e)) from e
        _logger.info(f"Database ready at {self.path}")

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def _seed(self) -> None:
        cur = await self.conn.execute("SELECT COUNT(*) FROM products;")
        (count,) = await cur.fetchone()
        await cur.close()
        if count > 0:
            _logger.debug(f"Catalog already holds {count} products, skipping seed")
            return
        await self.conn.executemany(
            "INSERT INTO products (name, description, price, image_url) VALUES (?, ?, ?, ?);",
            [(p["name"], p["description"], p["price"], p["image_url"]) for p in SEED_PRODUCTS],
        )
        await self.conn.commit()
        _logger.info(f"Seeded {len(SEED_PRODUCTS)} products")

    async def _fetch_all(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        try:
            cur = await self.conn.execute(sql, params)
            rows = await cur.fetchall()
            await cur.close()
        except aiosqlite.Error as e:
            raise StorageError(str(e)) from e
        return [dict(r) for r in rows]

    async def list_products(self) -> list[dict[str, Any]]:
        return await self._fetch_all(
            "SELECT id, name, description, price, image_url FROM products ORDER BY id;"
        )

    async def list_customers(self) -> list[dict[str, Any]]:
        return await self._fetch_all(
            "SELECT id, name, email, phone, address FROM customers ORDER BY id;"
        )

    async def list_orders(self) -> list[dict[str, Any]]:
        return await self._fetch_all(
            "SELECT id, customer_id, product_id, quantity, order_date FROM orders ORDER BY id;"
        )

    async def count_rows(self) -> dict[str, int]:
        counts = {}
        for table in TABLES:
            rows = await self._fetch_all(f"SELECT COUNT(*) AS n FROM {table};")
            counts[table] = rows[0]["n"]
        return counts

    async def place_order(self, order: OrderIn) -> tuple[int, int]:
        """Insert a new customer and an order pointing at it.

        Both inserts share one transaction; if the order row cannot be written
        the customer row is rolled back with it. Returns
        ``(customer_id, order_id)``.
        """
        conn = self.conn
        async with self._write_lock:
            try:
                cur = await conn.execute(
                    "INSERT INTO customers (name, email, phone, address) VALUES (?, ?, ?, ?);",
                    (order.name, order.email, order.phone, order.address),
                )
                customer_id = cur.lastrowid
                await cur.close()
                cur = await conn.execute(
                    "INSERT INTO orders (customer_id, product_id, quantity) VALUES (?, ?, ?);",
                    (customer_id, order.product_id, order.quantity),
                )
                order_id = cur.lastrowid
                await cur.close()
                await conn.commit()
            except Exception as e:
                # integers past 64 bits fail with OverflowError, not aiosqlite.Error
                await conn.rollback()
                raise StorageError(str(e)) from e
        _logger.info(
            f"Order {order_id} placed by customer {customer_id} for product {order.product_id}"
        )
        return customer_id, order_id
