# products_api/models.py

"""
Persistence mapping for the Products API.
The `products` table is declared explicitly and the plain `Product` record
class is mapped onto it, so the record shape does not depend on the ORM.
"""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Table
from sqlalchemy.sql import func

from .db import mapper_registry, metadata

# Largest value the 32-bit integer id column can hold.
MAX_PRODUCT_ID = 2**31 - 1

products_table = Table(
    "products",
    metadata,
    # AUTOINCREMENT keeps SQLite from reusing the id of a deleted row.
    Column("id", Integer, primary_key=True, index=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("price", Float, nullable=False),
    Column("availability", Boolean, nullable=False, default=True),
    # 'created_at' defaults to current timestamp on creation.
    # 'updated_at' updates to current timestamp on every record update.
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()),
    sqlite_autoincrement=True,
)


class Product:
    """A single product record."""

    def __init__(self, name, price, availability=True):
        self.name = name
        self.price = price
        self.availability = availability

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', price={self.price}, availability={self.availability})>"


mapper_registry.map_imperatively(Product, products_table)
