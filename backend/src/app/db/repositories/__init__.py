"""Repository implementations for product persistence.

Repositories keep the request handlers independent of the store, so
tests can swap DynamoDB for the in-memory implementation.
"""

from app.db.repositories.memory import InMemoryProductRepository
from app.db.repositories.product import DynamoProductRepository
from app.db.repositories.product import ProductRepository

__all__ = [
    "DynamoProductRepository",
    "InMemoryProductRepository",
    "ProductRepository",
]
