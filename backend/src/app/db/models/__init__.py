"""Product table definitions."""

from app.db.models.product import MUTABLE_ATTRIBUTES
from app.db.models.product import PRODUCT_KEY
from app.db.models.product import TABLE_NAME_ENV_VAR

__all__ = [
    "MUTABLE_ATTRIBUTES",
    "PRODUCT_KEY",
    "TABLE_NAME_ENV_VAR",
]
