"""Product table layout.

Products live in a single DynamoDB table keyed by ``sku`` (string
partition key, no sort key). Items are schemaless beyond the key; the
attribute names below are the ones the API reads and writes.
"""

from __future__ import annotations

PRODUCT_KEY = "sku"

# Non-key attributes, rewritten as a whole by an update.
MUTABLE_ATTRIBUTES: tuple[str, ...] = (
    "name",
    "description",
    "images",
    "price",
    "quantity",
    "providerName",
    "providerSku",
    "providerUrl",
    "available",
)

TABLE_NAME_ENV_VAR = "PRODUCTS_TABLE_NAME"
