"""DynamoDB-backed product repository.

The repository is the only code that talks to DynamoDB. It speaks the
low-level client API and converts between plain Python values and
DynamoDB attribute values itself, so callers deal in ``dict`` items with
``int``/``float`` numbers.
"""

from __future__ import annotations

import math
import os
from decimal import Decimal
from typing import Any
from typing import Callable
from typing import Mapping
from typing import Optional
from typing import Protocol

import boto3
from boto3.dynamodb.types import TypeDeserializer
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError

from app.db.models import MUTABLE_ATTRIBUTES
from app.db.models import PRODUCT_KEY
from app.db.models import TABLE_NAME_ENV_VAR
from app.exceptions import StoreError
from app.utils.logging import get_logger

logger = get_logger(__name__)

_CLIENT_CACHE: dict[Optional[str], Any] = {}

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


class ProductRepository(Protocol):
    """Store operations the products API depends on.

    Every method raises ``StoreError`` when the store fails.
    """

    def get(self, sku: str) -> Optional[dict[str, Any]]: ...

    def list_all(self) -> list[dict[str, Any]]: ...

    def put(self, item: Mapping[str, Any]) -> dict[str, Any]: ...

    def update(self, sku: str, fields: Mapping[str, Any]) -> dict[str, Any]: ...

    def delete(self, sku: str) -> None: ...


def get_dynamodb_client(region_name: Optional[str] = None) -> Any:
    """Return a process-wide cached DynamoDB client."""
    if region_name not in _CLIENT_CACHE:
        _CLIENT_CACHE[region_name] = boto3.client(  # type: ignore[call-overload]
            "dynamodb",
            region_name=region_name,
        )
    return _CLIENT_CACHE[region_name]


def clear_client_cache() -> None:
    """Clear cached clients (useful in tests)."""
    _CLIENT_CACHE.clear()


class DynamoProductRepository:
    """Product repository over a single DynamoDB table keyed by sku."""

    def __init__(self, table_name: str, client: Any = None):
        """Initialize the repository.

        Args:
            table_name: Name of the products table.
            client: A boto3 DynamoDB client. Defaults to the cached client.
        """
        self._table_name = table_name
        self._client = client if client is not None else get_dynamodb_client()

    @classmethod
    def from_env(cls, client: Any = None) -> "DynamoProductRepository":
        """Build a repository for the table named by PRODUCTS_TABLE_NAME.

        An unset variable yields an empty table name; DynamoDB rejects the
        calls, which surface as store errors.
        """
        return cls(os.getenv(TABLE_NAME_ENV_VAR, ""), client=client)

    @property
    def table_name(self) -> str:
        return self._table_name

    def get(self, sku: str) -> Optional[dict[str, Any]]:
        """Get a product by sku, or None if it does not exist.

        DynamoDB rejects empty key values, so an empty sku is reported as
        absent without a store call.
        """
        if not sku:
            return None
        response = self._call("get_item", Key=_key(sku))
        item = response.get("Item")
        return deserialize_item(item) if item else None

    def list_all(self) -> list[dict[str, Any]]:
        """Return every product from a single table scan."""
        response = self._call("scan")
        if response.get("LastEvaluatedKey"):
            logger.warning(
                "Product scan truncated at the 1 MB page limit",
                extra={"returned": response.get("Count")},
            )
        return [deserialize_item(item) for item in response.get("Items", [])]

    def put(self, item: Mapping[str, Any]) -> dict[str, Any]:
        """Write a product, replacing any existing item with the same sku."""
        serialized = self._serialize("put_item", serialize_item, item)
        self._call("put_item", Item=serialized)
        return dict(item)

    def update(self, sku: str, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Rewrite all non-key attributes of a product.

        Attributes present in ``fields`` are set; the others are removed.
        The key is never changed. A missing item is created.

        Returns:
            The item as stored after the update.
        """
        names: dict[str, str] = {}
        values: dict[str, Any] = {}
        set_clauses: list[str] = []
        remove_clauses: list[str] = []

        for attribute in MUTABLE_ATTRIBUTES:
            placeholder = f"#{attribute}"
            names[placeholder] = attribute
            value = fields.get(attribute)
            if value is None:
                remove_clauses.append(placeholder)
            else:
                values[f":{attribute}"] = self._serialize(
                    "update_item", serialize_value, value
                )
                set_clauses.append(f"{placeholder} = :{attribute}")

        expression_parts = []
        if set_clauses:
            expression_parts.append("SET " + ", ".join(set_clauses))
        if remove_clauses:
            expression_parts.append("REMOVE " + ", ".join(remove_clauses))

        params: dict[str, Any] = {
            "Key": _key(sku),
            "UpdateExpression": " ".join(expression_parts),
            "ExpressionAttributeNames": names,
            "ReturnValues": "ALL_NEW",
        }
        if values:
            params["ExpressionAttributeValues"] = values

        response = self._call("update_item", **params)
        return deserialize_item(response.get("Attributes") or {})

    def delete(self, sku: str) -> None:
        """Delete a product. Deleting a missing sku is not an error."""
        self._call("delete_item", Key=_key(sku))

    def _serialize(
        self,
        operation: str,
        serialize: Callable[[Any], dict[str, Any]],
        value: Any,
    ) -> dict[str, Any]:
        # NaN, Infinity and numbers past 38 digits have no DynamoDB form
        try:
            return serialize(value)
        except (TypeError, ArithmeticError) as exc:
            logger.error(
                f"Value not storable for DynamoDB {operation}",
                exc_info=True,
                extra={"table": self._table_name},
            )
            raise StoreError(operation, detail=str(exc)) from exc

    def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        try:
            return getattr(self._client, operation)(
                TableName=self._table_name,
                **params,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error(
                f"DynamoDB {operation} failed",
                exc_info=True,
                extra={"table": self._table_name},
            )
            raise StoreError(operation, detail=str(exc)) from exc


def _key(sku: str) -> dict[str, Any]:
    return {PRODUCT_KEY: {"S": sku}}


def serialize_item(item: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a plain item to DynamoDB attribute values."""
    return {name: serialize_value(value) for name, value in item.items()}


def serialize_value(value: Any) -> dict[str, Any]:
    return _serializer.serialize(_to_decimal(value))


def deserialize_item(item: Mapping[str, Any]) -> dict[str, Any]:
    """Convert DynamoDB attribute values back to a plain item."""
    return {
        name: _from_decimal(_deserializer.deserialize(value))
        for name, value in item.items()
    }


def _to_decimal(value: Any) -> Any:
    # TypeSerializer refuses floats and lets -Infinity through
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TypeError("Infinity and NaN not supported")
        return Decimal(str(value))
    if isinstance(value, dict):
        return {key: _to_decimal(inner) for key, inner in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_decimal(inner) for inner in value]
    return value


def _from_decimal(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {key: _from_decimal(inner) for key, inner in value.items()}
    if isinstance(value, list):
        return [_from_decimal(inner) for inner in value]
    return value
