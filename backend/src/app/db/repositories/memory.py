"""In-memory product repository for tests and local runs."""

from __future__ import annotations

import copy
import math
from typing import Any
from typing import Mapping
from typing import Optional

from app.db.models import MUTABLE_ATTRIBUTES
from app.db.models import PRODUCT_KEY
from app.exceptions import StoreError


class InMemoryProductRepository:
    """Dictionary-backed repository with the same semantics as DynamoDB.

    Items are deep-copied on the way in and out so callers cannot mutate
    stored state.
    """

    def __init__(self, items: Optional[list[Mapping[str, Any]]] = None):
        self._items: dict[str, dict[str, Any]] = {}
        for item in items or []:
            self.put(item)

    def get(self, sku: str) -> Optional[dict[str, Any]]:
        item = self._items.get(sku)
        return copy.deepcopy(item) if item is not None else None

    def list_all(self) -> list[dict[str, Any]]:
        return [copy.deepcopy(item) for item in self._items.values()]

    def put(self, item: Mapping[str, Any]) -> dict[str, Any]:
        sku = item.get(PRODUCT_KEY)
        if not isinstance(sku, str) or not sku:
            raise StoreError("put_item", detail="Missing the key sku")
        _check_storable("put_item", item)
        self._items[sku] = copy.deepcopy(dict(item))
        return copy.deepcopy(dict(item))

    def update(self, sku: str, fields: Mapping[str, Any]) -> dict[str, Any]:
        if not sku:
            raise StoreError("update_item", detail="Missing the key sku")
        _check_storable("update_item", fields)
        item = self._items.setdefault(sku, {PRODUCT_KEY: sku})
        for attribute in MUTABLE_ATTRIBUTES:
            value = fields.get(attribute)
            if value is None:
                item.pop(attribute, None)
            else:
                item[attribute] = copy.deepcopy(value)
        return copy.deepcopy(item)

    def delete(self, sku: str) -> None:
        self._items.pop(sku, None)

    def __len__(self) -> int:
        return len(self._items)


def _check_storable(operation: str, value: Any) -> None:
    # DynamoDB numbers have no NaN or Infinity
    if isinstance(value, float) and not math.isfinite(value):
        raise StoreError(operation, detail="Infinity and NaN not supported")
    if isinstance(value, Mapping):
        for inner in value.values():
            _check_storable(operation, inner)
    elif isinstance(value, (list, tuple)):
        for inner in value:
            _check_storable(operation, inner)
