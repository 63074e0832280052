"""Pydantic schemas for product payloads."""

from __future__ import annotations

from typing import Any
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import JsonValue
from pydantic.alias_generators import to_camel

from app.db.models import MUTABLE_ATTRIBUTES
from app.exceptions import ValidationError


class Product(BaseModel):
    """Product schema.

    Every field is optional: create accepts partial records and update
    payloads are partial by definition. Attribute names on the wire and in
    the table are camelCase.

    Values are kept as given. The table is schemaless beyond its string
    key, so a value of an unexpected type, a missing sku or an unknown
    attribute is the store's to accept or refuse, not the API's.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    sku: JsonValue = None
    name: JsonValue = None  # str
    description: JsonValue = None  # str
    images: JsonValue = None  # list of URL strings
    price: JsonValue = None  # number
    quantity: JsonValue = None  # int
    provider_name: JsonValue = None  # str
    provider_sku: JsonValue = None  # str
    provider_url: JsonValue = None  # str
    available: JsonValue = None  # bool

    def to_item(self) -> dict[str, Any]:
        """Return the store representation: every supplied key, extras included."""
        item = {
            field.alias or name: getattr(self, name)
            for name, field in type(self).model_fields.items()
            if name in self.model_fields_set
        }
        item.update(self.model_extra or {})
        return item

    def mutable_fields(self) -> dict[str, Any]:
        """Return the supplied non-null non-key fields by store attribute name."""
        item = self.to_item()
        return {
            name: item[name]
            for name in MUTABLE_ATTRIBUTES
            if item.get(name) is not None
        }


def parse_product(payload: Any) -> Product:
    """Wrap a decoded JSON payload in a Product.

    Raises:
        ValidationError: If the payload is not a JSON object.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return Product.model_validate(payload)
