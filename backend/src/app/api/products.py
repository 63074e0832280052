"""Products CRUD API handler.

Routes API Gateway proxy events for the products resource:

    GET    /products          list every product
    GET    /products/{sku}    get one product
    POST   /products          create a product
    PATCH  /products/{id}     rewrite a product's non-key fields
    DELETE /products/{id}     delete a product

Dispatch is on the HTTP method first. Only GET inspects the path: the
collection is matched by exact equality and a single product by the
``/products/`` prefix, with the remainder used verbatim as the sku.
POST, PATCH and DELETE ignore the path; PATCH and DELETE read the sku from
the ``id`` path parameter.

PATCH is a full rewrite, not a merge: fields missing from the payload are
removed from the stored product.
"""

from __future__ import annotations

import time
from typing import Any
from typing import Mapping
from typing import Optional

from app.api.request import parse_body
from app.api.request import path_parameter
from app.api.request import request_id
from app.api.schemas import parse_product
from app.db.repositories import DynamoProductRepository
from app.db.repositories import ProductRepository
from app.exceptions import StoreError
from app.exceptions import ValidationError
from app.utils.logging import clear_request_context
from app.utils.logging import configure_logging
from app.utils.logging import get_logger
from app.utils.logging import log_lambda_event
from app.utils.logging import log_response
from app.utils.logging import set_request_context
from app.utils.responses import error_response
from app.utils.responses import json_response

# Configure logging on module load
configure_logging()
logger = get_logger(__name__)

COLLECTION_PATH = "/products"
ITEM_PATH_PREFIX = "/products/"

_default_handler: Optional["ProductsHandler"] = None


class ProductsHandler:
    """Routes product requests to a repository."""

    def __init__(self, repository: ProductRepository):
        self._repository = repository

    def handle(self, event: Mapping[str, Any]) -> dict[str, Any]:
        """Handle one API Gateway proxy event.

        Any exception not handled by an operation, including malformed
        JSON bodies, becomes a 500 "Internal Server Error".
        """
        method = event.get("httpMethod", "")
        path = event.get("path", "")
        logger.info(f"Products request: {method} {path}")

        try:
            if method == "GET":
                return self._get(event, path)
            if method == "POST":
                return self._create(event)
            if method == "PATCH":
                return self._update(event)
            if method == "DELETE":
                return self._delete(event)
            return error_response(405, "Method Not Allowed", event=event)
        except ValidationError as exc:
            logger.warning(f"Validation error: {exc.message}")
            return json_response(exc.status_code, exc.to_dict(), event=event)
        except Exception:
            logger.exception("Unexpected error in products handler")
            return error_response(500, "Internal Server Error", event=event)

    def _get(self, event: Mapping[str, Any], path: str) -> dict[str, Any]:
        if path == COLLECTION_PATH:
            try:
                products = self._repository.list_all()
            except StoreError as exc:
                return _store_failure("Failed to list products", exc, event)
            return json_response(200, products, event=event)

        if path.startswith(ITEM_PATH_PREFIX):
            sku = path[len(ITEM_PATH_PREFIX):]
            try:
                product = self._repository.get(sku)
            except StoreError as exc:
                return _store_failure("Failed to get product", exc, event)
            if product is None:
                return error_response(404, "Product not found", event=event)
            return json_response(200, product, event=event)

        return error_response(404, "Not found", event=event)

    def _create(self, event: Mapping[str, Any]) -> dict[str, Any]:
        product = parse_product(parse_body(event))

        try:
            created = self._repository.put(product.to_item())
        except StoreError as exc:
            return _store_failure("Failed to create product", exc, event)

        logger.info("Product created", extra={"sku": product.sku})
        return json_response(201, created, event=event)

    def _update(self, event: Mapping[str, Any]) -> dict[str, Any]:
        payload = parse_body(event)
        sku = _require_product_id(event)
        product = parse_product(payload)

        try:
            updated = self._repository.update(sku, product.mutable_fields())
        except StoreError as exc:
            return _store_failure("Failed to update product", exc, event)

        logger.info("Product updated", extra={"sku": sku})
        return json_response(200, updated, event=event)

    def _delete(self, event: Mapping[str, Any]) -> dict[str, Any]:
        sku = _require_product_id(event)

        try:
            self._repository.delete(sku)
        except StoreError as exc:
            return _store_failure("Failed to delete product", exc, event)

        logger.info("Product deleted", extra={"sku": sku})
        return json_response(204, None, event=event)


def _require_product_id(event: Mapping[str, Any]) -> str:
    sku = path_parameter(event, "id")
    if not sku:
        raise ValidationError("Product ID is required", field="id")
    return sku


def _store_failure(
    message: str,
    exc: StoreError,
    event: Mapping[str, Any],
) -> dict[str, Any]:
    logger.error(
        message,
        extra={"operation": exc.operation, "detail": exc.detail},
    )
    return error_response(500, message, event=event)


def get_default_handler() -> ProductsHandler:
    """Return the process-wide handler backed by the DynamoDB table.

    Built on first use so the client and table name are resolved once per
    Lambda execution environment.
    """
    global _default_handler
    if _default_handler is None:
        _default_handler = ProductsHandler(DynamoProductRepository.from_env())
    return _default_handler


def set_default_handler(handler: Optional[ProductsHandler]) -> None:
    """Replace the process-wide handler (None resets it)."""
    global _default_handler
    _default_handler = handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Handle products API requests."""
    set_request_context(req_id=request_id(event, context))
    start_time = time.perf_counter()

    try:
        log_lambda_event(logger, event)
        try:
            handler = get_default_handler()
        except Exception:
            logger.exception("Failed to initialize products handler")
            response = error_response(500, "Internal Server Error", event=event)
        else:
            response = handler.handle(event)

        duration_ms = (time.perf_counter() - start_time) * 1000
        log_response(logger, response["statusCode"], duration_ms)
        return response
    finally:
        clear_request_context()
