"""Tests for the products Lambda entrypoint."""

from __future__ import annotations

import importlib.util
import json
import sys
from pathlib import Path
from types import SimpleNamespace

sys.path.append(str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))

from app.api import products  # noqa: E402
from app.db.repositories import DynamoProductRepository  # noqa: E402
from app.utils.logging import request_id  # noqa: E402

ENTRYPOINT = (
    Path(__file__).resolve().parents[1] / 'backend' / 'lambda' / 'products' / 'handler.py'
)


def _load_entrypoint():
    spec = importlib.util.spec_from_file_location('products_entrypoint', ENTRYPOINT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_entrypoint_delegates_to_products_handler(
    default_handler_reset, products_handler, make_event
) -> None:
    products.set_default_handler(products_handler)
    entrypoint = _load_entrypoint()

    response = entrypoint.lambda_handler(make_event('GET', '/products'), None)

    assert response['statusCode'] == 200
    assert json.loads(response['body']) == []


def test_default_handler_uses_dynamodb_table(default_handler_reset, mocker) -> None:
    mocker.patch('app.db.repositories.product.boto3.client')
    handler = products.get_default_handler()

    assert isinstance(handler._repository, DynamoProductRepository)
    assert handler._repository.table_name == 'products-test'
    assert products.get_default_handler() is handler


def test_request_context_is_cleared(
    default_handler_reset, products_handler, make_event, mocker
) -> None:
    products.set_default_handler(products_handler)
    seen = []
    mocker.patch.object(
        products_handler,
        'handle',
        side_effect=lambda event: seen.append(request_id.get()) or {'statusCode': 200},
    )
    event = make_event('GET', '/products')
    event['requestContext'] = {'requestId': 'req-abc'}

    products.lambda_handler(event, None)

    assert seen == ['req-abc']
    assert request_id.get() == ''


def test_lambda_request_id_is_fallback(
    default_handler_reset, products_handler, make_event, mocker
) -> None:
    products.set_default_handler(products_handler)
    seen = []
    mocker.patch.object(
        products_handler,
        'handle',
        side_effect=lambda event: seen.append(request_id.get()) or {'statusCode': 204},
    )
    event = make_event('GET', '/products')
    event['requestContext'] = {}

    products.lambda_handler(event, SimpleNamespace(aws_request_id='lambda-1'))

    assert seen == ['lambda-1']


def test_initialization_failure_returns_500(
    default_handler_reset, make_event, mocker
) -> None:
    mocker.patch.object(
        products, 'get_default_handler', side_effect=RuntimeError('no region')
    )
    response = products.lambda_handler(make_event('GET', '/products'), None)
    assert response['statusCode'] == 500
    assert json.loads(response['body']) == {'message': 'Internal Server Error'}
