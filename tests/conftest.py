"""Pytest configuration and fixtures for backend tests.

This module provides shared fixtures for testing the products API,
including API Gateway events, an in-memory repository and stubbed
DynamoDB clients.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any
from typing import Callable
from typing import Generator
from typing import Optional
from uuid import uuid4

import pytest

# Add backend source to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))


@pytest.fixture(autouse=True)
def aws_environment(monkeypatch) -> None:
    """Keep boto3 away from real credentials and regions."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
    monkeypatch.setenv('PRODUCTS_TABLE_NAME', 'products-test')


# --- Store Fixtures ---


@pytest.fixture
def sample_product() -> dict:
    """A fully populated product."""
    return {
        'sku': 'A1',
        'name': 'Widget',
        'description': 'A small widget',
        'images': ['https://cdn.example.com/a1-front.jpg'],
        'price': 9.99,
        'quantity': 5,
        'providerName': 'Acme',
        'providerSku': 'ACME-001',
        'providerUrl': 'https://acme.example.com/widget',
        'available': True,
    }


@pytest.fixture
def memory_repository():
    """An empty in-memory product repository."""
    from app.db.repositories import InMemoryProductRepository

    return InMemoryProductRepository()


@pytest.fixture
def products_handler(memory_repository):
    """A products handler backed by the in-memory repository."""
    from app.api.products import ProductsHandler

    return ProductsHandler(memory_repository)


@pytest.fixture
def dynamodb_client():
    """A real boto3 DynamoDB client that never leaves the process."""
    import boto3

    return boto3.client('dynamodb', region_name='us-east-1')


@pytest.fixture
def dynamodb_stubber(dynamodb_client) -> Generator:
    """Stubber attached to the DynamoDB client; asserts no calls remain."""
    from botocore.stub import Stubber

    with Stubber(dynamodb_client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def default_handler_reset() -> Generator:
    """Reset the process-wide handler and cached clients around a test."""
    from app.api.products import set_default_handler
    from app.db.repositories.product import clear_client_cache

    set_default_handler(None)
    clear_client_cache()
    yield
    set_default_handler(None)
    clear_client_cache()


# --- API Event Fixtures ---


@pytest.fixture
def api_gateway_event() -> dict:
    """Base API Gateway proxy event structure."""
    return {
        'resource': '/products',
        'httpMethod': 'GET',
        'path': '/products',
        'queryStringParameters': None,
        'pathParameters': None,
        'headers': {'x-api-key': 'test-key'},
        'requestContext': {
            'requestId': str(uuid4()),
        },
        'body': None,
        'isBase64Encoded': False,
    }


@pytest.fixture
def make_event(api_gateway_event) -> Callable[..., dict]:
    """Factory for API Gateway events with a method, path and body."""

    def _make(
        method: str,
        path: str = '/products',
        product_id: Optional[str] = None,
        body: Any = None,
        raw_body: Optional[str] = None,
    ) -> dict:
        event = dict(api_gateway_event)
        event['httpMethod'] = method
        event['path'] = path
        if product_id is not None:
            event['resource'] = '/products/{id}'
            event['pathParameters'] = {'id': product_id}
        if raw_body is not None:
            event['body'] = raw_body
        elif body is not None:
            event['body'] = json.dumps(body)
        return event

    return _make
