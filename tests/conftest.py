"""Pytest configuration and fixtures for the test suite."""
import pytest
import requests
from unittest.mock import Mock

from shopify_image_sync.config import ShopifyConfig
from shopify_image_sync.shopify_image_manager import MediaRecord
from shopify_image_sync.shopify_staged_uploads import StagedUploadTarget


def make_response(payload=None, status_code=200, text='', reason=''):
    """Build a mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.reason = reason
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Client Error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


class FakeShopifyGraphQL:
    """Answers GraphQL POSTs the way the Admin API does, keyed on the operation."""

    def __init__(self, products=None, staged_target=None, staged_user_errors=None,
                 media_user_errors=None):
        self.products = products or {}
        self.staged_target = staged_target or {
            'url': 'https://storage.example.com/upload',
            'resourceUrl': 'https://cdn/x.jpg',
            'parameters': [{'name': 'key', 'value': 'abc'}]
        }
        self.staged_user_errors = staged_user_errors or []
        self.media_user_errors = media_user_errors or []
        self.requests = []

    def operations(self):
        return [operation for operation, _ in self.requests]

    def post(self, url, headers=None, json=None, timeout=None):
        query = json['query']
        variables = json['variables']

        if 'productByHandle' in query:
            self.requests.append(('productByHandle', variables))
            product_id = self.products.get(variables['handle'])
            product = {'id': product_id, 'handle': variables['handle']} if product_id else None
            return make_response({'data': {'productByHandle': product}})

        if 'stagedUploadsCreate' in query:
            self.requests.append(('stagedUploadsCreate', variables))
            targets = [] if self.staged_user_errors else [self.staged_target]
            return make_response({'data': {'stagedUploadsCreate': {
                'stagedTargets': targets,
                'userErrors': self.staged_user_errors
            }}})

        if 'productCreateMedia' in query:
            self.requests.append(('productCreateMedia', variables))
            media = [] if self.media_user_errors else [{
                'alt': variables['media'][0]['alt'],
                'mediaContentType': 'IMAGE',
                'status': 'UPLOADED',
                'id': 'gid://shopify/MediaImage/900'
            }]
            return make_response({'data': {'productCreateMedia': {
                'media': media,
                'mediaUserErrors': self.media_user_errors
            }}})

        raise AssertionError(f"Unexpected GraphQL query: {query}")


@pytest.fixture
def config(tmp_path):
    """Configuration pointing at a test store with no delay."""
    return ShopifyConfig(
        store_url='https://test-store.myshopify.com',
        api_version='2024-10',
        access_token='shpat_test_token',
        images_dir=str(tmp_path / 'images'),
        request_delay=0
    )


@pytest.fixture
def graphql_session():
    """A mock session for GraphQL requests."""
    return Mock(spec=requests.Session)


@pytest.fixture
def storage_session():
    """A real session whose send() is mocked, so requests are fully encoded."""
    session = requests.Session()
    session.send = Mock(return_value=make_response(status_code=201))
    return session


@pytest.fixture
def images_dir(tmp_path):
    """An empty image directory."""
    directory = tmp_path / 'images'
    directory.mkdir()
    return directory


@pytest.fixture
def staged_target():
    return StagedUploadTarget(
        url='https://storage.example.com/upload',
        resource_url='https://cdn/x.jpg',
        parameters=(('key', 'abc'), ('policy', 'cG9saWN5'), ('x-goog-signature', 'sig'))
    )


@pytest.fixture
def media_record():
    return MediaRecord(
        id='gid://shopify/MediaImage/900',
        alt='red-mug',
        media_content_type='IMAGE',
        status='UPLOADED'
    )
