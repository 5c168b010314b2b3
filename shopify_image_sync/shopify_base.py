"""
Shopify Base Classes and Utilities

This module contains the GraphQL client, mutation documents and small
response helpers shared by the image sync components.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from .config import ShopifyConfig
from .errors import MalformedResponse, RemoteQueryError

# GraphQL mutations and queries
STAGED_UPLOADS_CREATE_MUTATION = """
mutation stagedUploadsCreate($input: [StagedUploadInput!]!) {
  stagedUploadsCreate(input: $input) {
    stagedTargets {
      url
      resourceUrl
      parameters {
        name
        value
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""

CREATE_MEDIA_MUTATION = """
mutation productCreateMedia($media: [CreateMediaInput!]!, $productId: ID!) {
  productCreateMedia(media: $media, productId: $productId) {
    media {
      alt
      mediaContentType
      status
      id
    }
    mediaUserErrors {
      field
      message
    }
  }
}
"""

SHOP_NAME_QUERY = """
query {
  shop {
    name
  }
}
"""


def require_field(container: Any, key: str, context: str) -> Any:
    """Return container[key], raising MalformedResponse when it is absent."""
    if not isinstance(container, dict) or key not in container:
        raise MalformedResponse(f"{context}: response is missing '{key}'")
    return container[key]


def error_messages(errors: Any) -> str:
    """Join a GraphQL ``errors`` member (list of objects, or a bare string) into one message."""
    if not isinstance(errors, list):
        return str(errors)
    return '; '.join(error.get('message', str(error)) if isinstance(error, dict) else str(error)
                     for error in errors)


def first_user_error(user_errors: Optional[List[Dict]]) -> Optional[Dict]:
    """Return the first user error entry, or None when the list is empty."""
    if not user_errors:
        return None
    first = user_errors[0]
    if not isinstance(first, dict):
        return {'field': None, 'message': str(first)}
    return first


class ShopifyAPIBase:
    """Base class for Shopify Admin GraphQL operations."""

    def __init__(self, config: ShopifyConfig, session: Optional[requests.Session] = None):
        """Initialize Shopify API client."""
        self.config = config
        self.graphql_url = config.graphql_url
        self.session = session or requests.Session()
        self.logger = logging.getLogger(self.__class__.__module__)

        self.logger.debug(f"GraphQL URL: {self.graphql_url}")

    def execute_graphql(self, query: str, variables: Optional[Dict] = None) -> Dict:
        """
        Execute a GraphQL document and return its ``data`` object.

        There is no retry: a failed request is reported to the caller.

        Raises:
            RemoteQueryError: on transport failures, non-2xx responses or top-level GraphQL errors.
            MalformedResponse: when the body is not JSON or carries no ``data``.
        """
        headers = {
            'Content-Type': 'application/json',
            'X-Shopify-Access-Token': self.config.access_token
        }

        payload = {
            'query': query,
            'variables': variables or {}
        }

        try:
            response = self.session.post(
                self.graphql_url,
                headers=headers,
                json=payload,
                timeout=self.config.timeout
            )
        except requests.exceptions.RequestException as e:
            raise RemoteQueryError(f"Request failed: {str(e)}")

        if response.status_code >= 400:
            self._raise_for_status(response)

        try:
            result = response.json()
        except ValueError:
            raise MalformedResponse(f"Response from {self.graphql_url} is not valid JSON")

        if not isinstance(result, dict):
            raise MalformedResponse("GraphQL response is not a JSON object")

        if result.get('errors'):
            errors = result['errors']
            self.logger.debug(f"GraphQL errors: {errors}")
            raise RemoteQueryError(error_messages(errors), errors=errors if isinstance(errors, list) else [errors])

        data = result.get('data')
        if not isinstance(data, dict):
            raise MalformedResponse("GraphQL response carries no data")
        return data

    def _raise_for_status(self, response):
        """
        Raise RemoteQueryError for an HTTP error status, keeping Shopify's message.

        The JSON ``errors`` member is preferred, then the raw body text, then
        the HTTP reason phrase.
        """
        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get('errors'):
            errors = body['errors']
            self.logger.debug(f"HTTP {status} errors: {errors}")
            raise RemoteQueryError(
                f"HTTP {status}: {error_messages(errors)}",
                errors=errors if isinstance(errors, list) else [errors]
            )

        message = (response.text or '').strip() or response.reason or 'no response body'
        raise RemoteQueryError(f"HTTP {status}: {message}")

    def verify_credentials(self) -> str:
        """Check that the API credentials are valid and return the shop name."""
        data = self.execute_graphql(SHOP_NAME_QUERY)
        shop = require_field(data, 'shop', 'shop query')
        shop_name = require_field(shop, 'name', 'shop query')
        self.logger.info(f"Successfully authenticated with shop: {shop_name}")
        return shop_name
