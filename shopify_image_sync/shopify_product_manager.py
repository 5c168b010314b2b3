"""
Shopify Product Lookup Module

Resolves product handles to Shopify product IDs. Products are only read
here; the image sync never creates or edits them.
"""

import logging
from typing import Optional

import requests

from .config import ShopifyConfig
from .errors import MalformedResponse, ProductNotFound
from .shopify_base import ShopifyAPIBase, require_field

# GraphQL queries for product operations
GET_PRODUCT_BY_HANDLE = """
query getProductByHandle($handle: String!) {
  productByHandle(handle: $handle) {
    id
    handle
  }
}
"""


class ShopifyProductManager(ShopifyAPIBase):
    """Looks up products by handle."""

    def __init__(self, config: ShopifyConfig, session: Optional[requests.Session] = None):
        """Initialize the product manager."""
        super().__init__(config, session)
        self.logger = logging.getLogger(__name__)

    def resolve(self, handle: str) -> str:
        """
        Get the product ID for a handle.

        Raises:
            ProductNotFound: if no product has this handle.
            RemoteQueryError: if the query itself fails.
        """
        data = self.execute_graphql(GET_PRODUCT_BY_HANDLE, {'handle': handle})
        product = require_field(data, 'productByHandle', 'productByHandle')
        if product is None:
            raise ProductNotFound(handle)

        product_id = require_field(product, 'id', 'productByHandle')
        if not product_id:
            raise MalformedResponse(f"productByHandle returned an empty id for '{handle}'")

        self.logger.debug(f"Resolved handle {handle} to {product_id}")
        return product_id
