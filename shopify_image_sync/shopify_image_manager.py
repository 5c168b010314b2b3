"""
Shopify Image Management Module

Attaches uploaded images to products through productCreateMedia. No
duplicate check is made: attaching the same resource twice creates two
media items.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from .config import ShopifyConfig
from .errors import MalformedResponse, MediaAssociationRejected
from .shopify_base import CREATE_MEDIA_MUTATION, ShopifyAPIBase, first_user_error, require_field

MEDIA_CONTENT_TYPE = 'IMAGE'


@dataclass(frozen=True)
class MediaRecord:
    """Confirmation of a media item created on a product."""
    id: Optional[str]
    alt: Optional[str]
    media_content_type: str
    status: Optional[str]

    @classmethod
    def from_response(cls, media: Dict) -> 'MediaRecord':
        media_content_type = require_field(media, 'mediaContentType', 'productCreateMedia media')
        return cls(
            id=media.get('id'),
            alt=media.get('alt'),
            media_content_type=media_content_type,
            status=media.get('status')
        )


class ShopifyImageManager(ShopifyAPIBase):
    """Manages image media on Shopify products."""

    def __init__(self, config: ShopifyConfig, session: Optional[requests.Session] = None):
        """Initialize the image manager."""
        super().__init__(config, session)
        self.logger = logging.getLogger(__name__)

    def associate(self, product_id: str, resource_url: str, alt_text: str) -> MediaRecord:
        """
        Create an image media item on a product from an uploaded resource.

        Raises:
            MediaAssociationRejected: if Shopify reports media user errors.
            RemoteQueryError: if the mutation cannot be executed.
        """
        media_input = {
            'media': [{
                'alt': alt_text,
                'mediaContentType': MEDIA_CONTENT_TYPE,
                'originalSource': resource_url
            }],
            'productId': product_id
        }

        data = self.execute_graphql(CREATE_MEDIA_MUTATION, media_input)
        media_result = require_field(data, 'productCreateMedia', 'productCreateMedia')
        if not isinstance(media_result, dict):
            raise MalformedResponse('productCreateMedia returned no payload')

        user_error = first_user_error(media_result.get('mediaUserErrors'))
        if user_error:
            raise MediaAssociationRejected(user_error.get('message', 'Unknown error'), user_error.get('field'))

        media = require_field(media_result, 'media', 'productCreateMedia')
        if not media:
            raise MalformedResponse('productCreateMedia returned no media')

        record = MediaRecord.from_response(media[0])
        self.logger.debug(f"Created media {record.id} ({record.status}) on {product_id}")
        return record
