"""
Shopify Staged Upload Negotiation

Asks Shopify for a short-lived storage target through stagedUploadsCreate.
A target is good for one POST only and is used straight away by the file
uploader.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import requests

from .config import ShopifyConfig
from .errors import MalformedResponse, UploadTargetRejected
from .shopify_base import (
    STAGED_UPLOADS_CREATE_MUTATION,
    ShopifyAPIBase,
    first_user_error,
    require_field,
)

STAGED_RESOURCE = 'IMAGE'
STAGED_HTTP_METHOD = 'POST'


@dataclass(frozen=True)
class StagedUploadTarget:
    """Where and how to POST one file. Parameters keep the order Shopify sent them in."""
    url: str
    resource_url: str
    parameters: Tuple[Tuple[str, str], ...]

    @classmethod
    def from_response(cls, target: Dict) -> 'StagedUploadTarget':
        context = 'stagedUploadsCreate target'
        url = require_field(target, 'url', context)
        resource_url = require_field(target, 'resourceUrl', context)
        raw_parameters = require_field(target, 'parameters', context)
        if not url or not resource_url:
            raise MalformedResponse(f"{context}: url and resourceUrl must be set")
        if not isinstance(raw_parameters, list):
            raise MalformedResponse(f"{context}: parameters must be a list")

        parameters = tuple(
            (require_field(param, 'name', context), require_field(param, 'value', context))
            for param in raw_parameters
        )
        return cls(url=url, resource_url=resource_url, parameters=parameters)


class ShopifyStagedUploadManager(ShopifyAPIBase):
    """Negotiates staged upload targets for product images."""

    def __init__(self, config: ShopifyConfig, session: Optional[requests.Session] = None):
        super().__init__(config, session)
        self.logger = logging.getLogger(__name__)

    def negotiate(self, filename: str, mime_type: str, file_size: int) -> StagedUploadTarget:
        """
        Create a staged upload target for one image.

        Raises:
            UploadTargetRejected: if Shopify reports a user error for the input.
            RemoteQueryError: if the mutation cannot be executed.
        """
        staged_input = [{
            'resource': STAGED_RESOURCE,
            'filename': filename,
            'mimeType': mime_type,
            'fileSize': str(file_size),
            'httpMethod': STAGED_HTTP_METHOD
        }]

        data = self.execute_graphql(STAGED_UPLOADS_CREATE_MUTATION, {'input': staged_input})
        staged_result = require_field(data, 'stagedUploadsCreate', 'stagedUploadsCreate')
        if not isinstance(staged_result, dict):
            raise MalformedResponse('stagedUploadsCreate returned no payload')

        user_error = first_user_error(staged_result.get('userErrors'))
        if user_error:
            raise UploadTargetRejected(user_error.get('message', 'Unknown error'), user_error.get('field'))

        staged_targets = require_field(staged_result, 'stagedTargets', 'stagedUploadsCreate')
        if not staged_targets:
            raise MalformedResponse('stagedUploadsCreate returned no staged target')

        target = StagedUploadTarget.from_response(staged_targets[0])
        self.logger.debug(f"Generated staged target for {filename}: {target}")
        return target
