"""
Shopify Image Sync Exceptions

Every failure the pipeline can hit is one of these. The driver catches
ShopifyImageSyncError at the per-file boundary; ConfigurationError and
DirectoryUnreadable are raised before any file is processed and end the run.
"""

from typing import Any, List, Optional


class ShopifyImageSyncError(Exception):
    """Base class for all image sync errors."""
    pass


class ConfigurationError(ShopifyImageSyncError):
    """Raised when required settings are missing or invalid."""
    pass


class DirectoryUnreadable(ShopifyImageSyncError):
    """Raised when the image directory does not exist or cannot be listed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read image directory '{path}': {reason}")
        self.path = path
        self.reason = reason


class RemoteQueryError(ShopifyImageSyncError):
    """Raised when a GraphQL request fails at the transport or protocol level."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


class MalformedResponse(RemoteQueryError):
    """Raised when a response is missing fields the caller requires."""
    pass


class ProductNotFound(ShopifyImageSyncError):
    """Raised when no product matches a handle."""

    def __init__(self, handle: str):
        super().__init__(f'Product with handle "{handle}" not found.')
        self.handle = handle


class UploadTargetRejected(ShopifyImageSyncError):
    """Raised when stagedUploadsCreate reports user errors."""

    def __init__(self, message: str, field: Optional[List[str]] = None):
        super().__init__(message)
        self.field = field


class UploadFailed(ShopifyImageSyncError):
    """Raised when the storage endpoint does not accept the upload."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 response_body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class MediaAssociationRejected(ShopifyImageSyncError):
    """Raised when productCreateMedia reports media user errors."""

    def __init__(self, message: str, field: Optional[List[str]] = None):
        super().__init__(message)
        self.field = field
