"""
Shopify Product Image Sync

Uploads local image files to Shopify and attaches each one to the product
whose handle matches the file name:
- image_files: local image discovery and handle derivation
- shopify_base: GraphQL client and shared mutation documents
- shopify_product_manager: product lookup by handle
- shopify_staged_uploads: staged upload target negotiation
- staged_file_uploader: multipart upload to the staged target
- shopify_image_manager: media creation on products
- shopify_uploader: per-file pipeline and command line entry point
"""

from .config import ShopifyConfig, load_config
from .errors import (
    ConfigurationError,
    DirectoryUnreadable,
    MalformedResponse,
    MediaAssociationRejected,
    ProductNotFound,
    RemoteQueryError,
    ShopifyImageSyncError,
    UploadFailed,
    UploadTargetRejected,
)
from .image_files import ImageFile, list_image_files
from .shopify_base import ShopifyAPIBase
from .shopify_image_manager import MediaRecord, ShopifyImageManager
from .shopify_product_manager import ShopifyProductManager
from .shopify_staged_uploads import ShopifyStagedUploadManager, StagedUploadTarget
from .staged_file_uploader import StagedFileUploader
from .shopify_uploader import BatchSummary, FileResult, FileState, ShopifyUploader

__all__ = [
    'ShopifyConfig',
    'load_config',
    'ConfigurationError',
    'DirectoryUnreadable',
    'MalformedResponse',
    'MediaAssociationRejected',
    'ProductNotFound',
    'RemoteQueryError',
    'ShopifyImageSyncError',
    'UploadFailed',
    'UploadTargetRejected',
    'ImageFile',
    'list_image_files',
    'ShopifyAPIBase',
    'MediaRecord',
    'ShopifyImageManager',
    'ShopifyProductManager',
    'ShopifyStagedUploadManager',
    'StagedUploadTarget',
    'StagedFileUploader',
    'BatchSummary',
    'FileResult',
    'FileState',
    'ShopifyUploader',
]
