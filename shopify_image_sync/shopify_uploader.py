#!/usr/bin/env python3
"""
Shopify Product Image Uploader - Main Orchestrator

Pushes every image in a local directory to the Shopify product whose handle
matches the image's file name. Each file goes through four steps, in order:

    1. resolve the product ID from the handle
    2. negotiate a staged upload target
    3. upload the file to the target
    4. attach the uploaded resource to the product as media

A failure at any step is logged and the batch moves to the next file. A fixed
delay is applied after every file to stay under Shopify's API rate limits.
"""

import argparse
import logging
import sys
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

import requests

from .config import ShopifyConfig, load_config
from .errors import (
    ConfigurationError,
    DirectoryUnreadable,
    RemoteQueryError,
    ShopifyImageSyncError,
    UploadFailed,
)
from .image_files import ImageFile, list_image_files
from .logging_config import setup_logging
from .shopify_image_manager import MediaRecord, ShopifyImageManager
from .shopify_product_manager import ShopifyProductManager
from .shopify_staged_uploads import ShopifyStagedUploadManager
from .staged_file_uploader import StagedFileUploader


class FileState(Enum):
    """Progress of one image through the pipeline."""
    ENUMERATED = "enumerated"
    RESOLVED = "resolved"
    NEGOTIATED = "negotiated"
    UPLOADED = "uploaded"
    ASSOCIATED = "associated"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FileResult:
    """Outcome of processing one image."""
    image: ImageFile
    state: FileState = FileState.ENUMERATED
    product_id: Optional[str] = None
    resource_url: Optional[str] = None
    media: Optional[MediaRecord] = None
    error: Optional[Exception] = None
    failed_state: Optional[FileState] = None

    @property
    def succeeded(self) -> bool:
        return self.state is FileState.DONE


@dataclass
class BatchSummary:
    """Results of one batch run, in processing order."""
    results: List[FileResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.succeeded)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded


class ShopifyUploader:
    """Main orchestrator for product image uploads."""

    def __init__(self, config: ShopifyConfig,
                 product_manager: Optional[ShopifyProductManager] = None,
                 staged_upload_manager: Optional[ShopifyStagedUploadManager] = None,
                 file_uploader: Optional[StagedFileUploader] = None,
                 image_manager: Optional[ShopifyImageManager] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize the uploader with all required managers."""
        self.config = config
        self.sleep = sleep

        # GraphQL managers share one connection pool
        graphql_session = requests.Session()

        self.product_manager = product_manager or ShopifyProductManager(config, graphql_session)
        self.staged_upload_manager = staged_upload_manager or ShopifyStagedUploadManager(config, graphql_session)
        self.file_uploader = file_uploader or StagedFileUploader(
            success_codes=config.upload_success_codes,
            timeout=config.timeout
        )
        self.image_manager = image_manager or ShopifyImageManager(config, graphql_session)

        self.logger = logging.getLogger(__name__)

    def verify_credentials(self) -> str:
        """Test Shopify API authentication."""
        return self.product_manager.verify_credentials()

    def process_directory(self, images_dir: Optional[str] = None) -> BatchSummary:
        """
        Process every image in a directory.

        Raises:
            DirectoryUnreadable: if the directory cannot be listed. No file is processed in that case.
        """
        directory = images_dir or self.config.images_dir
        images = list_image_files(directory)

        self.logger.info(f"Found {len(images)} image(s) to process in {directory}")

        summary = BatchSummary()
        for idx, image in enumerate(images, 1):
            self.logger.info(f"[{idx}/{len(images)}] Processing: {image.name} (handle: {image.handle})")
            summary.results.append(self.process_image(image))

            # Respect Shopify's rate limits, also after failures
            self.sleep(self.config.request_delay)

        self._log_summary(summary)
        return summary

    def process_image(self, image: ImageFile) -> FileResult:
        """Run one image through resolve, negotiate, upload and associate."""
        result = FileResult(image=image)

        try:
            # The handle must map to a product before an upload target is spent
            result.product_id = self.product_manager.resolve(image.handle)
            result.state = FileState.RESOLVED

            target = self.staged_upload_manager.negotiate(image.name, image.mime_type, image.size)
            result.state = FileState.NEGOTIATED

            result.resource_url = self.file_uploader.upload(target, str(image.path), image.mime_type)
            result.state = FileState.UPLOADED

            result.media = self.image_manager.associate(result.product_id, result.resource_url, image.handle)
            result.state = FileState.ASSOCIATED
        except ShopifyImageSyncError as e:
            self._mark_failed(result, e)
            self.logger.error(f"Failed to process image {image.name}: {str(e)}")
            if isinstance(e, UploadFailed) and e.response_body:
                self.logger.error(f"Response data for {image.name}: {e.response_body}")
            return result
        except Exception as e:
            self._mark_failed(result, e)
            self.logger.exception(f"Unexpected error processing image {image.name}: {str(e)}")
            return result

        result.state = FileState.DONE
        self.logger.info(f"Successfully added image {image.name} to product {result.product_id}")
        return result

    def _mark_failed(self, result: FileResult, error: Exception) -> None:
        result.failed_state = result.state
        result.state = FileState.FAILED
        result.error = error

    def _log_summary(self, summary: BatchSummary) -> None:
        self.logger.info(
            f"Upload summary: {summary.succeeded} succeeded, {summary.failed} failed, {summary.total} total"
        )
        for result in summary.results:
            if not result.succeeded:
                self.logger.info(
                    f"  failed: {result.image.name} after {result.failed_state.value}: {result.error}"
                )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Upload local images to Shopify products matched by file name (handle)',
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('--images-dir', help='Directory of images to upload (default: IMAGES_DIR or ./images)')
    parser.add_argument('--env-file', help='Path to a .env file with Shopify credentials')
    parser.add_argument('--delay', type=float, help='Seconds to wait after each file (default: UPLOAD_DELAY_SECONDS or 1)')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--json-logs', action='store_true', help='Write logs as JSON lines')
    parser.add_argument('--log-file', help='Also write logs to this file')
    parser.add_argument('--validate-token', action='store_true', help='Validate the Shopify access token and exit')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug, json_format=args.json_logs, log_file=args.log_file)
    logger = logging.getLogger(__name__)

    if args.delay is not None and args.delay < 0:
        logger.error("--delay must not be negative")
        return 1

    try:
        config = load_config(env_file=args.env_file, images_dir=args.images_dir, request_delay=args.delay)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {str(e)}")
        return 1

    uploader = ShopifyUploader(config)

    try:
        if args.validate_token:
            shop_name = uploader.verify_credentials()
            logger.info(f"Access token is valid for shop: {shop_name}")
            return 0

        summary = uploader.process_directory()
    except DirectoryUnreadable as e:
        logger.error(str(e))
        return 1
    except RemoteQueryError as e:
        logger.error(f"Shopify authentication failed: {str(e)}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Upload interrupted by user")
        return 130

    logger.info(f"Upload process completed: {summary.succeeded}/{summary.total} image(s) added")
    return 0


if __name__ == "__main__":
    sys.exit(main())
