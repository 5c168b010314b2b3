"""
Staged file upload.

POSTs a local file to the storage URL from a staged upload target. The
multipart body carries the signed parameters in the order Shopify returned
them, then the file. The storage endpoint refuses uploads without a length,
so the body is fully encoded before sending and its exact size is set as
Content-Length.
"""

import logging
import os
from typing import Optional, Tuple

import requests

from .config import DEFAULT_TIMEOUT, DEFAULT_UPLOAD_SUCCESS_CODES
from .errors import UploadFailed
from .image_files import guess_mime_type
from .shopify_staged_uploads import StagedUploadTarget

FILE_FIELD = 'file'


class StagedFileUploader:
    """Uploads files to staged upload targets."""

    def __init__(self, session: Optional[requests.Session] = None,
                 success_codes: Tuple[int, ...] = DEFAULT_UPLOAD_SUCCESS_CODES,
                 timeout: Optional[float] = DEFAULT_TIMEOUT):
        # Kept separate from the GraphQL session: storage must not see the access token
        self.session = session or requests.Session()
        self.success_codes = tuple(success_codes)
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def build_request(self, target: StagedUploadTarget, file_path: str, file_obj,
                      mime_type: str) -> requests.PreparedRequest:
        """Encode the multipart body for a target and set its Content-Length."""
        request = requests.Request(
            'POST',
            target.url,
            data=list(target.parameters),
            files=[(FILE_FIELD, (os.path.basename(file_path), file_obj, mime_type))]
        )
        prepared = self.session.prepare_request(request)
        prepared.headers['Content-Length'] = str(len(prepared.body))
        prepared.headers.pop('Transfer-Encoding', None)
        return prepared

    def upload(self, target: StagedUploadTarget, file_path: str,
               mime_type: Optional[str] = None) -> str:
        """
        Upload a file and return the target's resource URL.

        The resource URL comes from the target itself, the upload response is
        only checked for its status code. A failed upload is not retried.

        Raises:
            UploadFailed: on a transport error or an unexpected status code.
        """
        mime_type = mime_type or guess_mime_type(file_path)

        with open(file_path, 'rb') as f:
            prepared = self.build_request(target, str(file_path), f, mime_type)

        self.logger.debug(f"Uploading {file_path} ({prepared.headers['Content-Length']} bytes) to {target.url}")

        try:
            response = self.session.send(prepared, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            response_body = e.response.text if e.response is not None else None
            raise UploadFailed(f"Image upload failed: {str(e)}", response_body=response_body)

        if response.status_code not in self.success_codes:
            raise UploadFailed(
                f"Image upload failed with status {response.status_code}",
                status_code=response.status_code,
                response_body=response.text
            )

        return target.resource_url
