"""
Single-file upload receiver.

Reads the `file` part of a multipart request into memory, enforcing the
configured size cap:
- A declared Content-Length far above the cap is refused with 413
  before the body is parsed.
- Otherwise at most cap + 1 bytes are read from the part; anything
  longer is refused with 400. Starlette spools parts larger than 1 MiB
  to disk while parsing, so memory stays bounded either way.

Requests without a file never reach the storage backend.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from starlette.datastructures import UploadFile

from .dependencies import SettingsDep

logger = logging.getLogger(__name__)

UPLOAD_FIELD = "file"

# Room for multipart boundaries and part headers on top of the file itself.
MULTIPART_OVERHEAD_BYTES = 64 * 1024

NO_FILE_MESSAGE = "No file uploaded"
TOO_LARGE_MESSAGE = "File too large"


@dataclass(frozen=True)
class UploadedFile:
    """
    An uploaded file held in memory for the duration of one request.

    filename and content_type are exactly what the client declared.
    """
    filename: str
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def _declared_length(request: Request) -> Optional[int]:
    value = request.headers.get("content-length")
    if value is None or not value.isdigit():
        return None
    return int(value)


async def receive_upload(request: Request, settings: SettingsDep) -> UploadedFile:
    """Dependency that yields the uploaded file or rejects the request."""
    max_bytes = settings.max_upload_size_bytes

    declared = _declared_length(request)
    if declared is not None and declared > max_bytes + MULTIPART_OVERHEAD_BYTES:
        logger.warning(
            "Upload rejected by declared length",
            extra={"content_length": declared, "max_bytes": max_bytes}
        )
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=TOO_LARGE_MESSAGE,
        )

    form = await request.form(max_files=1)
    try:
        upload = form.get(UPLOAD_FIELD)
        if not isinstance(upload, UploadFile) or not upload.filename:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=NO_FILE_MESSAGE,
            )

        data = await upload.read(max_bytes + 1)
        if len(data) > max_bytes:
            logger.warning(
                "Upload rejected by size",
                extra={"upload_name": upload.filename, "max_bytes": max_bytes}
            )
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=TOO_LARGE_MESSAGE,
            )

        return UploadedFile(
            filename=upload.filename,
            content_type=upload.content_type,
            data=data,
        )
    finally:
        await form.close()


UploadedFileDep = Annotated[UploadedFile, Depends(receive_upload)]

# OpenAPI description of the multipart body, since the form is read by hand.
UPLOAD_REQUEST_BODY = {
    "requestBody": {
        "required": True,
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        UPLOAD_FIELD: {"type": "string", "format": "binary"},
                    },
                    "required": [UPLOAD_FIELD],
                }
            }
        },
    }
}
