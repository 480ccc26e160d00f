"""
Object storage API endpoints.

Bucket management:
- GET    /buckets                 list buckets
- POST   /buckets                 create a bucket
- DELETE /buckets/{bucket_name}   delete a bucket

Object management:
- GET    /{bucket}/files              list objects (first page only)
- POST   /{bucket}/upload             upload one file (multipart field "file")
- DELETE /{bucket}/files/{filename}   delete an object by its encoded key

Every handler maps to exactly one backend call. Backend failures are
logged and surface as a 500 with a fixed message per route.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field

from ...core.objects import Bucket, StoredObject, decode_key
from ...infrastructure.storage.client import StorageError
from ..dependencies import StorageClientDep
from ..schemas import ErrorResponse, MessageResponse
from ..uploads import UPLOAD_REQUEST_BODY, UploadedFileDep

logger = logging.getLogger(__name__)

router = APIRouter()

# Raw delete path is "/api/s3/<bucket>/files/<key>": the key is segment 5.
_FILES_SEGMENT = "files"
_KEY_SEGMENT_INDEX = 5

_BACKEND_ERROR = {500: {"model": ErrorResponse, "description": "Backend call failed"}}


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class CreateBucketRequest(BaseModel):
    """Request to create a bucket. The name is not validated locally."""
    model_config = ConfigDict(populate_by_name=True)

    bucket_name: str = Field(alias="bucketName", description="Name of the new bucket")


class BucketResponse(BaseModel):
    """Bucket descriptor as reported by the backend."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="Name")
    creation_date: Optional[datetime] = Field(default=None, alias="CreationDate")

    @classmethod
    def from_bucket(cls, bucket: Bucket) -> "BucketResponse":
        return cls(name=bucket.name, creation_date=bucket.creation_date)


class ObjectEntryResponse(BaseModel):
    """
    One object listing entry.

    DisplayName is a best-effort readable name and may be wrong for
    some keys. EncodedKey is what clients put in the delete URL.
    """
    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(alias="Key")
    last_modified: datetime = Field(alias="LastModified")
    etag: Optional[str] = Field(default=None, alias="ETag")
    size: int = Field(alias="Size")
    storage_class: Optional[str] = Field(default=None, alias="StorageClass")
    display_name: str = Field(alias="DisplayName", description="Best-effort readable name")
    encoded_key: str = Field(alias="EncodedKey", description="Key percent-encoded for URL paths")

    @classmethod
    def from_object(cls, obj: StoredObject) -> "ObjectEntryResponse":
        return cls(
            key=obj.key,
            last_modified=obj.last_modified,
            etag=obj.etag,
            size=obj.size,
            storage_class=obj.storage_class,
            display_name=obj.display_name,
            encoded_key=obj.encoded_key,
        )


# ---------------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------------

def object_key_from_request(request: Request, filename: str) -> str:
    """
    Recover the object key for the delete route.

    The key arrives as one percent-encoded path segment. Starlette has
    already decoded the routed path once, which turns an encoded "/"
    into a real one, so the key is taken from the raw path and decoded
    exactly once here.

    Raises:
        HTTPException: 404 if the raw segment contains a literal "/"
        UnicodeDecodeError: if the segment is not valid percent-encoded UTF-8
    """
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return filename

    # /api/s3/<bucket>/files/<key>; bucket names never contain "/"
    parts = raw_path.decode("latin-1").split("/", _KEY_SEGMENT_INDEX)
    if len(parts) <= _KEY_SEGMENT_INDEX or parts[_KEY_SEGMENT_INDEX - 1] != _FILES_SEGMENT:
        return filename

    encoded_key = parts[_KEY_SEGMENT_INDEX]
    if not encoded_key or "/" in encoded_key:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    return decode_key(encoded_key)


# ---------------------------------------------------------------------------
# Bucket Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/buckets",
    response_model=list[BucketResponse],
    summary="List buckets",
    responses=_BACKEND_ERROR,
)
async def list_buckets(storage: StorageClientDep) -> list[BucketResponse]:
    try:
        buckets = await storage.list_buckets()
    except StorageError as e:
        logger.error("Error listing buckets", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing buckets",
        )

    return [BucketResponse.from_bucket(bucket) for bucket in buckets]


@router.post(
    "/buckets",
    response_model=MessageResponse,
    summary="Create bucket",
    description="Name rules (charset, length, uniqueness) are enforced by the backend.",
    responses=_BACKEND_ERROR,
)
async def create_bucket(
    request: CreateBucketRequest,
    storage: StorageClientDep,
) -> MessageResponse:
    try:
        await storage.create_bucket(request.bucket_name)
    except StorageError as e:
        logger.error(
            "Error creating bucket",
            extra={"bucket": request.bucket_name, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating bucket",
        )

    return MessageResponse(message="Bucket created successfully")


@router.delete(
    "/buckets/{bucket_name}",
    response_model=MessageResponse,
    summary="Delete bucket",
    description="Whether a non-empty bucket can be deleted is up to the backend.",
    responses=_BACKEND_ERROR,
)
async def delete_bucket(bucket_name: str, storage: StorageClientDep) -> MessageResponse:
    try:
        await storage.delete_bucket(bucket_name)
    except StorageError as e:
        logger.error(
            "Error deleting bucket",
            extra={"bucket": bucket_name, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting bucket",
        )

    return MessageResponse(message="Bucket deleted successfully")


# ---------------------------------------------------------------------------
# Object Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/{bucket}/files",
    response_model=list[ObjectEntryResponse],
    response_model_exclude_none=True,
    summary="List objects",
    description="Returns the first page of objects only; large buckets are truncated.",
    responses=_BACKEND_ERROR,
)
async def list_files(bucket: str, storage: StorageClientDep) -> list[ObjectEntryResponse]:
    try:
        objects = await storage.list_objects(bucket)
    except StorageError as e:
        logger.error("Error listing files", extra={"bucket": bucket, "error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing files",
        )

    return [ObjectEntryResponse.from_object(obj) for obj in objects]


@router.post(
    "/{bucket}/upload",
    response_model=MessageResponse,
    summary="Upload file",
    description=(
        "Stores the file under its original filename. "
        "An existing object with the same name is overwritten."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "No file, or file too large"},
        413: {"model": ErrorResponse, "description": "Request body too large"},
        **_BACKEND_ERROR,
    },
    openapi_extra=UPLOAD_REQUEST_BODY,
)
async def upload_file(
    bucket: str,
    upload: UploadedFileDep,
    storage: StorageClientDep,
) -> MessageResponse:
    logger.info(
        "Upload received",
        extra={
            "bucket": bucket,
            "upload_name": upload.filename,
            "content_type": upload.content_type,
            "size_bytes": upload.size,
        }
    )

    try:
        await storage.put_object(
            bucket_name=bucket,
            key=upload.filename,
            body=upload.data,
            content_type=upload.content_type,
        )
    except StorageError as e:
        logger.error(
            "Error uploading file",
            extra={"bucket": bucket, "upload_name": upload.filename, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error uploading file",
        )

    return MessageResponse(message="File uploaded successfully")


@router.delete(
    "/{bucket}/files/{filename:path}",
    response_model=MessageResponse,
    summary="Delete file",
    description="filename is the EncodedKey from the listing; it is percent-decoded once.",
    responses=_BACKEND_ERROR,
)
async def delete_file(
    bucket: str,
    filename: str,
    request: Request,
    storage: StorageClientDep,
) -> MessageResponse:
    try:
        key = object_key_from_request(request, filename)
    except UnicodeDecodeError as e:
        logger.error(
            "Error deleting file",
            extra={"bucket": bucket, "raw_key": filename, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting file",
        )

    try:
        await storage.delete_object(bucket, key)
    except StorageError as e:
        logger.error(
            "Error deleting file",
            extra={"bucket": bucket, "key": key, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting file",
        )

    return MessageResponse(message="File deleted successfully")
