"""
Google Cloud Storage artifact uploader.

Resolves service account credentials, validates batch destinations,
detects content types and uploads release artifacts to a GCS bucket.
"""

from .batch import UploadResult, upload_batch
from .client import (
    CACHE_CONTROL,
    GCSBucketBackend,
    GCSUploadClient,
    TransferBackend,
    TransferOptions,
)
from .content_type import detect_content_type, register_content_type
from .credentials import GCSCredentials, get_gcs_credentials_from_env
from .destination import (
    Artifact,
    DestinationState,
    PreparedDestination,
    StoredFile,
    UploadDestination,
    build_destination_key,
    validate_destination,
)
from .errors import (
    CredentialsError,
    CredentialsFileMissingError,
    CredentialsNotFoundError,
    MalformedCredentialsError,
    MissingCredentialFieldError,
    MissingLocalPathError,
    NoDestinationPathError,
    NotPreparedError,
    PublisherError,
    UploadError,
    UploadFailedError,
)

__all__ = [
    "CACHE_CONTROL",
    "Artifact",
    "CredentialsError",
    "CredentialsFileMissingError",
    "CredentialsNotFoundError",
    "DestinationState",
    "GCSBucketBackend",
    "GCSCredentials",
    "GCSUploadClient",
    "MalformedCredentialsError",
    "MissingCredentialFieldError",
    "MissingLocalPathError",
    "NoDestinationPathError",
    "NotPreparedError",
    "PreparedDestination",
    "PublisherError",
    "StoredFile",
    "TransferBackend",
    "TransferOptions",
    "UploadDestination",
    "UploadError",
    "UploadFailedError",
    "UploadResult",
    "build_destination_key",
    "detect_content_type",
    "get_gcs_credentials_from_env",
    "register_content_type",
    "upload_batch",
    "validate_destination",
]
