"""
Google Cloud Storage upload client.

Uploads happen in two phases. ``prepare`` validates the destination of a
batch once; ``upload`` then transfers each artifact of that batch. Calling
``upload`` for a destination that was not prepared fails.

Example usage:
    >>> from artifact_publisher.uploader import (
    ...     Artifact, GCSUploadClient, StoredFile, UploadDestination,
    ... )
    >>> client = GCSUploadClient.from_config(get_config())
    >>> destination = UploadDestination(path="/dist/1.4.0/")
    >>> artifact = Artifact(
    ...     filename="bundle.js",
    ...     stored_file=StoredFile("bundle.js", "builds/bundle.js", 1024),
    ...     local_filepath="./build/bundle.js",
    ... )
    >>> client.prepare([artifact], destination)
    >>> client.upload(artifact, destination)

With DRY_RUN set, ``upload`` runs every check and computes the transfer
options but never contacts GCS.
"""

import gzip
import shutil
import tempfile
import threading
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from artifact_publisher.uploader.content_type import detect_content_type
from artifact_publisher.uploader.credentials import (
    GCSCredentials,
    get_gcs_credentials_from_env,
)
from artifact_publisher.uploader.destination import (
    AnyDestination,
    Artifact,
    PreparedDestination,
    UploadDestination,
    build_destination_key,
    is_prepared,
    validate_destination,
)
from artifact_publisher.uploader.errors import (
    MissingLocalPathError,
    NotPreparedError,
    UploadFailedError,
)
from artifact_publisher.utils.config import ConfigSource, PublisherConfig, is_dry_run
from artifact_publisher.utils.logging import get_logger, log_function_call
from artifact_publisher.utils.metrics import UploadMetrics, get_metrics

logger = get_logger(__name__)

# Released artifacts are cached by browsers and CDNs for five minutes
CACHE_CONTROL = "public, max-age=300"


@dataclass(frozen=True)
class TransferOptions:
    """
    Metadata passed to the backend for one transfer.

    Attributes:
        destination_key: Remote object name
        content_type: Content-Type of the object
        cache_control: Cache-Control header of the object
        gzip: Whether to store the object gzip-encoded
    """

    destination_key: str
    content_type: str
    cache_control: str = CACHE_CONTROL
    gzip: bool = True


class TransferBackend(Protocol):
    """The one storage capability the upload client depends on."""

    def transfer(self, local_path: str, options: TransferOptions) -> None:
        ...


class GCSBucketBackend:
    """
    TransferBackend writing to a GCS bucket.

    The storage client is created on the first transfer and reused.
    """

    def __init__(self, bucket_name: str, credentials: GCSCredentials) -> None:
        self.bucket_name = bucket_name
        self.credentials = credentials
        self._bucket: Optional[Any] = None
        self._lock = threading.Lock()

    @property
    def bucket(self) -> Any:
        with self._lock:
            if self._bucket is None:
                from google.cloud import storage
                from google.oauth2 import service_account

                logger.debug(f"Creating GCS client for bucket {self.bucket_name}")
                gcp_credentials = service_account.Credentials.from_service_account_info(
                    self.credentials.as_service_account_info()
                )
                client = storage.Client(
                    project=self.credentials.project_id,
                    credentials=gcp_credentials,
                )
                self._bucket = client.bucket(self.bucket_name)
            return self._bucket

    def transfer(self, local_path: str, options: TransferOptions) -> None:
        blob = self.bucket.blob(options.destination_key)
        blob.cache_control = options.cache_control

        if options.gzip:
            blob.content_encoding = "gzip"
            with tempfile.TemporaryFile() as compressed:
                with open(local_path, "rb") as source, gzip.GzipFile(
                    fileobj=compressed, mode="wb"
                ) as gzipped:
                    shutil.copyfileobj(source, gzipped)
                compressed.seek(0)
                blob.upload_from_file(compressed, content_type=options.content_type)
        else:
            blob.upload_from_filename(local_path, content_type=options.content_type)


class GCSUploadClient:
    """
    Uploads artifacts to one GCS bucket.

    Attributes:
        bucket_name: Target bucket (without gs:// prefix)
        credentials: Resolved service account credentials
        gzip: Whether objects are stored gzip-encoded
    """

    def __init__(
        self,
        bucket_name: str,
        credentials: GCSCredentials,
        backend: Optional[TransferBackend] = None,
        metrics: Optional[UploadMetrics] = None,
        gzip: bool = True,
    ) -> None:
        self.bucket_name = bucket_name
        self.credentials = credentials
        self.gzip = gzip
        self.metrics = metrics if metrics is not None else get_metrics()
        self._backend = backend

    @classmethod
    def from_config(
        cls, config: PublisherConfig, source: Optional[ConfigSource] = None, **kwargs: Any
    ) -> "GCSUploadClient":
        """
        Build a client, resolving credentials from configuration once.

        Raises:
            CredentialsError: If credentials cannot be resolved
        """
        credentials = get_gcs_credentials_from_env(
            config.credentials_json_var, config.credentials_path_var, source
        )
        if "metrics" not in kwargs:
            kwargs["metrics"] = (
                get_metrics(source)
                if config.metrics_enabled
                else UploadMetrics(enabled=False)
            )
        return cls(config.bucket_name, credentials, **kwargs)

    @property
    def backend(self) -> TransferBackend:
        if self._backend is None:
            self._backend = GCSBucketBackend(self.bucket_name, self.credentials)
        return self._backend

    @log_function_call
    def prepare(
        self, artifacts: Sequence[Artifact], destination: Optional[UploadDestination]
    ) -> PreparedDestination:
        """
        Validate a batch destination before its artifacts are uploaded.

        Args:
            artifacts: Artifacts of the batch
            destination: Destination shared by the batch

        Returns:
            PreparedDestination token, accepted by ``upload``

        Raises:
            NoDestinationPathError: If the destination path is missing
        """
        return validate_destination(artifacts, destination)

    def upload(self, artifact: Artifact, destination: AnyDestination) -> TransferOptions:
        """
        Upload one artifact to a prepared destination.

        Args:
            artifact: Artifact with a local file
            destination: Prepared UploadDestination or PreparedDestination token

        Returns:
            The TransferOptions sent (or, in dry-run, that would be sent)

        Raises:
            NotPreparedError: If the destination was not prepared
            MissingLocalPathError: If the artifact has no local file
            UploadFailedError: If the backend transfer failed
        """
        dry_run = is_dry_run()

        if not is_prepared(destination):
            raise NotPreparedError()

        if not artifact.local_filepath:
            raise MissingLocalPathError(artifact.filename)

        options = TransferOptions(
            destination_key=build_destination_key(destination.path, artifact.filename),
            content_type=detect_content_type(artifact.filename),
            cache_control=CACHE_CONTROL,
            gzip=self.gzip,
        )

        if dry_run:
            logger.info(
                f"[dry-run] Skipping upload of {artifact.local_filepath} to "
                f"gs://{self.bucket_name}{_key_prefix(options.destination_key)}"
            )
            self.metrics.record_upload_dry_run()
            return options

        logger.debug(
            f"Uploading {artifact.local_filepath} -> {options.destination_key} "
            f"(content type: {options.content_type})"
        )

        try:
            with self.metrics.track_upload():
                self.backend.transfer(artifact.local_filepath, options)
        except Exception as e:
            logger.error(
                f"Upload of {artifact.filename} to {options.destination_key} failed: {e}",
                exc_info=True,
            )
            self.metrics.record_upload_failure()
            self.metrics.record_gcs_error(operation="upload", error_type=type(e).__name__)
            raise UploadFailedError(e) from e

        self.metrics.record_upload_success(bytes_uploaded=artifact.stored_file.size)
        logger.info(
            f"Uploaded {artifact.filename} to "
            f"gs://{self.bucket_name}{_key_prefix(options.destination_key)}"
        )
        return options


def _key_prefix(key: str) -> str:
    return key if key.startswith("/") else f"/{key}"
