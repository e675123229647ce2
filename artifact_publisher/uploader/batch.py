"""
Batch uploads on top of GCSUploadClient.

The client keeps no per-batch bookkeeping. ``upload_batch`` prepares the
destination once, uploads every artifact and collects one UploadResult per
artifact so callers can decide what to do about partial failures.
"""

import contextvars
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from artifact_publisher.uploader.client import GCSUploadClient
from artifact_publisher.uploader.destination import (
    Artifact,
    PreparedDestination,
    UploadDestination,
)
from artifact_publisher.uploader.errors import UploadError
from artifact_publisher.utils.config import is_dry_run
from artifact_publisher.utils.logging import (
    get_correlation_id,
    get_logger,
    log_function_call,
)

logger = get_logger(__name__)


@dataclass
class UploadResult:
    """
    Outcome of one artifact upload.

    Attributes:
        success: Whether the upload completed (or was skipped by dry-run)
        artifact: The artifact
        destination_key: Remote object name (None if it was never computed)
        duration_seconds: Time spent in ``upload``
        error_message: Error description (None if successful)
        dry_run: Whether the transfer was skipped because of dry-run
    """

    success: bool
    artifact: Artifact
    destination_key: Optional[str]
    duration_seconds: float
    error_message: Optional[str] = None
    dry_run: bool = False


def _upload_one(
    client: GCSUploadClient, artifact: Artifact, prepared: PreparedDestination
) -> UploadResult:
    start_time = time.time()
    dry_run = is_dry_run()
    try:
        options = client.upload(artifact, prepared)
    except UploadError as e:
        return UploadResult(
            success=False,
            artifact=artifact,
            destination_key=None,
            duration_seconds=time.time() - start_time,
            error_message=str(e),
            dry_run=dry_run,
        )

    return UploadResult(
        success=True,
        artifact=artifact,
        destination_key=options.destination_key,
        duration_seconds=time.time() - start_time,
        dry_run=dry_run,
    )


@log_function_call
def upload_batch(
    client: GCSUploadClient,
    artifacts: Sequence[Artifact],
    destination: UploadDestination,
    max_workers: int = 1,
) -> List[UploadResult]:
    """
    Upload a batch of artifacts sharing one destination.

    Args:
        client: Upload client
        artifacts: Artifacts to upload
        destination: Destination of the batch
        max_workers: Number of concurrent uploads

    Returns:
        One UploadResult per artifact, in input order

    Raises:
        NoDestinationPathError: If the destination is invalid
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")

    # Every upload below happens after this returns
    prepared = client.prepare(artifacts, destination)

    if max_workers == 1 or len(artifacts) <= 1:
        results = [_upload_one(client, artifact, prepared) for artifact in artifacts]
    else:
        # Fix the run's correlation ID before copying it into the workers
        get_correlation_id()
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(
                    contextvars.copy_context().run, _upload_one, client, artifact, prepared
                )
                for artifact in artifacts
            ]
            results = [future.result() for future in futures]

    successful = sum(1 for r in results if r.success)
    logger.info(
        f"Batch upload to {prepared.path} complete: "
        f"{successful}/{len(results)} successful"
    )

    return results
