"""
Prometheus metrics for artifact uploads.

Metrics Provided:
    - upload_requests_total: Counter for upload operations by status
      (success, failure, dry_run)
    - upload_bytes_total: Counter for uploaded bytes
    - upload_duration_seconds: Histogram for backend transfer latency
    - gcs_api_errors_total: Counter for GCS API errors

Usage:
    from artifact_publisher.utils.metrics import get_metrics

    metrics = get_metrics()
    with metrics.track_upload():
        backend.transfer(...)
    metrics.record_upload_success(bytes_uploaded=1024)
"""

from contextlib import nullcontext
from typing import Any, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from artifact_publisher.utils.config import ConfigSource, get_metrics_enabled
from artifact_publisher.utils.logging import get_logger

logger = get_logger(__name__)


class UploadMetrics:
    """
    Prometheus collectors for the upload client.

    Disabled instances register nothing and every method is a no-op.

    Example:
        >>> metrics = UploadMetrics(registry=CollectorRegistry())
        >>> metrics.record_upload_success(bytes_uploaded=2048)
    """

    def __init__(
        self, enabled: bool = True, registry: Optional[CollectorRegistry] = None
    ) -> None:
        """
        Initialize metrics collectors.

        Args:
            enabled: Whether metrics collection is enabled
            registry: Custom Prometheus registry (uses default if None)
        """
        self.enabled = enabled
        self.registry = registry if registry is not None else REGISTRY

        if not self.enabled:
            logger.debug("Metrics collection disabled")
            return

        self.upload_requests = Counter(
            name="upload_requests_total",
            documentation="Total number of artifact upload requests",
            labelnames=["status"],  # success, failure, dry_run
            registry=self.registry,
        )

        self.upload_bytes = Counter(
            name="upload_bytes_total",
            documentation="Total bytes of local files uploaded to GCS",
            registry=self.registry,
        )

        self.upload_duration = Histogram(
            name="upload_duration_seconds",
            documentation="Time spent in the backend transfer",
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0],
            registry=self.registry,
        )

        self.gcs_api_errors = Counter(
            name="gcs_api_errors_total",
            documentation="Total GCS API errors",
            labelnames=["operation", "error_type"],
            registry=self.registry,
        )

    def track_upload(self) -> Any:
        """
        Context manager timing one backend transfer.

        Example:
            >>> with metrics.track_upload():
            ...     backend.transfer(local_path, options)
        """
        if not self.enabled:
            return nullcontext()
        return self.upload_duration.time()

    def record_upload_success(self, bytes_uploaded: int = 0) -> None:
        if not self.enabled:
            return
        self.upload_requests.labels(status="success").inc()
        if bytes_uploaded > 0:
            self.upload_bytes.inc(bytes_uploaded)

    def record_upload_dry_run(self) -> None:
        if not self.enabled:
            return
        self.upload_requests.labels(status="dry_run").inc()

    def record_upload_failure(self) -> None:
        if not self.enabled:
            return
        self.upload_requests.labels(status="failure").inc()

    def record_gcs_error(self, operation: str, error_type: str) -> None:
        """
        Record GCS API error.

        Args:
            operation: GCS operation (upload)
            error_type: Exception class name raised by the client library
        """
        if not self.enabled:
            return
        self.gcs_api_errors.labels(operation=operation, error_type=error_type).inc()


# Global metrics instance (singleton)
_metrics_instance: Optional[UploadMetrics] = None


def get_metrics(source: Optional[ConfigSource] = None) -> UploadMetrics:
    """
    Get global metrics instance, registered on the default registry.

    Collection can be switched off with METRICS_ENABLED=false, read through
    ConfigSource when the instance is first created.
    """
    global _metrics_instance

    if _metrics_instance is None:
        _metrics_instance = UploadMetrics(enabled=get_metrics_enabled(source))

    return _metrics_instance
