"""Tests for upload metrics."""

from prometheus_client import CollectorRegistry

from artifact_publisher.utils.config import ConfigSource
from artifact_publisher.utils.metrics import UploadMetrics, get_metrics


class TestUploadMetrics:
    """Test UploadMetrics collectors."""

    def test_records_success_and_bytes(self):
        registry = CollectorRegistry()
        metrics = UploadMetrics(registry=registry)

        metrics.record_upload_success(bytes_uploaded=2048)
        metrics.record_upload_success()

        assert registry.get_sample_value("upload_requests_total", {"status": "success"}) == 2.0
        assert registry.get_sample_value("upload_bytes_total") == 2048.0

    def test_track_upload_observes_duration(self):
        registry = CollectorRegistry()
        metrics = UploadMetrics(registry=registry)

        with metrics.track_upload():
            pass

        assert registry.get_sample_value("upload_duration_seconds_count") == 1.0

    def test_disabled_metrics_are_noops(self):
        registry = CollectorRegistry()
        metrics = UploadMetrics(enabled=False, registry=registry)

        with metrics.track_upload():
            metrics.record_upload_success(bytes_uploaded=10)
            metrics.record_upload_failure()
            metrics.record_upload_dry_run()
            metrics.record_gcs_error(operation="upload", error_type="RuntimeError")

        assert registry.get_sample_value("upload_requests_total", {"status": "success"}) is None

    def test_get_metrics_singleton(self):
        assert get_metrics() is get_metrics()

    def test_get_metrics_honours_project_file(self, monkeypatch, tmp_path):
        """Test METRICS_ENABLED is read with config file precedence."""
        import artifact_publisher.utils.metrics as metrics_module

        monkeypatch.delenv("METRICS_ENABLED", raising=False)
        monkeypatch.setattr(metrics_module, "_metrics_instance", None)
        (tmp_path / ".publisher.env").write_text("METRICS_ENABLED=false\n")

        metrics = get_metrics(ConfigSource(project_dir=tmp_path, home_dir=tmp_path))

        assert metrics.enabled is False
