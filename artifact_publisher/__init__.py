"""
Artifact Publisher

Publishes release build artifacts to a Google Cloud Storage bucket.

This package provides:
- uploader: credential resolution, destination preparation, content-type
  detection and the GCS upload client
- utils: Logging, configuration and metrics helpers
"""

__version__ = "0.1.0"

from artifact_publisher.utils.config import get_log_format, get_log_level
from artifact_publisher.utils.logging import setup_logging

# Initialize default logging configuration
setup_logging(get_log_level(), output_format=get_log_format())
