"""
Utility modules for the artifact publisher.

- logging: Structured logging with entry/exit decorators
- config: Layered configuration lookup and the dry-run flag
- metrics: Prometheus upload metrics
"""

from artifact_publisher.utils.logging import get_logger, log_function_call

__all__ = ["get_logger", "log_function_call"]
