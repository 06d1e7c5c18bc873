"""OpenTelemetry instrumentation and observability utilities."""

from foodhub_api.observability.config import configure_logging, setup_observability
from foodhub_api.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
