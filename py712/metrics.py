"""Prometheus metrics for py712.

All collectors live on a dedicated registry so that embedding applications
can expose them next to their own metrics, or ignore them entirely.
"""

import logging

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Info,
    generate_latest,
)

logger = logging.getLogger(__name__)

REGISTRY = CollectorRegistry()

# Application info
APP_INFO = Info(
    "py712_build_info",
    "Build information about py712",
    registry=REGISTRY,
)
APP_INFO.info({"version": "0.1.0", "name": "py712"})

# Hashing metrics
TYPE_HASH_REQUESTS_TOTAL = Counter(
    "type_hash_requests_total",
    "Total number of type hash lookups",
    ["cache"],
    registry=REGISTRY,
)

STRUCT_HASHES_TOTAL = Counter(
    "struct_hashes_total",
    "Total number of struct hashes computed",
    registry=REGISTRY,
)

DOMAIN_HASHES_TOTAL = Counter(
    "domain_hashes_total",
    "Total number of domain separators computed",
    ["cache"],
    registry=REGISTRY,
)

ENCODING_ERRORS_TOTAL = Counter(
    "encoding_errors_total",
    "Total number of hashing errors",
    ["error_type"],
    registry=REGISTRY,
)


def get_metrics_output() -> bytes:
    """Generate Prometheus-formatted metrics output."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for Prometheus metrics."""
    return CONTENT_TYPE_LATEST
