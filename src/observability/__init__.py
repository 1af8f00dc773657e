"""Observability: structured logging and log-safe redaction.

Library modules log through ``structlog.get_logger()`` and never configure
structlog themselves. Applications embedding the library call
``configure_logging`` once at startup, or configure structlog their own way.
"""

from src.observability.logging import configure_logging
from src.observability.redact import redact_headers, redact_url_credentials


__all__ = [
    "configure_logging",
    "redact_headers",
    "redact_url_credentials",
]
