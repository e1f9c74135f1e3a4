"""
Structured logging for embedding store operations.
"""

import logging
from typing import Any, Dict, List

from ..core import config


def _truncate(text: str, limit: int = 50) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class StructuredLogger:
    """Structured logger for store, search and lifecycle operations."""

    def __init__(self, name: str = "semstore"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel("DEBUG" if config.debug_enabled() else config.LOG_LEVEL)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status == "failed":
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def log_lifecycle(self, operation: str, db_path: str, dimension: int, status: str = "success"):
        """Log open/reset/close of a store."""
        self.log_operation(f"store.{operation}", status, {"db_path": db_path, "dimension": dimension})

    def log_store_operation(self, record_id: str, content: str, dimension: int,
                            sanitized: int = 0, status: str = "success"):
        """Log a record insert."""
        details = {
            "record_id": record_id,
            "content": _truncate(content),
            "dimension": dimension,
        }
        if sanitized:
            details["sanitized_components"] = sanitized

        self.log_operation("store.insert", status, details)

    def log_search_operation(self, k: int, candidates: int, returned: int,
                             duration_ms: float, details: Dict[str, Any] = None):
        """Log a similarity search."""
        log_details = {
            "k": k,
            "candidates": candidates,
            "returned": returned,
            "duration_ms": round(duration_ms, 2),
        }
        if details:
            log_details.update(details)

        self.log_operation("index.search", "success", log_details)

    def log_failure(self, operation: str, error: Exception, details: Dict[str, Any] = None):
        """Log a failed operation with its error kind."""
        log_details = {"error": str(error)}
        kind = getattr(error, "kind", None)
        if kind is not None:
            log_details["kind"] = kind.value
        if details:
            log_details.update(details)

        self.log_operation(operation, "failed", log_details)

    def log_status(self, message: str):
        """Log a progress/status message."""
        self.logger.info(f"Status: {message}")

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)


# Global logger instance
logger = StructuredLogger()


def sanitize_details(details: Dict[str, Any], sensitive_fields: List[str] = None) -> Dict[str, Any]:
    """Redact vector payloads and truncate long strings before logging."""
    if sensitive_fields is None:
        sensitive_fields = ['vector', 'embedding', 'query_vector']

    sanitized = {}
    for k, v in details.items():
        if k in sensitive_fields:
            sanitized[k] = "[REDACTED]"
        elif isinstance(v, str):
            sanitized[k] = _truncate(v, 100)
        else:
            sanitized[k] = v
    return sanitized
