"""
Structured logging for store and API operations.
"""

import logging
from typing import Any, Dict, List

# Keys whose values never reach the log
SENSITIVE_FIELDS = ["password", "resetToken", "verificationToken", "token", "secret"]


class StructuredLogger:
    """Structured logger for document store and API operations."""

    def __init__(self, name: str = "shopstore"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

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

        if status in ("failed", "error"):
            self.logger.error(message)
        elif status in ("rejected", "recovered"):
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def log_store_operation(self, collection: str, operation: str, record_id: str = None,
                            status: str = "success", details: Dict[str, Any] = None):
        """Log a create/update/delete against a collection."""
        log_details = {}
        if record_id is not None:
            log_details["record_id"] = record_id
        if details:
            log_details.update(sanitize_payload(details))

        self.log_operation(f"{collection}.{operation}", status, log_details)

    def log_document_recovery(self, path: str, reason: str):
        """Log a document being recreated or patched during initialization."""
        self.log_operation("document.recover", "recovered", {"path": path, "reason": reason})

    def log_validation_fault(self, collection: str, field: str, message: str):
        """Log rejected caller data."""
        self.log_operation(f"{collection}.validate", "rejected", {
            "field": field,
            "message": message[:100]
        })

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()


def sanitize_payload(payload: Any, reveal_sensitive: bool = False, sensitive_fields: List[str] = None) -> Any:
    """Sanitize payloads for logging."""
    if sensitive_fields is None:
        sensitive_fields = SENSITIVE_FIELDS

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if reveal_sensitive or k not in sensitive_fields:
                sanitized[k] = sanitize_payload(v, reveal_sensitive, sensitive_fields)
            else:
                sanitized[k] = "[REDACTED]"
        return sanitized
    elif isinstance(payload, str):
        # Truncate long strings
        return payload[:100] + "..." if len(payload) > 100 else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item, reveal_sensitive, sensitive_fields) for item in payload]
    else:
        return payload
