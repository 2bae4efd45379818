"""
Error bodies shared by the routers and the exception handlers.
"""

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse


def error_body(message: str, error_type: str, field: Optional[str] = None) -> Dict[str, Any]:
    body = {"error": message, "type": error_type}
    if field is not None:
        body["field"] = field
    return body


def not_found(message: str) -> JSONResponse:
    """404 for an absent record."""
    return JSONResponse(status_code=404, content=error_body(message, "NOT_FOUND"))


def unauthorized(message: str) -> JSONResponse:
    """401 for credentials that do not match."""
    return JSONResponse(status_code=401, content=error_body(message, "AUTHENTICATION_ERROR"))
