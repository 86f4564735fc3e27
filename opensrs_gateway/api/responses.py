"""JSON envelope shared by every route

Success: ``{success: true, data, responseCode, responseText, timestamp}``
Failure: ``{success: false, error, responseCode?, responseText?, timestamp}``
"""
import math
from datetime import datetime
from typing import Any, Dict, Optional

from opensrs_gateway.opensrs.result import OpenSRSResult


def now_iso() -> str:
    return datetime.utcnow().isoformat() + "Z"


def result_status(result: OpenSRSResult) -> int:
    """HTTP status for an OpenSRS outcome"""
    if result.success:
        return 200
    if result.is_local_failure:
        return 500
    if result.is_auth_failure:
        return 403
    return 400


def envelope(result: OpenSRSResult, data: Any = None, **extra) -> Dict[str, Any]:
    """Success envelope for a vendor result; ``data`` defaults to its mapped attributes"""
    body: Dict[str, Any] = {
        "success": True,
        "data": result.data if data is None else data,
        "responseCode": result.response_code,
        "responseText": result.response_text,
        "timestamp": now_iso(),
    }
    body.update(extra)
    return body


def ok(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Success envelope for local (database-only) operations"""
    body: Dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body["data"] = data
    body["timestamp"] = now_iso()
    return body


def pagination(page: int, limit: int, total: int) -> Dict[str, Any]:
    return {
        "currentPage": page,
        "totalPages": math.ceil(total / limit) if limit else 0,
        "totalResults": total,
        "hasNextPage": page * limit < total,
        "hasPrevPage": page > 1,
    }


def failure_body(
    error: str,
    result: Optional[OpenSRSResult] = None,
    message: Optional[str] = None,
    **extra,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": error}
    if message:
        body["message"] = message
    if result is not None:
        body["responseCode"] = result.response_code
        body["responseText"] = result.response_text
    body["timestamp"] = now_iso()
    body.update(extra)
    return body


class OpenSRSRequestFailed(Exception):
    """Raised by routes when OpenSRS rejected or never answered a command"""

    def __init__(self, result: OpenSRSResult, message: str, **extra):
        super().__init__(message)
        self.result = result
        self.message = message
        self.extra = extra

    @property
    def status_code(self) -> int:
        return result_status(self.result)

    def body(self) -> Dict[str, Any]:
        return failure_body(
            self.result.error or self.message,
            result=self.result,
            message=self.message,
            **self.extra,
        )


def require_success(result: OpenSRSResult, message: str, **extra) -> OpenSRSResult:
    """Return ``result`` or raise OpenSRSRequestFailed"""
    if not result.success:
        raise OpenSRSRequestFailed(result, message, **extra)
    return result
