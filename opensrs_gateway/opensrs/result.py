"""Result returned by every OpenSRS call"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

NETWORK_ERROR = "NETWORK_ERROR"
TIMEOUT_ERROR = "ECONNABORTED"
PARSE_ERROR = "PARSE_ERROR"

# Vendor codes meaning the reseller account was refused
AUTH_FAILURE_CODES = {"400", "401", "415"}


class OpenSRSResult(BaseModel):
    """Uniform outcome of an OpenSRS command.

    Network, HTTP and parse failures are represented here as well, with
    ``response_code`` set to one of the local failure codes.
    """

    success: bool = False
    response_code: Optional[str] = None
    response_text: Optional[str] = None
    is_success: Optional[int] = None
    request_id: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None
    # set when the endpoint answered with a non-2xx status
    http_status: Optional[int] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    # name_suggest sections
    suggestions: Optional[Dict[str, Any]] = None
    lookups: Optional[Dict[str, Any]] = None
    premium: Optional[Dict[str, Any]] = None
    personal_names: Optional[Dict[str, Any]] = None
    is_search_completed: Optional[bool] = None
    response_time: Optional[str] = None

    @property
    def is_local_failure(self) -> bool:
        return self.http_status is not None or self.response_code in (NETWORK_ERROR, TIMEOUT_ERROR, PARSE_ERROR)

    @property
    def is_auth_failure(self) -> bool:
        return not self.success and self.response_code in AUTH_FAILURE_CODES

    @classmethod
    def failure(
        cls,
        error: str,
        response_code: str,
        response_text: Optional[str] = None,
        http_status: Optional[int] = None,
    ) -> "OpenSRSResult":
        return cls(
            success=False,
            error=error,
            response_code=response_code,
            response_text=response_text or error,
            http_status=http_status,
        )
