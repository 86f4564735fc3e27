"""OpenSRS XML API client"""
from opensrs_gateway.opensrs.client import OpenSRSClient
from opensrs_gateway.opensrs.errors import (
    AmbiguousRecordError,
    ContactValidationError,
    OpenSRSConfigError,
    OpenSRSError,
    RecordNotFoundError,
    RecordValidationError,
    ZoneReadError,
)
from opensrs_gateway.opensrs.result import OpenSRSResult
from opensrs_gateway.opensrs.transport import OpenSRSTransport, sign

__all__ = [
    "OpenSRSClient",
    "OpenSRSTransport",
    "OpenSRSResult",
    "OpenSRSError",
    "OpenSRSConfigError",
    "RecordValidationError",
    "ContactValidationError",
    "ZoneReadError",
    "RecordNotFoundError",
    "AmbiguousRecordError",
    "sign",
]
