"""OpenSRS client exceptions

Transport and vendor failures are returned as results, never raised.
These exceptions cover problems detected locally, before any request
leaves the process.
"""


class OpenSRSError(Exception):
    """Base class for locally detected OpenSRS client errors"""

    status_code = 400

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class OpenSRSConfigError(OpenSRSError):
    """Reseller credentials or hosts are missing"""

    status_code = 500


class RecordValidationError(OpenSRSError):
    """A DNS record is missing fields required for its type"""


class ContactValidationError(OpenSRSError):
    """A registrant contact is missing required fields"""


class ZoneReadError(OpenSRSError):
    """The current zone could not be fetched, so it must not be replaced"""

    status_code = 500


class RecordNotFoundError(OpenSRSError):
    """No existing record matches the search criteria"""

    status_code = 404


class AmbiguousRecordError(OpenSRSError):
    """Several records match and no address was given to pick one"""
