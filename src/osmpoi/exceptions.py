class OSMPOIError(Exception):
    """Base exception for osmpoi"""
    retryable = False


class NotFoundError(OSMPOIError):
    """Raised when a place name does not resolve to a usable region"""
    pass


class InvalidQueryError(OSMPOIError):
    """Raised when a bounding box or feature filter is malformed"""
    pass


class TransportError(OSMPOIError):
    """Raised when a remote service cannot be reached or is temporarily unavailable.

    Every request osmpoi sends is read-only, so these are safe to retry.
    """
    retryable = True

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ServiceError(OSMPOIError):
    """Raised when the remote service rejects a query"""

    def __init__(self, message, reason=None, status_code=None):
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code


class ParseError(OSMPOIError):
    """Raised when a response does not match the expected schema"""

    def __init__(self, message, raw=None):
        super().__init__(message)
        self.raw = raw
