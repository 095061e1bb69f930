"""Exception hierarchy shared by the HTTP app and the Lambda handler."""


class IPLookupError(Exception):
    """Base exception for all iplookup errors."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# --- REQUEST-SHAPE ERRORS (4xx) ---

class RequestError(IPLookupError):
    """The request was rejected before any lookup was attempted."""

    status_code = 400
    code = "bad_request"


class MethodNotAllowed(RequestError):
    status_code = 405
    code = "method_not_allowed"

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"lookup only accepts GET method, you tried: {method}")


class MissingIdentifier(RequestError):
    status_code = 400
    code = "missing_ip"

    def __init__(self):
        super().__init__("the 'ip' path parameter is required")


class InvalidIdentifier(RequestError):
    status_code = 422
    code = "invalid_ip"

    def __init__(self, ip: str):
        self.ip = ip
        super().__init__(f"'{ip}' is not a valid IPv4 or IPv6 address")


# --- PROVIDER ERRORS (5xx) ---

class UpstreamError(IPLookupError):
    """The IP data provider failed or answered with something unusable."""

    status_code = 502
    code = "upstream_error"


class UpstreamTimeout(UpstreamError):
    status_code = 504
    code = "upstream_timeout"
