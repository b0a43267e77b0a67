# richter/core/exceptions.py
"""
Domain errors raised by services and dependencies.

Every error carries the message shown to the client and the HTTP status it
maps to; ``richter.main`` renders them as ``{"message": ...}``.
"""
from typing import Optional


class RichterError(Exception):
    status_code = 500
    code = "RICHTER_ERROR"

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AuthMissing(RichterError):
    """No bearer credential on the request."""

    status_code = 401
    code = "AUTH_MISSING"

    def __init__(self, message: str = "Forbidden access"):
        super().__init__(message)


class AuthInvalid(RichterError):
    """Bad signature, tampered structure or expired token."""

    status_code = 401
    code = "AUTH_INVALID"

    INVALID_SIGNATURE = "InvalidSignature"
    EXPIRED = "Expired"

    def __init__(self, reason: str = INVALID_SIGNATURE, message: str = "Forbidden access"):
        self.reason = reason
        super().__init__(message, {"reason": reason})


class Forbidden(RichterError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "forbidden access"):
        super().__init__(message)


class DuplicateIdentity(RichterError):
    status_code = 409
    code = "DUPLICATE_IDENTITY"

    def __init__(self, email: str):
        self.email = email
        super().__init__("user already exists", {"email": email})


class UpstreamFailure(RichterError):
    """Email, identity provider, payment processor or database call failed."""

    status_code = 502
    code = "UPSTREAM_FAILURE"

    def __init__(self, component: str, message: str = ""):
        self.component = component
        super().__init__(message or f"{component} unavailable", {"component": component})


class ValidationError(RichterError):
    status_code = 400
    code = "VALIDATION_ERROR"
