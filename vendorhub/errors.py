"""Error taxonomy shared by the profile and matching layers."""


class VendorHubError(Exception):
    """Base exception; carries the HTTP status and a machine-readable code."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class ValidationFailed(VendorHubError):
    """Required input is missing or invalid"""

    status_code = 422
    code = "validation_failed"


class ProfileNotFound(VendorHubError):
    """Profile not found"""

    status_code = 404
    code = "profile_not_found"


class Unauthorized(VendorHubError):
    """Not authenticated"""

    status_code = 401
    code = "unauthorized"


class Forbidden(Unauthorized):
    """Caller role is not allowed here"""

    status_code = 403
    code = "forbidden"


class StoreUnavailable(VendorHubError):
    """Profile store is unavailable"""

    status_code = 503
    code = "store_unavailable"
