# sensordash/core/errors.py
"""
Domain errors raised by the data access layer and the auth gate.

Routers translate these into rendered pages or redirects; nothing here
knows about HTTP status codes.
"""


class SensorDashError(Exception):
    """Base class for application errors."""


class AuthenticationRequired(SensorDashError):
    """No valid session artifact accompanied a protected request."""

    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        super().__init__(f"To {method} {path} you need to login.")


class AdminRequired(SensorDashError):
    """Authenticated, but the route is restricted to administrators."""

    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        super().__init__(f"{method} {path} is only allowed for administrators.")


class ValidationFailure(SensorDashError):
    pass


class NotFoundError(SensorDashError):
    pass


class ConflictError(SensorDashError):
    pass


class HashingError(SensorDashError):
    pass


class InvalidRoleError(SensorDashError, ValueError):
    pass
