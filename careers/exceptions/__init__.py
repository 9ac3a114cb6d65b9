"""Custom exceptions for the careers page builder."""


class CareersError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['success'] = False
        rv['error'] = self.message
        return rv


class ValidationError(CareersError):
    """Raised when a request body is incomplete or malformed."""
    def __init__(self, message, payload=None):
        super().__init__(message, 400, payload)


class AuthenticationError(CareersError):
    """Raised when credentials or the bearer token are missing or invalid."""
    def __init__(self, message="Authentication required", payload=None):
        super().__init__(message, 401, payload)


class NotFoundError(CareersError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)


class ConflictError(CareersError):
    """Raised when a unique value (email, slug) is already taken."""
    def __init__(self, message, field=None):
        payload = {'field': field} if field else None
        super().__init__(message, 409, payload)
        self.field = field


class ConfigurationError(CareersError):
    """Raised when the server is missing required configuration."""
    def __init__(self, message="Server configuration error"):
        super().__init__(message, 500)
