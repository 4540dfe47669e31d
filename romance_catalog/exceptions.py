"""
Errors raised by the catalog services and mapped to HTTP status codes by the handlers.
"""


class CatalogError(Exception):
    """Base error carrying the HTTP status a handler should answer with"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    status_code = 400


class AuthenticationError(CatalogError):
    status_code = 401


class ForbiddenError(CatalogError):
    status_code = 403


class NotFoundError(CatalogError):
    status_code = 404


class ConflictError(CatalogError):
    status_code = 409


class DuplicateReviewError(CatalogError):
    """Same network address reviewed the same book inside the cool-down window"""
    status_code = 429
