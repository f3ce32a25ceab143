"""Exceptions raised by spocli."""


class SpoError(Exception):
    """Base class for SharePoint Online command failures."""

    pass


class AuthError(SpoError):
    """Acquiring an access token failed."""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class SpoRequestError(SpoError):
    """A SharePoint REST request failed."""

    def __init__(self, message: str, status_code: int = None, response: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response or {}
