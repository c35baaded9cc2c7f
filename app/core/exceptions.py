"""
Base exception classes for the application.

Exception hierarchy follows the layer structure:
- Core/service layer raises domain exceptions
- API layer transforms them to HTTP responses (see app/api/exception_handlers.py)

Endpoints never catch these themselves; the global handlers do the mapping.
"""


class AppException(Exception):
    """
    Base exception for all application-specific exceptions.

    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str = "An application error occurred"):
        self.message = message
        super().__init__(self.message)


# ============================================================================
# EXTERNAL DEPENDENCY EXCEPTIONS
# ============================================================================


class RemoteSourceError(AppException):
    """
    Raised when a remote blacklist source can't be used.

    Examples:
    - Host unreachable or DNS failure
    - Non-2xx response
    - Body is not {"ips": [...], "wallets": [...]}

    Typically maps to HTTP 500. The store is left untouched.
    """

    pass
