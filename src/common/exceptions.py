"""
Custom exception classes for sync operations.
Provides structured error handling across all handlers.
"""


class SyncException(Exception):
    """Base exception for all sync operations"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


class InstantlyAPIException(SyncException):
    """Raised when Instantly API calls fail"""

    def __init__(self, message: str, status_code: int = None, details: dict = None):
        super().__init__(message, details)
        self.status_code = status_code


class RateLimitException(InstantlyAPIException):
    """Raised when Instantly keeps answering 429 after the cooldown retry"""

    pass


class UpstreamConnectionException(SyncException):
    """Raised when the Instantly API cannot be reached at all"""

    pass


class NotFoundException(SyncException):
    """Raised when a campaign or lead does not exist"""

    pass


class ValidationException(SyncException):
    """Raised when a request parameter or record is invalid"""

    pass


class StorageException(SyncException):
    """Raised when a Firestore batch commit fails"""

    def __init__(self, message: str, committed_batches: int = 0, details: dict = None):
        super().__init__(message, details)
        self.committed_batches = committed_batches


class SyncInProgressException(SyncException):
    """Raised when another sync run holds the run lock"""

    pass


class AuthenticationException(SyncException):
    """Raised when a callable sync request is not authenticated"""

    pass


class ConfigurationException(SyncException):
    """Raised when required environment configuration is missing or invalid"""

    pass
