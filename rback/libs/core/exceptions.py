"""
Exceptions Module

Exception hierarchy shared by all rback libraries.
"""


class RbackError(Exception):
    """Base exception for all rback errors"""


class RetrievalError(RbackError):
    """Raised when RBAC records cannot be fetched from the record store"""


class AuthenticationError(RetrievalError):
    """Raised when the cluster connection cannot be authenticated"""


class MalformedRecordError(RbackError):
    """Raised when a record lacks an expected field or has an unexpected type"""

    def __init__(self, message: str, kind: str = None, field: str = None):
        self.kind = kind
        self.field = field
        super().__init__(message)


class ConfigurationError(RbackError):
    """Raised when configuration or command-line input is invalid"""
