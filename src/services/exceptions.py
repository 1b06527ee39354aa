"""Shared exceptions for service layer operations."""


class AccountNotFoundError(Exception):
    """Raised when no account is registered under the given API key."""

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key
        super().__init__(f"Account not found for API key: {api_key}")


class TransientError(Exception):
    """
    Base exception for backends that are unavailable or timed out.

    A transient failure means the answer could not be determined. It must reach
    the caller, never be treated as "not found", since the two are
    indistinguishable once swallowed.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class StoreUnavailableError(TransientError):
    """Raised when the database cannot be reached or a query exceeds its deadline."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Store unavailable during {operation}: {reason}")


class CacheUnavailableError(TransientError):
    """Raised when a cache read fails or exceeds its deadline."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Cache unavailable during {operation}: {reason}")


class MalformedImportError(Exception):
    """Raised when a bookmark export document cannot be parsed. Nothing is imported."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
