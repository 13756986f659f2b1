"""Domain exceptions."""


class GymTrackerError(Exception):
    """Base exception for the session engine."""

    pass


class InvalidTransition(GymTrackerError):
    """Raised by a strict session machine when an operation is not valid in the current state."""

    def __init__(self, operation: str, state: str):
        super().__init__(f"Cannot {operation} while {state}")
        self.operation = operation
        self.state = state


class PersistenceError(GymTrackerError):
    """Raised when the document store fails a read or write."""

    pass


class CatalogError(GymTrackerError):
    """Raised when the exercise catalog API fails or returns an unexpected payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
