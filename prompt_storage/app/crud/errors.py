class StoreError(Exception):
    """Base exception for prompt store failures"""
    def __init__(self, message: str = "Prompt store error"):
        self.message = message
        super().__init__(message)


class NotFoundError(StoreError):
    """Raised when the requested record does not exist"""
    def __init__(self, message: str = "Record not found"):
        super().__init__(message)


class InvalidRequestError(StoreError):
    """Raised for malformed parameters such as a non-positive page limit"""
    def __init__(self, message: str = "Invalid request"):
        super().__init__(message)


class PoolError(StoreError):
    """Raised when no pooled connection could be checked out"""
    def __init__(self, message: str = "Error with connection pool"):
        super().__init__(message)


class UnhandledError(StoreError):
    """Any other storage failure; carries the driver message for diagnostics"""
    def __init__(self, message: str = "Unhandled database error"):
        super().__init__(message)
