from typing import Optional, Any

class SmsLinkError(Exception):
    """
    Base exception for the SMS deep link service.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ValidationError(SmsLinkError):
    """
    Raised when phone or message input is invalid. Never retried.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)

class NotFoundError(SmsLinkError):
    """
    Raised when a short identifier does not exist.
    """
    def __init__(self, message: str = "Short link not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class DuplicateKeyError(SmsLinkError):
    """
    Raised by a link store when a short identifier is already taken.
    """
    def __init__(self, message: str = "Short identifier already exists", details: Optional[Any] = None):
        super().__init__(message, code="DUPLICATE_KEY", status_code=409, details=details)

class StoreError(SmsLinkError):
    """
    Raised when the underlying link store fails or times out.
    """
    def __init__(self, message: str = "Link store unavailable", code: str = "STORE_ERROR", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=503, details=details)

class IdGenerationError(StoreError):
    """
    Raised when no free short identifier was found within the attempt limit.
    """
    def __init__(self, message: str = "Could not allocate a unique short identifier", details: Optional[Any] = None):
        super().__init__(message, code="ID_GENERATION_FAILED", details=details)
