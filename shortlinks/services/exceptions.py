"""Exceptions for the link shortener service layer.

Every failure of a service operation is one of these kinds (or a
StorageUnavailableError raised by the store and passed through unchanged),
so the API layer can map each to a precise status and message.
"""

from shortlinks.services.codes import CodeValidationFailure


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class InvalidURLError(ServiceError):
    """The URL is not an absolute http(s) URL."""
    pass


class InvalidCodeError(ServiceError):
    """The requested custom code doesn't meet the syntax policy."""
    
    def __init__(self, code: str, reason: CodeValidationFailure, message: str):
        self.code = code
        self.reason = reason
        super().__init__(message)


class CodeAlreadyExistsError(ServiceError):
    """The requested custom code is already in use."""
    pass


class CodeGenerationExhaustedError(ServiceError):
    """Every random code attempt collided with a stored code."""
    pass


class OperationTimeoutError(ServiceError):
    """The operation did not finish before its deadline."""
    pass


class LinkNotFoundError(ServiceError):
    """No link is stored under the requested code."""
    pass
