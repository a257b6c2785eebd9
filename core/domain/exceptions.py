"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Four failure kinds exist:
not-found, forbidden, invalid-state and validation.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class NotFoundError(DomainException):
    """Base exception for a referenced entity that does not exist."""

    def __init__(self, message: str = "Resource not found", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class OrganizationNotFoundError(NotFoundError):
    """Raised when an organization is not found."""

    def __init__(self, message: str = "Organization not found"):
        super().__init__(message, code="ORGANIZATION_NOT_FOUND")


class DeviceNotFoundError(NotFoundError):
    """Raised when a device is not found."""

    def __init__(self, message: str = "Device not found"):
        super().__init__(message, code="DEVICE_NOT_FOUND")


class RenewalRequestNotFoundError(NotFoundError):
    """Raised when a renewal request is not found."""

    def __init__(self, message: str = "Request not found"):
        super().__init__(message, code="REQUEST_NOT_FOUND")


class QuoteNotFoundError(NotFoundError):
    """Raised when no quote has been produced for a request yet."""

    def __init__(self, message: str = "Quote not found"):
        super().__init__(message, code="QUOTE_NOT_FOUND")


class ForbiddenError(DomainException):
    """Base exception for an actor that may not perform the action."""

    def __init__(self, message: str = "Permission denied", code: str = "FORBIDDEN"):
        super().__init__(message, code=code)


class ActorKindNotAllowedError(ForbiddenError):
    """Raised when the actor's organization kind may not call an operation."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, code="ACTOR_KIND_NOT_ALLOWED")


class NotManagedError(ForbiddenError):
    """Raised when the target lies outside the actor's managed organizations."""

    def __init__(self, message: str = "You do not manage this organization"):
        super().__init__(message, code="NOT_MANAGED")


class InvalidStateError(DomainException):
    """Base exception for an entity whose current status disallows the action."""

    def __init__(self, message: str = "Invalid state", code: str = "INVALID_STATE"):
        super().__init__(message, code=code)


class InvalidDeviceStatusError(InvalidStateError):
    """Raised when a device operation is invalid for the current status."""

    def __init__(self, message: str = "Invalid device status"):
        super().__init__(message, code="INVALID_DEVICE_STATUS")


class InvalidRequestStatusError(InvalidStateError):
    """Raised when a renewal request has already been processed."""

    def __init__(self, message: str = "Request is already processed"):
        super().__init__(message, code="INVALID_REQUEST_STATUS")


class DomainValidationError(DomainException):
    """Raised for malformed input such as an empty device ID list."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, code="VALIDATION_ERROR")
