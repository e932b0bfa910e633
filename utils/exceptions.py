"""Custom exception classes used across the service."""


class ServiceError(RuntimeError):
    """Base class for domain-specific exceptions."""


class TranscriptionError(ServiceError):
    """Raised when the speech-to-text service cannot be used."""


class CaptureError(ServiceError):
    """Raised when the page screenshot cannot be produced."""


class ProcessingError(ServiceError):
    """Raised when audio download or transcoding fails."""


class InvalidRequestError(ServiceError):
    """Raised when request validation fails."""


class ConfigurationError(ServiceError):
    """Raised when environment configuration is missing or invalid."""
