from .base import EC2MetadataBaseError, ErrorKind

__all__ = [
    "NotFoundError",
    "EC2MetadataRequestError",
    "SerializationError",
    "EC2MetadataError",
]


class NotFoundError(EC2MetadataBaseError):
    """Raised when no user-data is configured for the instance (HTTP 404)."""

    kind = ErrorKind.NOT_FOUND


class EC2MetadataRequestError(EC2MetadataBaseError):
    """Raised when a request failed before its response could be parsed."""

    kind = ErrorKind.REQUEST_FAILED


class SerializationError(EC2MetadataBaseError):
    """Raised when a response body could not be decoded."""

    kind = ErrorKind.SERIALIZATION


class EC2MetadataError(EC2MetadataBaseError):
    """Raised when a decoded payload reports a failure status."""

    kind = ErrorKind.METADATA
