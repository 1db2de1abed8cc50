from enum import Enum
from typing import Optional

__all__ = ["ErrorKind", "EC2MetadataBaseError"]


class ErrorKind(Enum):
    """Tags identifying the failure an `EC2MetadataBaseError` represents."""

    NOT_FOUND = "NotFoundError"
    REQUEST_FAILED = "EC2MetadataRequestError"
    SERIALIZATION = "SerializationError"
    METADATA = "EC2MetadataError"


class EC2MetadataBaseError(Exception):
    """Base class for metadata client exceptions.

    Carries a `kind` tag and, optionally, the exception that caused it.
    The cause is also chained as `__cause__` so tracebacks show both.
    Only the subclasses, which each set a `kind`, can be raised.
    """

    kind: ErrorKind

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        if type(self) is EC2MetadataBaseError:
            raise TypeError("raise a subclass of EC2MetadataBaseError instead")
        self.message = message
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        msg = f"{self.kind.value}: {self.message}"
        if self.cause is not None:
            msg += f"\ncaused by: {self.cause}"
        return msg
