"""Errors raised by the metadata client.

Failures coming straight from the HTTP transport are not wrapped here;
they surface as the `httpx` exceptions that caused them.
"""

from .base import *
from .metadata import *

__all__ = [
    "ErrorKind",
    "EC2MetadataBaseError",
    "NotFoundError",
    "EC2MetadataRequestError",
    "SerializationError",
    "EC2MetadataError",
]
