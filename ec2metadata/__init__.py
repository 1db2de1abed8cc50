__version__ = "0.1.0"


from .client import EC2MetadataClient, Operation
from .config import ClientConfig
from .exceptions import (
    EC2MetadataBaseError,
    EC2MetadataError,
    EC2MetadataRequestError,
    ErrorKind,
    NotFoundError,
    SerializationError,
)
from .models import EC2IAMInfo, EC2InstanceIdentityDocument
