"""Module defining the EC2 instance metadata service client."""

from http import HTTPStatus
from types import TracebackType
from typing import Callable, Mapping, NamedTuple, Optional, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from .config import ClientConfig
from .exceptions import (
    EC2MetadataBaseError,
    EC2MetadataError,
    EC2MetadataRequestError,
    NotFoundError,
    SerializationError,
)
from .models import EC2IAMInfo, EC2InstanceIdentityDocument
from .utils.path import suffix_path

TOKEN_PATH = "/api/token"
TOKEN_HEADER = "X-aws-ec2-metadata-token"
TOKEN_TTL_HEADER = "X-aws-ec2-metadata-token-ttl-seconds"

ModelT = TypeVar("ModelT", bound=BaseModel)

# Builds the error that replaces an HTTP status error
ErrorFactory = Callable[[httpx.HTTPStatusError], Exception]


class Operation(NamedTuple):
    """A single request against the metadata service."""

    name: str
    http_method: str
    http_path: str


USER_DATA_STATUS_ERRORS: Mapping[int, ErrorFactory] = {
    HTTPStatus.NOT_FOUND: lambda e: NotFoundError("user-data not found", e),
}


class EC2MetadataClient:
    """Client for the EC2 instance metadata service.

    The client keeps no state between calls, so one instance can be shared
    by several threads as long as the underlying `httpx.Client` is.

    Parameters
    ----------
    config : `Optional[ClientConfig]`
        Client settings. Read from the environment if omitted.
    client : `Optional[httpx.Client]`
        HTTP client to send requests with. If omitted, one is created from
        `config` and closed again by `close()`.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._owns_client = client is None
        if client is None:
            client = httpx.Client(
                base_url=self.config.service_endpoint,
                timeout=self.config.timeout,
            )
        self._client = client

    def __enter__(self) -> "EC2MetadataClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if it was created by us."""
        if self._owns_client:
            self._client.close()

    def get_metadata(self, path: str) -> str:
        """Get the content of a path under `/meta-data`.

        Example:
            >>> client.get_metadata("instance-id")
            'i-1234567890abcdef0'
        """
        op = Operation(
            name="GetMetadata",
            http_method="GET",
            http_path=suffix_path("/meta-data", path),
        )
        return self._send(op)

    def get_user_data(self) -> str:
        """Get the user-data configured for the instance.

        Raises `NotFoundError` if the instance has no user-data.
        """
        op = Operation(name="GetUserData", http_method="GET", http_path="/user-data")
        return self._send(op, status_errors=USER_DATA_STATUS_ERRORS)

    def get_dynamic_data(self, path: str) -> str:
        """Get the content of a path under `/dynamic`."""
        op = Operation(
            name="GetDynamicData",
            http_method="GET",
            http_path=suffix_path("/dynamic", path),
        )
        return self._send(op)

    def get_instance_identity_document(self) -> EC2InstanceIdentityDocument:
        """Get the identity document describing the instance.

        Raises
        ------
        `EC2MetadataRequestError`
            The document could not be retrieved.
        `SerializationError`
            The document could not be decoded.
        """
        try:
            resp = self.get_dynamic_data("instance-identity/document")
        except (httpx.HTTPError, EC2MetadataBaseError) as e:
            raise EC2MetadataRequestError(
                "failed to get EC2 instance identity document", e
            )
        return _decode(
            EC2InstanceIdentityDocument,
            resp,
            "failed to decode EC2 instance identity document",
        )

    def iam_info(self) -> EC2IAMInfo:
        """Get the IAM info of the instance.

        Raises
        ------
        `EC2MetadataRequestError`
            The IAM info could not be retrieved.
        `SerializationError`
            The IAM info could not be decoded.
        `EC2MetadataError`
            The IAM info reports a code other than "Success".
        """
        try:
            resp = self.get_metadata("iam/info")
        except (httpx.HTTPError, EC2MetadataBaseError) as e:
            raise EC2MetadataRequestError("failed to get EC2 IAM info", e)

        info = _decode(EC2IAMInfo, resp, "failed to decode EC2 IAM info")
        if not info.ok:
            logger.error(f"IAM info returned code {info.code!r}")
            raise EC2MetadataError(f"failed to get EC2 IAM Info ({info.code})")
        return info

    def region(self) -> str:
        """Get the region the instance is running in.

        Example:
            >>> client.region()  # availability zone is us-west-2a
            'us-west-2'
        """
        resp = self.get_metadata("placement/availability-zone")
        # drop the zone letter
        return resp[:-1]

    def available(self) -> bool:
        """Check whether the metadata service can be reached.

        Can be used to determine if we are running on an EC2 instance.
        Any error raised by the request counts as unavailable.
        """
        try:
            self.get_metadata("instance-id")
        except Exception as e:
            logger.debug(f"EC2 metadata service not available: {e}")
            return False
        return True

    def _send(
        self,
        op: Operation,
        status_errors: Optional[Mapping[int, ErrorFactory]] = None,
    ) -> str:
        """Sends a request and returns the response body.

        Parameters
        ----------
        op : `Operation`
            The request to send.
        status_errors : `Optional[Mapping[int, ErrorFactory]]`
            Status codes whose `httpx.HTTPStatusError` is replaced by the
            error the mapped factory builds. Other errors are raised as is.

        Returns
        -------
        `str`
            The response body.
        """
        if self.config.disabled:
            raise EC2MetadataRequestError("EC2 IMDS access disabled")

        headers = self._token_headers()
        logger.debug("{} {} {}", op.name, op.http_method, op.http_path)
        response = self._client.request(op.http_method, op.http_path, headers=headers)
        return _check_status(response, status_errors or {})

    def _token_headers(self) -> dict[str, str]:
        """Fetch a session token if the client is configured to use one."""
        if not self.config.use_token:
            return {}
        response = self._client.put(
            TOKEN_PATH, headers={TOKEN_TTL_HEADER: str(self.config.token_ttl)}
        )
        response.raise_for_status()
        return {TOKEN_HEADER: response.text}


def _check_status(
    response: httpx.Response, status_errors: Mapping[int, ErrorFactory]
) -> str:
    """Raise for error statuses, remapping the ones in `status_errors`."""
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        factory = status_errors.get(e.response.status_code)
        if factory is None:
            raise
        raise factory(e) from e
    return response.text


def _decode(model: type[ModelT], content: str, errmsg: str) -> ModelT:
    """Decode a JSON response body into `model`.

    A bare `null` body decodes to a record with every field at its default.
    Trailing data after the JSON value is rejected.
    """
    if content.strip() == "null":
        return model()
    try:
        return model.model_validate_json(content)
    except ValidationError as e:
        logger.error(f"{errmsg}: {content!r}")
        raise SerializationError(errmsg, e)
