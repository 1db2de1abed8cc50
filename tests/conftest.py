from typing import Callable, Union

import httpx
import pytest

from ec2metadata import ClientConfig, EC2MetadataClient

ENDPOINT = "http://169.254.169.254/latest"

ENV_VARS = [
    "AWS_EC2_METADATA_SERVICE_ENDPOINT",
    "AWS_EC2_METADATA_TIMEOUT",
    "AWS_EC2_METADATA_DISABLED",
    "AWS_EC2_METADATA_USE_TOKEN",
    "AWS_EC2_METADATA_TOKEN_TTL",
]

# path -> (status code, body) or an exception to raise
Routes = dict[str, Union[tuple[int, str], Exception]]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class FakeIMDS:
    """Stands in for the metadata service. Unknown paths get a 404."""

    def __init__(self, routes: Routes) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, text="Not Found")
        if isinstance(route, Exception):
            raise route
        status, body = route
        return httpx.Response(status, text=body)


@pytest.fixture
def make_client():
    clients: list[httpx.Client] = []

    def _make(routes: Routes, **config) -> tuple[EC2MetadataClient, FakeIMDS]:
        imds = FakeIMDS(routes)
        http = httpx.Client(transport=httpx.MockTransport(imds), base_url=ENDPOINT)
        clients.append(http)
        return EC2MetadataClient(ClientConfig(**config), client=http), imds

    yield _make
    for c in clients:
        c.close()


@pytest.fixture(scope="function")
def identity_document_json() -> str:
    return """{
        "devpayProductCodes" : ["bar"],
        "marketplaceProductCodes" : ["foo"],
        "availabilityZone" : "us-east-1d",
        "privateIp" : "10.158.112.84",
        "version" : "2010-08-31",
        "region" : "us-east-1",
        "instanceId" : "i-1234567",
        "billingProducts" : ["bp-6ba54002"],
        "instanceType" : "t1.micro",
        "accountId" : "123456789012",
        "pendingTime" : "2015-11-19T16:32:11Z",
        "imageId" : "ami-5fb8c835",
        "kernelId" : "aki-919dcaf8",
        "ramdiskId" : null,
        "architecture" : "x86_64"
    }"""


@pytest.fixture(scope="function")
def iam_info_json() -> Callable[[str], str]:
    def _make(code: str = "Success") -> str:
        return (
            "{"
            f'"Code" : "{code}",'
            '"LastUpdated" : "2012-04-26T16:39:16Z",'
            '"InstanceProfileArn" : "arn:aws:iam::123456789012:instance-profile/my-instance-profile",'
            '"InstanceProfileId" : "AIPAABCDEFGHIJKLMN123"'
            "}"
        )

    return _make
