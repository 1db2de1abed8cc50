import argparse
import sys
from typing import Optional, Sequence

import httpx
from loguru import logger
from pydantic import BaseModel

from .client import EC2MetadataClient
from .config import ClientConfig
from .exceptions import EC2MetadataBaseError


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ec2metadata", description="Query the EC2 instance metadata service"
    )
    parser.add_argument("--endpoint", type=str, default=None,
                        help="Metadata service endpoint (default: $AWS_EC2_METADATA_SERVICE_ENDPOINT)")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Request timeout in seconds")
    parser.add_argument("--token", action="store_true", default=False,
                        help="Authenticate requests with a session token")
    parser.add_argument("--debug", action="store_true", default=False,
                        help="Log every request")

    sub = parser.add_subparsers(dest="command", required=True)
    metadata = sub.add_parser("metadata", help="Get a path under /meta-data")
    metadata.add_argument("path", type=str)
    dynamic = sub.add_parser("dynamic", help="Get a path under /dynamic")
    dynamic.add_argument("path", type=str)
    sub.add_parser("user-data", help="Get the instance user-data")
    sub.add_parser("identity", help="Get the instance identity document")
    sub.add_parser("iam-info", help="Get the instance IAM info")
    sub.add_parser("region", help="Get the region the instance runs in")
    sub.add_parser("available", help="Exit 0 if the metadata service is reachable")
    return parser


def build_config(args: argparse.Namespace) -> ClientConfig:
    """Read config from the environment and apply command line overrides."""
    overrides = {}
    if args.endpoint is not None:
        overrides["service_endpoint"] = args.endpoint
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    if args.token:
        overrides["use_token"] = True
    return ClientConfig(**overrides)


def run(client: EC2MetadataClient, args: argparse.Namespace) -> int:
    commands = {
        "metadata": lambda: client.get_metadata(args.path),
        "dynamic": lambda: client.get_dynamic_data(args.path),
        "user-data": client.get_user_data,
        "identity": client.get_instance_identity_document,
        "iam-info": client.iam_info,
        "region": client.region,
    }
    if args.command == "available":
        return 0 if client.available() else 1

    try:
        result = commands[args.command]()
    except (EC2MetadataBaseError, httpx.HTTPError) as e:
        print(e, file=sys.stderr)
        return 1

    if isinstance(result, BaseModel):
        result = result.model_dump_json(by_alias=True, indent=2)
    print(result)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = create_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.debug else "WARNING")

    with EC2MetadataClient(build_config(args)) as client:
        return run(client, args)


if __name__ == "__main__":
    sys.exit(main())
