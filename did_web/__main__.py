"""Resolve a did:web DID from the command line."""

import asyncio
import json
import logging
import sys
from typing import Optional, Sequence

from configargparse import ArgumentParser, YAMLConfigFileParser

from .metadata import ResolutionInputMetadata
from .policy import DEFAULT_HTTP_HOSTNAMES, FORCE_HTTP_ENV_VAR, HostProtocolPolicy
from .resolver import DIDWeb


LOGGER = logging.getLogger("did_web")


def config(argv: Optional[Sequence[str]] = None):
    """Get config"""
    parser = ArgumentParser(
        config_file_parser_class=YAMLConfigFileParser, prog="did_web"
    )
    parser.add_argument("did", type=str, help="did:web DID to resolve")
    parser.add_argument("--accept", env_var="DID_WEB_ACCEPT", type=str, required=False)
    parser.add_argument(
        "--representation",
        action="store_true",
        help="Print the raw document representation instead of the parsed document",
    )
    parser.add_argument(
        "--force-http-for-hostnames",
        env_var=FORCE_HTTP_ENV_VAR,
        type=str,
        default=",".join(DEFAULT_HTTP_HOSTNAMES),
    )
    parser.add_argument(
        "--timeout", env_var="DID_WEB_TIMEOUT", type=float, required=False
    )
    parser.add_argument("--log-level", env_var="LOG_LEVEL", type=str, default="WARNING")
    args = parser.parse_args(argv)

    # Configure logs
    logging.basicConfig(
        format="%(asctime)s %(name)s %(levelname)s %(message)s", level=args.log_level
    )

    if args.timeout is not None and args.timeout <= 0:
        raise ValueError("--timeout must be positive")

    return args


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main."""
    args = config(argv)
    input_metadata = ResolutionInputMetadata(accept=args.accept)

    async with DIDWeb(
        policy=HostProtocolPolicy.parse(args.force_http_for_hostnames),
        timeout=args.timeout,
    ) as resolver:
        if args.representation:
            res_meta, doc_data, doc_meta = await resolver.resolve_representation(
                args.did, input_metadata
            )
            document = doc_data.decode("utf-8", errors="replace") or None
        else:
            res_meta, doc, doc_meta = await resolver.resolve(args.did, input_metadata)
            document = (
                doc.model_dump(mode="json", by_alias=True, exclude_none=True)
                if doc is not None
                else None
            )

    LOGGER.debug("Resolution metadata: %s", res_meta)
    print(
        json.dumps(
            {
                "didResolutionMetadata": res_meta.serialize(),
                "didDocument": document,
                "didDocumentMetadata": doc_meta.serialize() if doc_meta else None,
            },
            indent=2,
        ),
        flush=True,
    )
    return 1 if res_meta.error else 0


def run():
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
