"""Translate did:web identifiers into DID Document URLs.

See: https://w3c-ccg.github.io/did-method-web/#read-resolve
"""

import logging
from typing import Optional

from .error import InvalidDID
from .policy import PORT_SEPARATOR, HostProtocolPolicy


LOGGER = logging.getLogger(__name__)

DEFAULT_PATH = ".well-known"
DOCUMENT_NAME = "did.json"


def did_web_url(did: str, policy: Optional[HostProtocolPolicy] = None) -> str:
    """Return the URL of the DID Document for a did:web DID.

    Raises InvalidDID if the DID is not a did:web DID with a non-empty domain.
    """
    parts = did.split(":")
    if len(parts) < 3 or parts[0] != "did" or parts[1] != "web" or not parts[2]:
        raise InvalidDID(f"Invalid did:web DID: {did}")

    # TODO: validate the domain name (alphanumeric, hyphen, dot; no IP address)
    domain, segments = parts[2], parts[3:]
    path = "/".join(segments) if segments else DEFAULT_PATH

    policy = policy or HostProtocolPolicy.from_env()
    protocol = policy.protocol_for(domain)

    url = "{}://{}/{}/{}".format(
        protocol, domain.replace(PORT_SEPARATOR, ":", 1), path, DOCUMENT_NAME
    )
    LOGGER.debug("Resolved %s to URL %s", did, url)
    return url
