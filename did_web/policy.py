"""Choose between http and https for a did:web domain."""

import os
from typing import Iterable, Mapping, Optional


FORCE_HTTP_ENV_VAR = "SSI__DID_WEB__FORCE_HTTP_FOR_HOSTNAMES"
DEFAULT_HTTP_HOSTNAMES = ("localhost",)
PORT_SEPARATOR = "%3A"


class HostProtocolPolicy:
    """Allow-list of hostnames resolved over plain http.

    Intended for local development and testing; this is not a security control.
    Every other hostname resolves over https.
    """

    def __init__(self, hostnames: Iterable[str] = DEFAULT_HTTP_HOSTNAMES):
        """Initialize the policy."""
        self.hostnames = frozenset(hostnames)

    @classmethod
    def parse(cls, value: str) -> "HostProtocolPolicy":
        """Create a policy from a comma-delimited sequence of hostnames."""
        return cls(value.split(","))

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "HostProtocolPolicy":
        """Create a policy from the process environment."""
        environ = os.environ if environ is None else environ
        value = environ.get(FORCE_HTTP_ENV_VAR)
        if value is None:
            return cls()
        return cls.parse(value)

    @staticmethod
    def hostname(domain: str) -> str:
        """Return the domain without an escaped port."""
        return domain.split(PORT_SEPARATOR, 1)[0]

    def protocol_for(self, domain: str) -> str:
        """Return the protocol to use for the given did:web domain."""
        if self.hostname(domain) in self.hostnames:
            return "http"
        return "https"

    def __eq__(self, other):
        if not isinstance(other, HostProtocolPolicy):
            return NotImplemented
        return self.hostnames == other.hostnames

    def __hash__(self):
        return hash(self.hostnames)

    def __repr__(self):
        return f"HostProtocolPolicy({sorted(self.hostnames)!r})"
