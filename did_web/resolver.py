"""did:web DID Resolver.

See: https://w3c-ccg.github.io/did-method-web/
"""

import logging
from typing import Optional, Tuple

import aiohttp
from pydid import DIDDocument, DIDUrl, InvalidDIDUrlError, Resource, VerificationMethod
from pydid.doc.doc import IDNotFoundError

from . import USER_AGENT
from .document import parse_document
from .error import DIDNotFound, DIDResolutionError, InvalidDID, SSIError
from .fetcher import DocumentFetcher, Representation
from .metadata import (
    ERROR_INVALID_DID,
    ERROR_NOT_FOUND,
    DocumentMetadata,
    ResolutionInputMetadata,
    ResolutionMetadata,
)
from .policy import HostProtocolPolicy
from .url import did_web_url


LOGGER = logging.getLogger(__name__)

Resolution = Tuple[
    ResolutionMetadata, Optional[DIDDocument], Optional[DocumentMetadata]
]


class DIDWeb:
    """did:web DID Resolver.

    The resolver holds one HTTP session used for every resolution. Creating a
    session is costly, so it is made once and shared by concurrent calls; it is
    opened with `open` or by entering the resolver as an async context manager,
    or supplied by the caller through `with_session`.

    The host protocol policy is captured when the resolver is constructed.
    """

    name = "web"

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        *,
        policy: Optional[HostProtocolPolicy] = None,
        proxy: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: str = USER_AGENT,
    ):
        """Initialize the resolver.

        timeout, in seconds, applies only to a session created by the resolver;
        by default no timeout is imposed.
        """
        self.session = session
        self._owns_session = False
        self.policy = policy or HostProtocolPolicy.from_env()
        self.proxy = proxy
        self.timeout = timeout
        self.user_agent = user_agent

    @classmethod
    def with_session(cls, session: aiohttp.ClientSession, **kwargs) -> "DIDWeb":
        """Create a resolver reusing a session owned by the caller."""
        return cls(session, **kwargs)

    async def open(self):
        """Create the default HTTP session."""
        if self.session is not None:
            return
        LOGGER.debug("Opening HTTP session for did:web resolution")
        self.session = aiohttp.ClientSession(
            headers={"User-Agent": self.user_agent},
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )
        self._owns_session = True

    async def close(self):
        """Close the HTTP session if it was created by the resolver."""
        if self.session is not None and self._owns_session:
            await self.session.close()
            self.session = None
        self._owns_session = False

    async def __aenter__(self):
        """Open resolver."""
        await self.open()
        return self

    async def __aexit__(self, type, value, tb):
        """Close resolver."""
        await self.close()
        return False

    @property
    def fetcher(self) -> DocumentFetcher:
        """Return a fetcher bound to the shared session."""
        if self.session is None:
            raise ValueError("Resolver must be opened")
        return DocumentFetcher(self.session, self.proxy)

    def supports(self, did: str) -> bool:
        """Return whether the DID uses the did:web method."""
        return did.startswith("did:web:")

    async def resolve_representation(
        self, did: str, input_metadata: Optional[ResolutionInputMetadata] = None
    ) -> Representation:
        """Resolve a DID to the bytes of its DID Document representation."""
        try:
            url = did_web_url(did, self.policy)
        except InvalidDID as err:
            LOGGER.debug("%s", err)
            return ResolutionMetadata.from_error(ERROR_INVALID_DID), b"", None

        input_metadata = input_metadata or ResolutionInputMetadata()
        return await self.fetcher.fetch(url, input_metadata.accept)

    async def resolve(
        self, did: str, input_metadata: Optional[ResolutionInputMetadata] = None
    ) -> Resolution:
        """Resolve a DID to its parsed DID Document."""
        res_meta, doc_data, doc_meta = await self.resolve_representation(
            did, input_metadata
        )
        doc = None
        if doc_data:
            try:
                doc = parse_document(doc_data)
            except SSIError as err:
                LOGGER.warning("Could not parse document for %s: %s", did, err)
                return ResolutionMetadata.from_error(f"JSON Error: {err}"), None, None

        # contentType "MUST NOT be present if the resolve function was called"
        res_meta.content_type = None
        return res_meta, doc, doc_meta

    async def resolve_and_parse(self, did: str) -> DIDDocument:
        """Resolve a DID, raising an error if no document is found."""
        res_meta, doc, _ = await self.resolve(did)
        if res_meta.error == ERROR_NOT_FOUND:
            raise DIDNotFound(f"No document found for {did}")
        if res_meta.error == ERROR_INVALID_DID:
            raise InvalidDID(f"Invalid did:web DID: {did}")
        if res_meta.error:
            raise DIDResolutionError(f"Failed to resolve {did}: {res_meta.error}")
        if doc is None:
            raise DIDResolutionError(f"Empty document returned for {did}")
        return doc

    async def resolve_and_dereference(self, did_url: str) -> Resource:
        """Resolve a DID URL and dereference the identifier."""
        try:
            url = DIDUrl.parse(did_url)
        except InvalidDIDUrlError as err:
            raise DIDResolutionError(f"Invalid DID URL: {did_url}") from err
        if not url.did:
            raise DIDResolutionError("Invalid DID URL; must be absolute")
        if not url.fragment:
            raise DIDResolutionError("Invalid DID URL; must contain a fragment")

        doc = await self.resolve_and_parse(url.did)
        try:
            return doc.dereference(url)
        except IDNotFoundError as err:
            raise DIDResolutionError(
                f"Resource {did_url} not found in document"
            ) from err

    async def resolve_and_dereference_verification_method(
        self, did_url: str
    ) -> VerificationMethod:
        """Resolve a DID URL to the verification method it identifies."""
        resource = await self.resolve_and_dereference(did_url)
        if not isinstance(resource, VerificationMethod):
            raise DIDResolutionError("Resource is not a verification method")

        return resource
