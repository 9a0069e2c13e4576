"""Retrieve DID Document representations over HTTP."""

import asyncio
import logging
from typing import Optional, Tuple

import aiohttp

from .metadata import (
    ERROR_NOT_FOUND,
    TYPE_DID_LD_JSON,
    TYPE_JSON,
    DocumentMetadata,
    ResolutionMetadata,
)


LOGGER = logging.getLogger(__name__)

Representation = Tuple[ResolutionMetadata, bytes, Optional[DocumentMetadata]]


class DocumentFetcher:
    """Fetch a DID Document with one GET request.

    Every outcome is returned as resolution metadata; nothing is raised for
    network failures or error statuses. No retries are attempted.
    """

    def __init__(self, session: aiohttp.ClientSession, proxy: Optional[str] = None):
        """Initialize the fetcher.

        If proxy is set, it is prepended to every URL requested. This allows a
        local server to respond in place of remote hosts.
        """
        self.session = session
        self.proxy = proxy

    def request_url(self, url: str) -> str:
        """Return the URL actually requested for a document URL."""
        if self.proxy:
            return self.proxy + url
        return url

    async def fetch(self, url: str, accept: Optional[str] = None) -> Representation:
        """Fetch the document representation at url."""
        headers = {"Accept": accept or TYPE_JSON}
        LOGGER.debug("Fetching %s with headers %s", url, headers)
        try:
            async with self.session.get(
                self.request_url(url), headers=headers
            ) as response:
                if response.status == 404:
                    LOGGER.debug("No document found at %s", url)
                    return (
                        ResolutionMetadata.from_error(ERROR_NOT_FOUND),
                        b"",
                        DocumentMetadata(),
                    )

                try:
                    response.raise_for_status()
                except aiohttp.ClientResponseError as err:
                    LOGGER.warning("Error status retrieving %s: %s", url, err)
                    return (
                        ResolutionMetadata.from_error(str(err)),
                        b"",
                        DocumentMetadata(),
                    )

                try:
                    body = await response.read()
                except (aiohttp.ClientError, asyncio.TimeoutError) as err:
                    LOGGER.warning("Error reading response from %s: %s", url, err)
                    return (
                        ResolutionMetadata.from_error(
                            f"Error reading HTTP response: {err}"
                        ),
                        b"",
                        None,
                    )
        # ValueError covers URLs the client refuses to parse
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as err:
            LOGGER.warning("Error sending request to %s: %s", url, err)
            return (
                ResolutionMetadata.from_error(
                    f"Error sending HTTP request ({url}): {err}"
                ),
                b"",
                None,
            )

        # TODO: set document created/updated metadata from HTTP headers
        LOGGER.debug("Retrieved %d bytes from %s", len(body), url)
        return (
            ResolutionMetadata(content_type=TYPE_DID_LD_JSON),
            body,
            DocumentMetadata(),
        )
