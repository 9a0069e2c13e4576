"""Fixtures for did:web resolution tests."""

import asyncio

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from did_web.policy import HostProtocolPolicy
from did_web.resolver import DIDWeb


DID_URL = "http://localhost/.well-known/did.json"
MALFORMED_URL = "http://localhost/malformed/did.json"
EMPTY_URL = "http://localhost/empty/did.json"
ERROR_URL = "http://localhost/error/did.json"
TRUNCATED_URL = "http://localhost/truncated/did.json"
STALLED_URL = "http://localhost/stalled/did.json"
NULL_URL = "http://localhost/null/did.json"

DID_JSON = """{
  "@context": "https://www.w3.org/ns/did/v1",
  "id": "did:web:localhost",
  "verificationMethod": [{
     "id": "did:web:localhost#key1",
     "type": "JsonWebKey2020",
     "controller": "did:web:localhost",
     "publicKeyJwk": {
       "key_id": "ed25519-2020-10-18",
       "kty": "OKP",
       "crv": "Ed25519",
       "x": "G80iskrv_nE69qbGLSpeOHJgmV4MKIzsy5l5iT6pCww"
     }
  }],
  "assertionMethod": ["did:web:localhost#key1"],
  "service": [{
    "id": "#didcomm",
    "type": "DIDCommMessaging",
    "serviceEndpoint": "https://example.com/didcomm"
  }]
}"""


@pytest.fixture
def requests():
    """Headers of every request received by the responder."""
    return []


class Stall:
    """Coordinates a request held open by the responder."""

    def __init__(self):
        self.entered = asyncio.Event()
        self.released = asyncio.Event()


@pytest.fixture
def stall():
    """Hold requests for STALLED_URL until released."""
    return Stall()


@pytest_asyncio.fixture
async def responder(requests, stall: Stall):
    """Local server standing in for did:web hosts.

    Requests arrive as /<document url>; the document is served for DID_URL and
    404 is returned for anything unknown.
    """

    async def handle(request: web.Request):
        requests.append(dict(request.headers))
        # Skip leading slash
        proxied_url = request.path[1:]
        if proxied_url == DID_URL:
            return web.Response(text=DID_JSON, content_type="application/json")
        if proxied_url == MALFORMED_URL:
            return web.Response(text="{not json", content_type="application/json")
        if proxied_url == EMPTY_URL:
            return web.Response(body=b"")
        if proxied_url == NULL_URL:
            return web.Response(text="null", content_type="application/json")
        if proxied_url == ERROR_URL:
            return web.Response(status=500, text="boom")
        if proxied_url == TRUNCATED_URL:
            response = web.StreamResponse(headers={"Content-Length": "1000"})
            await response.prepare(request)
            await response.write(DID_JSON[:20].encode())
            assert request.transport
            request.transport.close()
            return response
        if proxied_url == STALLED_URL:
            stall.entered.set()
            await stall.released.wait()
            return web.Response(text=DID_JSON, content_type="application/json")
        return web.Response(status=404)

    app = web.Application()
    app.router.add_get("/{tail:.*}", handle)
    server = TestServer(app)
    await server.start_server()
    yield server
    stall.released.set()
    await server.close()


@pytest_asyncio.fixture
async def resolver(responder: TestServer):
    """Resolver whose requests are served by the responder."""
    async with DIDWeb(
        policy=HostProtocolPolicy(), proxy=str(responder.make_url("/"))
    ) as resolver:
        yield resolver
