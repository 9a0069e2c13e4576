"""DID Document parsing and key material helpers."""

import binascii
import json
from typing import Optional, Union

from multiformats import multibase
from multiformats.multibase.err import MultibaseKeyError, MultibaseValueError
from pydid import DIDDocument, DIDDocumentError, VerificationMethod

from .encode import b64_to_bytes
from .error import ErrorKind, SSIError


def parse_document(value: Union[str, bytes]) -> Optional[DIDDocument]:
    """Parse a DID Document from its JSON representation.

    A JSON null parses to no document. Raises SSIError of kind JSON on
    malformed JSON or a document that does not conform to DID Core.
    """
    try:
        loaded = json.loads(value)
        if loaded is None:
            return None
        return DIDDocument.deserialize(loaded)
    except (ValueError, DIDDocumentError) as err:
        raise SSIError(ErrorKind.JSON, source=err) from err


def _multibase_decode(value: str) -> bytes:
    try:
        return multibase.decode(value)
    except (MultibaseKeyError, MultibaseValueError, binascii.Error) as err:
        raise SSIError(ErrorKind.MULTIBASE, source=err) from err


def public_key_bytes(method: VerificationMethod) -> bytes:
    """Return the raw public key carried by a verification method.

    Only multibase or base58 encoded keys and OKP JWKs are supported.
    """
    if method.public_key_multibase:
        return _multibase_decode(method.public_key_multibase)
    if method.public_key_base58:
        return _multibase_decode("z" + method.public_key_base58)
    jwk = method.public_key_jwk
    if jwk and "x" in jwk:
        try:
            return b64_to_bytes(jwk["x"], urlsafe=True)
        except binascii.Error as err:
            raise SSIError.from_exception(err) from err
    raise SSIError(ErrorKind.MISSING_KEY_PARAMETERS)
