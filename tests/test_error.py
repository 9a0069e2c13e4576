"""Test the shared error vocabulary."""

import binascii
import json

from multiformats.multibase.err import MultibaseKeyError, MultibaseValueError
from nacl import exceptions as nacl_exceptions
from pyasn1.error import PyAsn1Error
import pytest

from did_web.error import (
    MESSAGES,
    DIDNotFound,
    DIDResolutionError,
    ErrorKind,
    InvalidDID,
    SSIError,
)


def test_every_kind_has_a_message():
    for kind in ErrorKind:
        if not kind.wrapped:
            assert kind in MESSAGES, kind


def test_message():
    assert str(SSIError(ErrorKind.INVALID_JWS)) == "Invalid JWS"
    assert str(SSIError(ErrorKind.MISSING_EXPONENT)) == "Missing exponent in RSA key"
    assert (
        str(SSIError(ErrorKind.CURVE_NOT_IMPLEMENTED, "P-521"))
        == "Curve not implemented: '\"P-521\"'"
    )


def test_curve_kind_requires_detail():
    with pytest.raises(ValueError):
        SSIError(ErrorKind.CURVE_NOT_IMPLEMENTED)


def test_code():
    assert SSIError(ErrorKind.INVALID_JWS).code == "invalid-jws"
    assert SSIError(ErrorKind.URI).code == "uri"


def test_wrapped_kind_requires_source():
    with pytest.raises(ValueError):
        SSIError(ErrorKind.JSON)


@pytest.mark.parametrize(
    "err, kind",
    [
        (nacl_exceptions.InvalidkeyError("bad key"), ErrorKind.KEY_REJECTED),
        (PyAsn1Error("bad encoding"), ErrorKind.ASN1_ENCODE),
        (binascii.Error("Incorrect padding"), ErrorKind.BASE64),
        (MultibaseKeyError("No known multibase code"), ErrorKind.MULTIBASE),
        (MultibaseValueError("Empty string"), ErrorKind.MULTIBASE),
        (json.JSONDecodeError("Expecting value", "{", 1), ErrorKind.JSON),
    ],
)
def test_from_exception_wraps(err: Exception, kind: ErrorKind):
    wrapped = SSIError.from_exception(err)
    assert wrapped.kind is kind
    assert wrapped.source is err
    assert str(wrapped) == str(err)


def test_from_exception_utf8():
    with pytest.raises(UnicodeDecodeError) as info:
        b"\xff".decode("utf-8")
    wrapped = SSIError.from_exception(info.value)
    assert wrapped.kind is ErrorKind.FROM_UTF8
    assert str(wrapped) == str(info.value)


def test_from_exception_crypto_is_opaque():
    wrapped = SSIError.from_exception(nacl_exceptions.BadSignatureError("detail"))
    assert wrapped.kind is ErrorKind.CRYPTO
    assert wrapped.source is None
    assert str(wrapped) == "Crypto error"


def test_from_exception_passes_through():
    err = SSIError(ErrorKind.MISSING_KEY)
    assert SSIError.from_exception(err) is err


def test_from_exception_unregistered():
    with pytest.raises(TypeError):
        SSIError.from_exception(KeyError("x"))


def test_resolution_error_codes():
    assert issubclass(InvalidDID, DIDResolutionError)
    assert issubclass(DIDNotFound, DIDResolutionError)
    assert InvalidDID.code == "invalidDid"
    assert DIDNotFound.code == "notFound"
