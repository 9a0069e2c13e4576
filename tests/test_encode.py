"""Test encoding helpers."""

import binascii

import pytest

from did_web.encode import b64_to_bytes, pad


def test_pad():
    assert pad("YQ") == "YQ=="
    assert pad("YWI") == "YWI="
    assert pad("YWJj") == "YWJj"


def test_b64():
    assert b64_to_bytes("-_8", urlsafe=True) == b"\xfb\xff"
    assert b64_to_bytes("+/8") == b"\xfb\xff"


def test_base64_error_is_binascii():
    with pytest.raises(binascii.Error):
        b64_to_bytes("a")
