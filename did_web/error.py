"""Errors and error related utilities."""

from abc import ABC
import binascii
from enum import Enum
import json
from typing import ClassVar, Optional, Tuple, Type

from inflection import dasherize, underscore
from multiformats.multibase.err import MultibaseKeyError, MultibaseValueError
from nacl import exceptions as nacl_exceptions
from pyasn1.error import PyAsn1Error
from pydantic import ValidationError

from .metadata import ERROR_INVALID_DID, ERROR_NOT_FOUND


class Reportable(Exception, ABC):
    """Abstract Base Class for exceptions that map to a resolution error code."""

    code: ClassVar[str]


class DIDResolutionError(Reportable):
    """Represents an error from a DID Resolver."""

    code = "internalError"


class InvalidDID(DIDResolutionError):
    """Raised when a DID does not conform to the did:web syntax."""

    code = ERROR_INVALID_DID


class DIDNotFound(DIDResolutionError):
    """Represents a DID not found error."""

    code = ERROR_NOT_FOUND


class ErrorKind(Enum):
    """Kinds of error shared across the DID, JWT and linked data proof toolkit.

    The set is closed but additive: new wrapped kinds may appear, so callers
    matching on kinds must keep an arm for ``UNMATCHED``.
    """

    INVALID_SUBJECT = "invalid_subject"
    INVALID_CRITICAL_HEADER = "invalid_critical_header"
    UNKNOWN_CRITICAL_HEADER = "unknown_critical_header"
    INVALID_ISSUER = "invalid_issuer"
    ALGORITHM_NOT_IMPLEMENTED = "algorithm_not_implemented"
    PROOF_TYPE_NOT_IMPLEMENTED = "proof_type_not_implemented"
    MISSING_ALGORITHM = "missing_algorithm"
    ALGORITHM_MISMATCH = "algorithm_mismatch"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    KEY_TYPE_NOT_IMPLEMENTED = "key_type_not_implemented"
    CURVE_NOT_IMPLEMENTED = "curve_not_implemented"
    MISSING_KEY = "missing_key"
    MISSING_PRIVATE_KEY = "missing_private_key"
    MISSING_MODULUS = "missing_modulus"
    MISSING_EXPONENT = "missing_exponent"
    MISSING_PRIME = "missing_prime"
    MISSING_CREDENTIAL = "missing_credential"
    MISSING_KEY_PARAMETERS = "missing_key_parameters"
    MISSING_PROOF = "missing_proof"
    MISSING_ISSUANCE_DATE = "missing_issuance_date"
    MISSING_TYPE_VERIFIABLE_CREDENTIAL = "missing_type_verifiable_credential"
    MISSING_TYPE_VERIFIABLE_PRESENTATION = "missing_type_verifiable_presentation"
    MISSING_ISSUER = "missing_issuer"
    MISSING_VERIFICATION_METHOD = "missing_verification_method"
    KEY = "key"
    TIME_ERROR = "time_error"
    URI = "uri"
    INVALID_CONTEXT = "invalid_context"
    MISSING_CONTEXT = "missing_context"
    MISSING_DOCUMENT_ID = "missing_document_id"
    MISSING_PROOF_SIGNATURE = "missing_proof_signature"
    EXPIRED_PROOF = "expired_proof"
    FUTURE_PROOF = "future_proof"
    INVALID_PROOF_PURPOSE = "invalid_proof_purpose"
    INVALID_PROOF_DOMAIN = "invalid_proof_domain"
    INVALID_SIGNATURE = "invalid_signature"
    INVALID_JWS = "invalid_jws"
    MISSING_CREDENTIAL_SCHEMA = "missing_credential_schema"
    UNSUPPORTED_PROPERTY = "unsupported_property"
    UNSUPPORTED_KEY_TYPE = "unsupported_key_type"
    UNSUPPORTED_TYPE = "unsupported_type"
    UNSUPPORTED_PROOF_PURPOSE = "unsupported_proof_purpose"
    UNSUPPORTED_CHECK = "unsupported_check"
    TOO_MANY_BLANK_NODES = "too_many_blank_nodes"
    JWT_CREDENTIAL_IN_PRESENTATION = "jwt_credential_in_presentation"
    EXPECTED_UNENCODED_HEADER = "expected_unencoded_header"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INVALID_PROOF_TYPE_TYPE = "invalid_proof_type_type"
    INVALID_KEY_LENGTH = "invalid_key_length"
    INCONSISTENT_DID_KEY = "inconsistent_did_key"
    CRYPTO = "crypto"

    # Wrapped external errors; displayed by the wrapped value
    KEY_REJECTED = "key_rejected"
    FROM_UTF8 = "from_utf8"
    ASN1_ENCODE = "asn1_encode"
    BASE64 = "base64"
    MULTIBASE = "multibase"
    JSON = "json"

    # Reserved catch-all arm
    UNMATCHED = "unmatched"

    @property
    def wrapped(self) -> bool:
        """Return whether this kind wraps an external error."""
        return self in WRAPPED_KINDS


WRAPPED_KINDS = frozenset(
    {
        ErrorKind.KEY_REJECTED,
        ErrorKind.FROM_UTF8,
        ErrorKind.ASN1_ENCODE,
        ErrorKind.BASE64,
        ErrorKind.MULTIBASE,
        ErrorKind.JSON,
    }
)

MESSAGES = {
    ErrorKind.INVALID_SUBJECT: "Invalid subject for JWT",
    ErrorKind.INVALID_CRITICAL_HEADER: "Invalid crit property in JWT header",
    ErrorKind.UNKNOWN_CRITICAL_HEADER: "Unknown critical header name in JWT header",
    ErrorKind.INVALID_ISSUER: "Invalid issuer for JWT",
    ErrorKind.MISSING_KEY: "JWT key not found",
    ErrorKind.MISSING_PRIVATE_KEY: "Missing private key parameter in JWK",
    ErrorKind.MISSING_MODULUS: "Missing modulus in RSA key",
    ErrorKind.MISSING_EXPONENT: "Missing exponent in RSA key",
    ErrorKind.MISSING_PRIME: "Missing prime factor in RSA key",
    ErrorKind.MISSING_KEY_PARAMETERS: "JWT key parameters not found",
    ErrorKind.MISSING_PROOF: "Missing proof property",
    ErrorKind.MISSING_ISSUANCE_DATE: "Missing issuance date",
    ErrorKind.MISSING_TYPE_VERIFIABLE_CREDENTIAL: "Missing type VerifiableCredential",
    ErrorKind.MISSING_TYPE_VERIFIABLE_PRESENTATION: (
        "Missing type VerifiablePresentation"
    ),
    ErrorKind.MISSING_ISSUER: "Missing issuer property",
    ErrorKind.MISSING_VERIFICATION_METHOD: "Missing proof verificationMethod",
    ErrorKind.MISSING_CREDENTIAL: "Verifiable credential not found in JWT",
    ErrorKind.KEY: "problem with JWT key",
    ErrorKind.ALGORITHM_NOT_IMPLEMENTED: "JWA algorithm not implemented",
    ErrorKind.PROOF_TYPE_NOT_IMPLEMENTED: "Linked Data Proof type not implemented",
    ErrorKind.MISSING_ALGORITHM: "Missing algorithm in JWT",
    ErrorKind.ALGORITHM_MISMATCH: "Algorithm in JWS header does not match JWK",
    ErrorKind.UNSUPPORTED_ALGORITHM: "Unsupported algorithm",
    ErrorKind.KEY_TYPE_NOT_IMPLEMENTED: "Key type not implemented",
    ErrorKind.CURVE_NOT_IMPLEMENTED: "Curve not implemented: '{}'",
    ErrorKind.TIME_ERROR: "Unable to convert date/time",
    ErrorKind.INVALID_CONTEXT: "Invalid context",
    ErrorKind.MISSING_CONTEXT: "Missing context",
    ErrorKind.MISSING_DOCUMENT_ID: "Missing document ID",
    ErrorKind.MISSING_PROOF_SIGNATURE: "Missing JWS in proof",
    ErrorKind.EXPIRED_PROOF: "Expired proof",
    ErrorKind.FUTURE_PROOF: "Proof creation time is in the future",
    ErrorKind.INVALID_SIGNATURE: "Invalid Signature",
    ErrorKind.INVALID_JWS: "Invalid JWS",
    ErrorKind.INVALID_PROOF_PURPOSE: "Invalid proof purpose",
    ErrorKind.INVALID_PROOF_DOMAIN: "Invalid proof domain",
    ErrorKind.MISSING_CREDENTIAL_SCHEMA: "Missing credential schema for ZKP",
    ErrorKind.UNSUPPORTED_PROPERTY: "Unsupported property for LDP",
    ErrorKind.UNSUPPORTED_KEY_TYPE: "Unsupported key type for did:key",
    ErrorKind.TOO_MANY_BLANK_NODES: (
        "Multiple blank nodes not supported. Either credential or credential "
        "subject must have id property. Presentation must have id property."
    ),
    ErrorKind.UNSUPPORTED_TYPE: "Unsupported type for LDP",
    ErrorKind.UNSUPPORTED_PROOF_PURPOSE: "Unsupported proof purpose",
    ErrorKind.UNSUPPORTED_CHECK: "Unsupported check",
    ErrorKind.JWT_CREDENTIAL_IN_PRESENTATION: "Unsupported JWT VC in VP",
    ErrorKind.EXPECTED_UNENCODED_HEADER: "Expected unencoded JWT header",
    ErrorKind.RESOURCE_NOT_FOUND: "Resource not found",
    ErrorKind.INVALID_PROOF_TYPE_TYPE: "Invalid ProofType type",
    ErrorKind.INVALID_KEY_LENGTH: "Invalid key length",
    ErrorKind.INCONSISTENT_DID_KEY: "Inconsistent DID Key",
    ErrorKind.URI: "Invalid URI",
    ErrorKind.CRYPTO: "Crypto error",
    ErrorKind.UNMATCHED: "Unknown error",
}

# Checked in order; subclasses must come before their bases.
CONVERSIONS: Tuple[Tuple[Type[BaseException], ErrorKind], ...] = (
    (nacl_exceptions.InvalidkeyError, ErrorKind.KEY_REJECTED),
    (UnicodeDecodeError, ErrorKind.FROM_UTF8),
    (PyAsn1Error, ErrorKind.ASN1_ENCODE),
    (binascii.Error, ErrorKind.BASE64),
    (MultibaseKeyError, ErrorKind.MULTIBASE),
    (MultibaseValueError, ErrorKind.MULTIBASE),
    (json.JSONDecodeError, ErrorKind.JSON),
    (ValidationError, ErrorKind.JSON),
    (nacl_exceptions.CryptoError, ErrorKind.CRYPTO),
)


class SSIError(Exception):
    """Error of a known kind, optionally wrapping an external error."""

    def __init__(
        self,
        kind: ErrorKind,
        detail: Optional[str] = None,
        source: Optional[BaseException] = None,
    ):
        """Initialize the error."""
        if kind.wrapped and source is None:
            raise ValueError(f"Error kind {kind.name} must wrap an error")
        if kind is ErrorKind.CURVE_NOT_IMPLEMENTED and detail is None:
            raise ValueError("Error kind CURVE_NOT_IMPLEMENTED requires the curve name")
        self.kind = kind
        self.detail = detail
        self.source = source
        super().__init__(self.message)

    @property
    def code(self) -> str:
        """Short machine readable code for the kind."""
        return dasherize(underscore(self.kind.value))

    @property
    def message(self) -> str:
        """Display message for the error."""
        if self.kind.wrapped:
            return str(self.source)
        if self.kind is ErrorKind.CURVE_NOT_IMPLEMENTED:
            return MESSAGES[self.kind].format(json.dumps(self.detail))
        return MESSAGES[self.kind]

    @classmethod
    def from_exception(cls, err: BaseException) -> "SSIError":
        """Convert an external error into an SSIError.

        Wrapping is lossless except for generic crypto failures, which carry no
        detail on purpose and are reported without their source.
        """
        if isinstance(err, SSIError):
            return err
        for exc_type, kind in CONVERSIONS:
            if isinstance(err, exc_type):
                if kind is ErrorKind.CRYPTO:
                    return cls(kind)
                return cls(kind, source=err)
        raise TypeError(f"No error conversion for {type(err).__name__}")
