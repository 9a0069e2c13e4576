"""DID resolution metadata.

See: https://www.w3.org/TR/did-core/#did-resolution-metadata
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


ERROR_INVALID_DID = "invalidDid"
ERROR_NOT_FOUND = "notFound"
ERROR_REPRESENTATION_NOT_SUPPORTED = "representationNotSupported"

TYPE_JSON = "application/json"
TYPE_DID_LD_JSON = "application/did+ld+json"


class Metadata(BaseModel):
    """Base for metadata records; unknown properties are kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def serialize(self) -> Dict[str, Any]:
        """Return a JSON-ready dict using the wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ResolutionInputMetadata(Metadata):
    """Input options to a resolve call."""

    accept: Optional[str] = None


class ResolutionMetadata(Metadata):
    """Outcome of one resolution attempt."""

    error: Optional[str] = None
    content_type: Optional[str] = Field(default=None, alias="contentType")
    property_set: Optional[Dict[str, Any]] = None

    @classmethod
    def from_error(cls, error: str) -> "ResolutionMetadata":
        """Create metadata reporting only an error."""
        return cls(error=error)


class DocumentMetadata(Metadata):
    """Metadata about a resolved document.

    An instance with no values set is the default: present, but saying nothing.
    """

    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    deactivated: Optional[bool] = None
    property_set: Optional[Dict[str, Any]] = None
