"""Content record model: the unit stored in the registry."""

from enum import Enum
from typing import Optional, Dict, Any, Mapping
from pydantic import BaseModel, Field

from chainpress.errors import MalformedChain

# Type tag field and its values, shared by the classifier and registry list filters.
KIND_FIELD = "chainpress-type"
STATUS_FIELD = "chainpress-status"
STATUS_OFFICIAL = "official"


class RecordKind(str, Enum):
    """Kind of a content record, stored in the type tag field."""

    ROOT = "chainpress-article"
    CHUNK = "chainpress-article-chunk"
    STANDALONE = "chainpress-post"

    @classmethod
    def from_tag(cls, tag: Any) -> "RecordKind":
        """Map a raw type tag to a kind; unknown or missing tags are STANDALONE."""
        for kind in cls:
            if tag == kind.value:
                return kind
        return cls.STANDALONE


# Fields that are part of the record itself rather than its metadata.
CORE_FIELDS = {KIND_FIELD, STATUS_FIELD, "text", "next", "address"}


class ContentRecord(BaseModel):
    """A bounded text segment with a forward reference to the next record of its chain."""

    kind: RecordKind = Field(description="ROOT, CHUNK or STANDALONE")
    text: str = Field(default="", description="Text segment held by this record")
    next: str = Field(default="", description="Address of the next record; empty at end of chain")
    address: Optional[str] = Field(default=None, description="Registry-assigned address, set after create")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Root/post metadata fields (title, tags, ...)")

    model_config = {"frozen": True}

    @property
    def is_end(self) -> bool:
        """True when this record has no forward reference."""
        return not self.next

    def with_address(self, address: str) -> "ContentRecord":
        """Return a copy of this record carrying its registry address."""
        return self.model_copy(update={"address": address})

    def to_fields(self) -> Dict[str, Any]:
        """
        Flat field mapping as stored in the registry (type tag, text, next, metadata).

        Metadata keys that collide with a core field are dropped.
        """
        fields: Dict[str, Any] = {
            KIND_FIELD: self.kind.value,
            STATUS_FIELD: STATUS_OFFICIAL,
            "text": self.text,
        }
        fields.update({k: v for k, v in self.metadata.items() if k not in CORE_FIELDS})
        if self.kind != RecordKind.STANDALONE:
            fields["next"] = self.next
        return fields

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any], address: Optional[str] = None) -> "ContentRecord":
        """
        Build a record from a flat registry field mapping.

        Args:
            fields: Field mapping as returned by the registry.
            address: Address the record was fetched from (overrides any address field).

        Returns:
            ContentRecord with unrecognised fields kept as metadata.

        Raises:
            MalformedChain: If ``text`` or ``next`` are present but not strings.
        """
        address = address or fields.get("address")
        text = fields.get("text", "")
        next_address = fields.get("next", "")
        if text is None:
            text = ""
        if next_address is None:
            next_address = ""
        if not isinstance(text, str):
            raise MalformedChain(str(address), "text field is not a string")
        if not isinstance(next_address, str):
            raise MalformedChain(str(address), "next field is not a string")
        metadata = {k: v for k, v in fields.items() if k not in CORE_FIELDS}
        return cls(
            kind=RecordKind.from_tag(fields.get(KIND_FIELD)),
            text=text,
            next=next_address,
            address=address,
            metadata=metadata,
        )
