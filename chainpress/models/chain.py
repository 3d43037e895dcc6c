"""Result models for chain writes, reads and cost estimates."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from chainpress.models.record import ContentRecord


class PublishResult(BaseModel):
    """Outcome of a completed chain write."""

    root_address: str = Field(description="Address of the root record: the content's top-level address")
    addresses: List[str] = Field(default_factory=list, description="Every record address in reading order")
    records: int = Field(description="Number of records written")
    cost: int = Field(description="Registry cost units spent")

    @property
    def chunk_addresses(self) -> List[str]:
        """Addresses of the continuation records, in reading order."""
        return self.addresses[1:]


class StopReason(str, Enum):
    """Why a chain traversal stopped."""

    END_OF_CHAIN = "end_of_chain"
    MISSING_RECORD = "missing_record"
    READ_FAILED = "read_failed"
    MALFORMED = "malformed"
    CYCLE = "cycle"


class ChainReadResult(BaseModel):
    """Reassembled text plus how the traversal ended."""

    text: str = Field(description="Concatenated text of every record read")
    addresses: List[str] = Field(default_factory=list, description="Addresses read, root first when known")
    complete: bool = Field(description="True when the walk reached an empty next reference")
    stop_reason: StopReason = Field(description="Why traversal stopped")
    broken_at: Optional[str] = Field(default=None, description="Address that could not be followed")

    @property
    def records(self) -> int:
        return len(self.addresses)


class CostEstimate(BaseModel):
    """Pre-publish cost of a piece of content."""

    length: int
    records: int
    cost: int
    fits: bool = Field(description="False when the content exceeds the article limit")


class OpenedRecord(BaseModel):
    """A fetched record with its full text (reassembled for article roots)."""

    record: ContentRecord
    text: str
    complete: bool = True
