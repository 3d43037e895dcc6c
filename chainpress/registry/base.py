"""Abstract interface to an append-only record registry."""

from abc import ABC, abstractmethod
from typing import List, Optional

from chainpress.models.record import ContentRecord, RecordKind


class Registry(ABC):
    """
    Append-only key-value store where every create costs one unit and returns a new address.

    Backends raise RegistryError when a call fails. Records are never edited or deleted.
    """

    @abstractmethod
    def create(self, record: ContentRecord) -> str:
        """Persist one record and return its registry-assigned address."""

    @abstractmethod
    def get(self, address: str) -> Optional[ContentRecord]:
        """Fetch one record by address, or None if nothing is stored there."""

    @abstractmethod
    def list_records(self, kind: Optional[RecordKind] = None) -> List[ContentRecord]:
        """List stored records, optionally only those with the given type tag."""

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
