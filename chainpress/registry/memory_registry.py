"""In-process registry used for dry runs and tests."""

import logging
from typing import Dict, List, Optional

from chainpress.models.record import ContentRecord, RecordKind
from chainpress.registry.base import Registry

logger = logging.getLogger(__name__)


class InMemoryRegistry(Registry):
    """Append-only dictionary store with sequential addresses and a create counter."""

    def __init__(self, address_prefix: str = "mem"):
        self._records: Dict[str, ContentRecord] = {}
        self._order: List[str] = []
        self._prefix = address_prefix
        self.create_calls = 0

    @property
    def cost_spent(self) -> int:
        """Units spent so far: one per successful create."""
        return len(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, address: str) -> bool:
        return address in self._records

    def create(self, record: ContentRecord) -> str:
        self.create_calls += 1
        address = f"{self._prefix}:{len(self._order) + 1:08d}"
        self._records[address] = record.with_address(address)
        self._order.append(address)
        logger.debug("Created %s record at %s", record.kind.name, address)
        return address

    def get(self, address: str) -> Optional[ContentRecord]:
        return self._records.get(address)

    def list_records(self, kind: Optional[RecordKind] = None) -> List[ContentRecord]:
        records = [self._records[a] for a in self._order]
        if kind is None:
            return records
        return [r for r in records if r.kind == kind]

    def addresses(self) -> List[str]:
        """Addresses in creation order."""
        return list(self._order)
