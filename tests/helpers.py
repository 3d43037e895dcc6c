"""Helper registries and content builders for tests."""

import string
from typing import Optional, Set

from chainpress.errors import RegistryError
from chainpress.models.record import ContentRecord
from chainpress.registry.memory_registry import InMemoryRegistry

_ALPHABET = string.ascii_letters + string.digits + " .,;\n"


def make_text(length: int, offset: int = 0) -> str:
    """
    Deterministic text of the given length.

    Characters cycle through a 67-symbol alphabet, so any reordered or
    duplicated segment changes the result.
    """
    return "".join(_ALPHABET[(i * 7 + offset) % len(_ALPHABET)] for i in range(length))


class FailingRegistry(InMemoryRegistry):
    """In-memory registry whose Nth create call (1-based) raises RegistryError."""

    def __init__(self, fail_on_call: int):
        super().__init__()
        self.fail_on_call = fail_on_call

    def create(self, record: ContentRecord) -> str:
        if self.create_calls + 1 == self.fail_on_call:
            self.create_calls += 1
            raise RegistryError("simulated create failure", {"call": self.fail_on_call})
        return super().create(record)


class UnreadableRegistry(InMemoryRegistry):
    """In-memory registry whose get raises RegistryError for selected addresses."""

    def __init__(self, unreadable: Optional[Set[str]] = None):
        super().__init__()
        self.unreadable = set(unreadable or ())
        self.get_calls = 0

    def get(self, address: str) -> Optional[ContentRecord]:
        self.get_calls += 1
        if address in self.unreadable:
            raise RegistryError("simulated read failure", {"address": address})
        return super().get(address)


class RecordingRegistry(InMemoryRegistry):
    """In-memory registry that remembers each created record in write order."""

    def __init__(self):
        super().__init__()
        self.created = []

    def create(self, record: ContentRecord) -> str:
        address = super().create(record)
        self.created.append(self.get(address))
        return address
