"""Follow a chain's forward references and reassemble its text."""

import logging
from typing import Iterator, Optional, Set

from chainpress.errors import RegistryError, RegistryReadFailed, MalformedChain
from chainpress.models.record import ContentRecord, RecordKind
from chainpress.models.chain import ChainReadResult, StopReason
from chainpress.registry.base import Registry

logger = logging.getLogger(__name__)


def _fetch_chunk(registry: Registry, address: str) -> Optional[ContentRecord]:
    """Fetch the record at ``address`` and check that it is a chunk."""
    try:
        record = registry.get(address)
    except RegistryError as e:
        raise RegistryReadFailed(address, e) from e
    if record is None:
        return None
    if record.kind != RecordKind.CHUNK:
        raise MalformedChain(address, f"expected a chunk record, found {record.kind.name}")
    return record


def read_chain(root: ContentRecord, registry: Registry) -> ChainReadResult:
    """
    Walk a chain from its root and report the text and how the walk ended.

    Never raises for a broken chain: a failed, missing or malformed hop ends the
    walk and the text read so far is returned with ``complete=False``.

    Args:
        root: The already-fetched root record (any record works as a start).
        registry: Registry to fetch continuation records from.

    Returns:
        ChainReadResult with the concatenated text.
    """
    parts = [root.text]
    addresses = [root.address] if root.address else []
    visited: Set[str] = set(addresses)
    next_address = root.next
    reason = StopReason.END_OF_CHAIN

    while next_address:
        if next_address in visited:
            reason = StopReason.CYCLE
            break
        visited.add(next_address)
        try:
            record = _fetch_chunk(registry, next_address)
        except RegistryReadFailed as e:
            logger.warning("Chain read stopped: %s", e)
            reason = StopReason.READ_FAILED
            break
        except MalformedChain as e:
            logger.warning("Chain read stopped: %s", e)
            reason = StopReason.MALFORMED
            break
        if record is None:
            reason = StopReason.MISSING_RECORD
            break
        parts.append(record.text)
        addresses.append(next_address)
        next_address = record.next

    complete = reason == StopReason.END_OF_CHAIN
    if not complete:
        logger.warning(
            "Chain from %s is broken at %s (%s); returning %d record(s) of text",
            root.address, next_address, reason.value, len(parts),
        )
    return ChainReadResult(
        text="".join(parts),
        addresses=addresses,
        complete=complete,
        stop_reason=reason,
        broken_at=None if complete else next_address,
    )


def reassemble(root: ContentRecord, registry: Registry) -> str:
    """Return the full text of the chain starting at ``root``, truncated if the chain is broken."""
    return read_chain(root, registry).text


def iter_chain(root: ContentRecord, registry: Registry) -> Iterator[ContentRecord]:
    """Yield the root and then each chunk in reading order, stopping quietly at any break."""
    yield root
    visited = {root.address} if root.address else set()
    next_address = root.next
    while next_address and next_address not in visited:
        visited.add(next_address)
        try:
            record = _fetch_chunk(registry, next_address)
        except (RegistryReadFailed, MalformedChain) as e:
            logger.warning("Chain iteration stopped: %s", e)
            return
        if record is None:
            return
        yield record
        next_address = record.next
