"""Write a sequence of text segments to the registry as a forward-linked chain."""

import logging
import threading
from typing import Callable, Dict, Any, List, Optional, Sequence

from chainpress.errors import RegistryError, RegistryWriteFailed, PublishCancelled
from chainpress.models.record import ContentRecord, RecordKind
from chainpress.models.chain import PublishResult
from chainpress.registry.base import Registry
from chainpress.size_policy import COST_PER_RECORD

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class ChainWriter:
    """
    Persists segments as a root record followed by chunk records.

    The registry assigns an address only when a record is created, so the chain
    is written back to front: the last chunk first with an empty ``next``, then
    each earlier chunk pointing at the address just returned, and the root last.
    A root therefore exists only once every record it reaches has been written.
    """

    def __init__(self, registry: Registry):
        self.registry = registry

    def write(
        self,
        segments: Sequence[str],
        metadata: Optional[Dict[str, Any]] = None,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PublishResult:
        """
        Write the chain and return the root address.

        Args:
            segments: Segments in reading order; segments[0] goes in the root.
            metadata: Fields stored on the root record (title, tags, ...).
            on_progress: Called with (records_written, total_records) after each write.
                Exceptions it raises are logged and do not stop the write.
            cancel_event: When set between two writes, stop before the next one.

        Returns:
            PublishResult with the root address and every address in reading order.

        Raises:
            RegistryWriteFailed: A create failed; ``orphans`` lists what was already written.
            PublishCancelled: cancel_event was set before the chain was complete.
        """
        if not segments:
            raise ValueError("At least one segment is required (use [''] for empty content)")

        total = len(segments)
        written: List[str] = []
        next_address = ""

        # Chunks, last to first. Skipped entirely for a single segment.
        for index in range(total - 1, 0, -1):
            record = ContentRecord(kind=RecordKind.CHUNK, text=segments[index], next=next_address)
            next_address = self._write_step(record, index, written, total, on_progress, cancel_event)

        root = ContentRecord(
            kind=RecordKind.ROOT,
            text=segments[0],
            next=next_address,
            metadata=dict(metadata or {}),
        )
        root_address = self._write_step(root, 0, written, total, on_progress, cancel_event)

        logger.info("Published chain %s (%d record%s)", root_address, total, "" if total == 1 else "s")
        return PublishResult(
            root_address=root_address,
            addresses=list(reversed(written)),
            records=total,
            cost=total * COST_PER_RECORD,
        )

    def _write_step(
        self,
        record: ContentRecord,
        segment_index: int,
        written: List[str],
        total: int,
        on_progress: Optional[ProgressCallback],
        cancel_event: Optional[threading.Event],
    ) -> str:
        """Create one record, append its address to ``written`` and report progress."""
        step = len(written) + 1
        if cancel_event is not None and cancel_event.is_set():
            logger.warning("Publish cancelled before step %d of %d", step, total)
            raise PublishCancelled(step, segment_index, len(written), total, written)

        try:
            address = self.registry.create(record)
        except RegistryError as e:
            logger.error(
                "Write step %d of %d (segment %d) failed; %d orphaned record(s): %s",
                step, total, segment_index, len(written), e,
            )
            raise RegistryWriteFailed(step, segment_index, len(written), total, written, cause=e) from e

        written.append(address)
        logger.debug("Step %d/%d: segment %d written at %s", step, total, segment_index, address)
        if on_progress is not None:
            # The record is committed; a failing reporter must not strand the chain.
            try:
                on_progress(len(written), total)
            except Exception:
                logger.exception("Progress callback failed at step %d of %d", step, total)
        return address
