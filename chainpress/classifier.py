"""Classify fetched records as article roots, chunks or standalone posts by their type tag."""

from typing import Any, Mapping, Union

from chainpress.models.record import ContentRecord, RecordKind, KIND_FIELD

RecordLike = Union[ContentRecord, Mapping[str, Any]]


def classify(record: RecordLike) -> RecordKind:
    """Return the kind of a record or raw registry field mapping."""
    if isinstance(record, ContentRecord):
        return record.kind
    return RecordKind.from_tag(record.get(KIND_FIELD))


def is_root(record: RecordLike) -> bool:
    return classify(record) == RecordKind.ROOT


def is_chunk(record: RecordLike) -> bool:
    return classify(record) == RecordKind.CHUNK


def is_visible(record: RecordLike) -> bool:
    """Chunks are never listed on their own; roots and posts are."""
    return not is_chunk(record)


def needs_reassembly(record: RecordLike) -> bool:
    """True for a root that points at further chunks."""
    if not is_root(record):
        return False
    if isinstance(record, ContentRecord):
        return not record.is_end
    return bool(record.get("next"))
