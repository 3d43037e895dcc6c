"""Data models for content records, article metadata and chain results."""

from .record import ContentRecord, RecordKind, KIND_FIELD, STATUS_FIELD, STATUS_OFFICIAL
from .article import ArticleMetadata, PostData
from .chain import PublishResult, ChainReadResult, StopReason, CostEstimate, OpenedRecord

__all__ = [
    "ContentRecord",
    "RecordKind",
    "KIND_FIELD",
    "STATUS_FIELD",
    "STATUS_OFFICIAL",
    "ArticleMetadata",
    "PostData",
    "PublishResult",
    "ChainReadResult",
    "StopReason",
    "CostEstimate",
    "OpenedRecord",
]
