"""Publish articles and posts to a registry, and open published content."""

import logging
import threading
from typing import Callable, Optional, List

from pydantic import ValidationError

from chainpress.chain_reader import read_chain
from chainpress.chain_writer import ChainWriter, ProgressCallback
from chainpress.chunking import split_text
from chainpress.classifier import is_visible, needs_reassembly
from chainpress.errors import InvalidMetadata, PublishDeclined
from chainpress.models.article import ArticleMetadata, PostData
from chainpress.models.chain import CostEstimate, OpenedRecord, PublishResult
from chainpress.models.record import ContentRecord, RecordKind
from chainpress.registry.base import Registry
from chainpress.size_policy import (
    MAX_ARTICLE_CHARS,
    check_article_length,
    estimate_cost,
    estimate_price,
)

logger = logging.getLogger(__name__)

# confirm(question, note) -> True to go ahead
ConfirmCallback = Callable[[str, str], bool]


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "value"
    return f"{field}: {first.get('msg', 'invalid value')}"


class ArticlePublisher:
    """Entry point for publishing long-form articles and short posts."""

    def __init__(self, registry: Registry, confirm: Optional[ConfirmCallback] = None):
        """
        Initialize the publisher.

        Args:
            registry: Registry the records are written to and read from.
            confirm: Optional prompt asked before any article is written; returning
                False cancels the publish with nothing written.
        """
        self.registry = registry
        self.confirm = confirm
        self.writer = ChainWriter(registry)

    def estimate(self, content: str) -> CostEstimate:
        """Cost of publishing ``content`` as an article, without writing anything."""
        length = len(content)
        return CostEstimate(
            length=length,
            records=estimate_cost(length),
            cost=estimate_price(length),
            fits=length <= MAX_ARTICLE_CHARS,
        )

    def publish_article(
        self,
        content: str,
        metadata: ArticleMetadata,
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PublishResult:
        """
        Split ``content`` and write it as a chain with ``metadata`` on the root.

        Length and metadata are checked before anything is written.

        Raises:
            ContentTooLarge: content is longer than MAX_ARTICLE_CHARS.
            InvalidMetadata: metadata is not an ArticleMetadata.
            PublishDeclined: the confirmation prompt was declined.
            RegistryWriteFailed: a record write failed partway.
        """
        segments = self.prepare_article(content, metadata)
        return self.writer.write(segments, metadata.to_fields(), on_progress, cancel_event)

    def prepare_article(self, content: str, metadata: ArticleMetadata) -> List[str]:
        """Validate and split an article, then ask for confirmation. Nothing is written."""
        check_article_length(len(content))
        if not isinstance(metadata, ArticleMetadata):
            raise InvalidMetadata("Article metadata is required", {"type": type(metadata).__name__})

        segments = split_text(content)
        records = len(segments)
        if self.confirm is not None:
            note = f"This will create {records} record{'s' if records > 1 else ''}. Total cost: {estimate_price(len(content))}."
            if metadata.tip_account:
                note += " Tip account will be embedded for reader support."
            if not self.confirm("Publish this article?", note):
                logger.info("Publish of %r declined at confirmation", metadata.title)
                raise PublishDeclined("Publish declined", {"title": metadata.title})

        logger.info("Publishing %r: %d characters in %d record(s)", metadata.title, len(content), records)
        return segments

    def publish_post(self, post: PostData) -> str:
        """Write a short post as a single standalone record and return its address."""
        if self.confirm is not None:
            if not self.confirm("Publish this post?", "This will create one record. Total cost: 1."):
                raise PublishDeclined("Publish declined")
        record = ContentRecord(kind=RecordKind.STANDALONE, text=post.text, metadata=post.to_fields())
        address = self.registry.create(record)
        logger.info("Published post %s", address)
        return address

    def open_record(self, address: str) -> Optional[OpenedRecord]:
        """
        Fetch a record and resolve its full text.

        Article roots are reassembled from their chain; other records are
        returned with their own text. Returns None if nothing is stored at
        ``address``.
        """
        record = self.registry.get(address)
        if record is None:
            return None
        if needs_reassembly(record):
            result = read_chain(record, self.registry)
            return OpenedRecord(record=record, text=result.text, complete=result.complete)
        return OpenedRecord(record=record, text=record.text)


def publish(
    registry: Registry,
    content: str,
    root_metadata: ArticleMetadata,
    on_progress: Optional[ProgressCallback] = None,
) -> str:
    """Publish ``content`` as an article and return the root address."""
    return ArticlePublisher(registry).publish_article(content, root_metadata, on_progress).root_address


def build_metadata(**fields) -> ArticleMetadata:
    """Validate article metadata fields, raising InvalidMetadata instead of a pydantic error."""
    try:
        return ArticleMetadata(**fields)
    except ValidationError as e:
        raise InvalidMetadata(f"Invalid article metadata: {_validation_message(e)}") from e


def build_post(**fields) -> PostData:
    """Validate post fields, raising InvalidMetadata instead of a pydantic error."""
    try:
        return PostData(**fields)
    except ValidationError as e:
        raise InvalidMetadata(f"Invalid post: {_validation_message(e)}") from e


def list_visible(registry: Registry) -> List[ContentRecord]:
    """Records a feed should show: article roots and posts, never chunks."""
    return [record for record in registry.list_records() if is_visible(record)]
