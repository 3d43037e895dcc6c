"""Publish long-form content as forward-linked chains of size-bounded registry records."""

from chainpress.size_policy import estimate_cost
from chainpress.chunking import split_text
from chainpress.chain_writer import ChainWriter
from chainpress.chain_reader import reassemble, read_chain
from chainpress.classifier import classify
from chainpress.publisher import ArticlePublisher, publish

__version__ = "0.1.0"

__all__ = [
    "estimate_cost",
    "split_text",
    "ChainWriter",
    "reassemble",
    "read_chain",
    "classify",
    "ArticlePublisher",
    "publish",
]
