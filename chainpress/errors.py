"""Exception hierarchy for chain publishing and reading."""

from typing import Any, Dict, List, Optional


class ChainpressError(Exception):
    """Base exception for all chainpress errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ContentTooLarge(ChainpressError):
    """Raised when content exceeds the maximum accepted length, before any write."""

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(
            f"Content too long: {length} characters (maximum {limit})",
            {"length": length, "limit": limit},
        )


class InvalidMetadata(ChainpressError):
    """Raised when article metadata or post fields fail validation."""


class PublishDeclined(ChainpressError):
    """Raised when the confirmation prompt is declined; nothing was written."""


class RegistryError(ChainpressError):
    """Raised by registry backends when a create, get or list call fails."""


class RegistryWriteFailed(ChainpressError):
    """
    A create call failed partway through writing a chain.

    Records written before the failure stay in the registry as orphans;
    their addresses are kept in ``orphans`` (write order).
    """

    def __init__(
        self,
        step: int,
        segment_index: int,
        committed: int,
        total: int,
        orphans: Optional[List[str]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.step = step
        self.segment_index = segment_index
        self.committed = committed
        self.total = total
        self.orphans = list(orphans or [])
        self.cause = cause
        message = f"Write step {step} failed: {committed} of {total} records published"
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(
            message,
            {
                "step": step,
                "segment_index": segment_index,
                "committed": committed,
                "total": total,
            },
        )


class PublishCancelled(RegistryWriteFailed):
    """The caller abandoned a chain write between two record writes."""

    def __init__(
        self,
        step: int,
        segment_index: int,
        committed: int,
        total: int,
        orphans: Optional[List[str]] = None,
    ):
        super().__init__(step, segment_index, committed, total, orphans)
        self.message = f"Publish cancelled before step {step}: {committed} of {total} records published"
        self.args = (self.message,)


class RegistryReadFailed(ChainpressError):
    """A get call failed during reassembly. Recovered by truncating the text."""

    def __init__(self, address: str, cause: Optional[BaseException] = None):
        self.address = address
        self.cause = cause
        super().__init__(f"Could not read record {address}: {cause}", {"address": address})


class MalformedChain(ChainpressError):
    """A record reached through ``next`` is not a well-formed chunk."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Malformed chain at {address}: {reason}", {"address": address})
