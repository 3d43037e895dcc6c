"""Record size budgets and the record-count (cost) formula for chained content."""

from chainpress.errors import ContentTooLarge

# Character budgets sized for a 1KB registry record. The root record carries
# the article metadata fields, so it gets less text than a chunk record.
ROOT_TEXT_MAX = 384
CHUNK_TEXT_MAX = 768

MAX_ARTICLE_CHARS = 5000
MAX_POST_CHARS = 512

# One registry create per record.
COST_PER_RECORD = 1


def estimate_cost(
    content_length: int,
    root_size: int = ROOT_TEXT_MAX,
    chunk_size: int = CHUNK_TEXT_MAX,
) -> int:
    """
    Return the number of records needed to store content of the given length.

    Computed from the length alone, without splitting or writing anything.

    Args:
        content_length: Character count of the full content.
        root_size: Text budget of the root record.
        chunk_size: Text budget of each continuation record.

    Returns:
        Record count, always at least 1 (empty content still needs a root).
    """
    if content_length < 0:
        raise ValueError(f"content_length must be >= 0, got {content_length}")
    if content_length <= root_size:
        return 1
    return 1 + (content_length - root_size + chunk_size - 1) // chunk_size


def estimate_price(content_length: int) -> int:
    """Registry cost in units for publishing content of this length."""
    return estimate_cost(content_length) * COST_PER_RECORD


def check_article_length(content_length: int, limit: int = MAX_ARTICLE_CHARS) -> None:
    """Raise ContentTooLarge if the content exceeds the article limit."""
    if content_length > limit:
        raise ContentTooLarge(content_length, limit)
