"""Split content into segments for a root record followed by chunk records."""

from typing import List
from chainpress.size_policy import ROOT_TEXT_MAX, CHUNK_TEXT_MAX


def split_text(
    text: str,
    root_size: int = ROOT_TEXT_MAX,
    chunk_size: int = CHUNK_TEXT_MAX,
) -> List[str]:
    """
    Split text positionally into a root segment and chunk segments.

    Boundaries are plain character offsets and may fall mid-word; joining the
    segments gives back the original text exactly.

    Args:
        text: Full content.
        root_size: Maximum characters in the first (root) segment.
        chunk_size: Maximum characters in every following segment.

    Returns:
        Segments in reading order. Empty text gives a single empty segment.
    """
    if root_size <= 0 or chunk_size <= 0:
        raise ValueError("root_size and chunk_size must be positive")
    segments: List[str] = [text[:root_size]]
    start = root_size
    while start < len(text):
        segments.append(text[start:start + chunk_size])
        start += chunk_size
    return segments
