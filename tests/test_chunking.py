"""Tests for positional content splitting."""

import pytest

from chainpress.chunking import split_text
from chainpress.size_policy import ROOT_TEXT_MAX, CHUNK_TEXT_MAX, estimate_cost
from tests.helpers import make_text


class TestSplitText:
    """Root segment first, chunk segments after, nothing lost or reordered."""

    def test_empty_text_is_single_empty_segment(self):
        assert split_text("") == [""]

    def test_short_text_is_single_segment(self):
        assert split_text("hello") == ["hello"]

    def test_exactly_root_budget(self):
        text = make_text(ROOT_TEXT_MAX)
        assert split_text(text) == [text]

    def test_one_over_root_budget(self):
        text = make_text(ROOT_TEXT_MAX + 1)
        segments = split_text(text)
        assert len(segments) == 2
        assert len(segments[0]) == ROOT_TEXT_MAX
        assert segments[1] == text[-1]

    def test_segment_sizes(self):
        text = make_text(5000)
        segments = split_text(text)
        assert len(segments) == 8
        assert len(segments[0]) == ROOT_TEXT_MAX
        assert all(len(s) == CHUNK_TEXT_MAX for s in segments[1:-1])
        assert len(segments[-1]) == (5000 - ROOT_TEXT_MAX) - 6 * CHUNK_TEXT_MAX

    @pytest.mark.parametrize(
        "length",
        [0, 1, ROOT_TEXT_MAX - 1, ROOT_TEXT_MAX, ROOT_TEXT_MAX + 1,
         ROOT_TEXT_MAX + CHUNK_TEXT_MAX, ROOT_TEXT_MAX + CHUNK_TEXT_MAX + 1, 5000, 12345],
    )
    def test_count_matches_estimate_and_join_restores_text(self, length):
        text = make_text(length)
        segments = split_text(text)
        assert len(segments) == estimate_cost(length)
        assert "".join(segments) == text

    def test_boundaries_may_split_words(self):
        text = "word " * 100
        segments = split_text(text, root_size=7, chunk_size=7)
        assert segments[0] == "word wo"
        assert segments[1] == "rd word"
        assert "".join(segments) == text

    def test_deterministic(self):
        text = make_text(3000, offset=3)
        assert split_text(text) == split_text(text)

    def test_non_ascii_text_round_trips(self):
        text = "Grüße, 世界! " * 80
        segments = split_text(text)
        assert "".join(segments) == text
        assert len(segments[0]) == ROOT_TEXT_MAX

    def test_invalid_budgets(self):
        with pytest.raises(ValueError):
            split_text("abc", root_size=0)
        with pytest.raises(ValueError):
            split_text("abc", chunk_size=-1)
