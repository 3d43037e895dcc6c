"""Tests for reverse-order chain construction."""

import threading

import pytest

from chainpress.chain_reader import reassemble
from chainpress.chain_writer import ChainWriter
from chainpress.chunking import split_text
from chainpress.errors import RegistryWriteFailed, PublishCancelled
from chainpress.models.record import RecordKind
from chainpress.registry.memory_registry import InMemoryRegistry
from tests.helpers import make_text, FailingRegistry, RecordingRegistry


class TestChainWriter:
    """Writes last segment first so every next reference already exists."""

    def test_single_segment_writes_root_only(self, registry):
        result = ChainWriter(registry).write(["short"], {"title": "T"})
        assert result.records == 1
        assert result.cost == 1
        root = registry.get(result.root_address)
        assert root.kind == RecordKind.ROOT
        assert root.text == "short"
        assert root.next == ""
        assert root.metadata == {"title": "T"}
        assert len(registry) == 1

    def test_write_order_is_reverse_of_reading_order(self):
        registry = RecordingRegistry()
        ChainWriter(registry).write(["a", "b", "c", "d"])
        assert [r.text for r in registry.created] == ["d", "c", "b", "a"]
        assert [r.kind for r in registry.created] == [
            RecordKind.CHUNK, RecordKind.CHUNK, RecordKind.CHUNK, RecordKind.ROOT,
        ]

    def test_each_next_points_at_previously_written_record(self):
        registry = RecordingRegistry()
        ChainWriter(registry).write(["a", "b", "c"])
        last, middle, root = registry.created
        assert last.next == ""
        assert middle.next == last.address
        assert root.next == middle.address

    def test_result_addresses_in_reading_order(self, registry):
        result = ChainWriter(registry).write(["a", "b", "c"])
        assert result.addresses[0] == result.root_address
        assert [registry.get(a).text for a in result.addresses] == ["a", "b", "c"]
        assert result.chunk_addresses == result.addresses[1:]

    def test_progress_reports_every_write(self, registry):
        calls = []
        ChainWriter(registry).write(["a", "b", "c"], on_progress=lambda done, total: calls.append((done, total)))
        assert calls == [(1, 3), (2, 3), (3, 3)]

    def test_failing_progress_callback_does_not_stop_the_chain(self, registry):
        calls = []

        def on_progress(done, total):
            calls.append(done)
            raise RuntimeError("display closed")

        result = ChainWriter(registry).write(["a", "b", "c"], on_progress=on_progress)
        assert calls == [1, 2, 3]
        assert len(registry) == 3
        assert reassemble(registry.get(result.root_address), registry) == "abc"

    def test_round_trip_5000_characters(self, registry):
        text = make_text(5000)
        result = ChainWriter(registry).write(split_text(text))
        assert result.records == 8
        assert len(registry) == 8
        assert reassemble(registry.get(result.root_address), registry) == text

    def test_no_segments_rejected(self, registry):
        with pytest.raises(ValueError):
            ChainWriter(registry).write([])


class TestChainWriterFailures:
    """A failed or cancelled write leaves orphans but never a root."""

    def test_failure_on_first_step(self):
        registry = FailingRegistry(fail_on_call=1)
        with pytest.raises(RegistryWriteFailed) as exc_info:
            ChainWriter(registry).write(["a", "b", "c"])
        error = exc_info.value
        assert error.step == 1
        assert error.segment_index == 2
        assert error.committed == 0
        assert error.total == 3
        assert error.orphans == []
        assert len(registry) == 0

    def test_failure_midway_leaves_orphans_and_no_root(self):
        registry = FailingRegistry(fail_on_call=3)
        progress = []
        with pytest.raises(RegistryWriteFailed) as exc_info:
            ChainWriter(registry).write(
                ["a", "b", "c", "d"], {"title": "Lost"},
                on_progress=lambda done, total: progress.append(done),
            )
        error = exc_info.value
        assert error.step == 3
        assert error.segment_index == 1
        assert error.committed == 2
        assert error.orphans == registry.addresses()
        assert "2 of 4 records published" in str(error)
        assert progress == [1, 2]
        assert registry.list_records(RecordKind.ROOT) == []
        assert all(r.metadata.get("title") != "Lost" for r in registry.list_records())

    def test_failure_on_root_write(self):
        registry = FailingRegistry(fail_on_call=3)
        with pytest.raises(RegistryWriteFailed) as exc_info:
            ChainWriter(registry).write(["a", "b", "c"])
        assert exc_info.value.segment_index == 0
        assert exc_info.value.committed == 2
        assert registry.list_records(RecordKind.ROOT) == []
        assert len(registry.list_records(RecordKind.CHUNK)) == 2

    def test_cancel_between_writes(self, registry):
        cancel = threading.Event()

        def on_progress(done, total):
            if done == 2:
                cancel.set()

        with pytest.raises(PublishCancelled) as exc_info:
            ChainWriter(registry).write(["a", "b", "c", "d"], on_progress=on_progress, cancel_event=cancel)
        error = exc_info.value
        assert isinstance(error, RegistryWriteFailed)
        assert error.committed == 2
        assert error.step == 3
        assert len(registry) == 2
        assert registry.list_records(RecordKind.ROOT) == []

    def test_cancel_before_start_writes_nothing(self):
        registry = InMemoryRegistry()
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(PublishCancelled):
            ChainWriter(registry).write(["only"], cancel_event=cancel)
        assert registry.create_calls == 0
