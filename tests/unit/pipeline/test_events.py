"""
Unit tests for the post-commit requisition event queue.

Tests verify:
- ids reach the queue only after the creating transaction commits
- a rollback drops the pending id
- the consumer thread hands ids to the handler
"""
import threading
from unittest.mock import MagicMock

import pytest

from database.uow import talent_uow
from pipeline.events import RequisitionEventQueue


@pytest.fixture
def handler():
    return MagicMock()


@pytest.fixture
def events(handler):
    queue = RequisitionEventQueue(handler=handler, poll_timeout=0.05)
    yield queue
    queue.close()


@pytest.mark.db
class TestPublishAfterCommit:

    def test_not_queued_before_commit(self, database, events):
        with talent_uow() as repo:
            candidate = repo.candidates.create(full_name="Anyone")
            events.publish_after_commit(repo.db, candidate.id)
            assert events.pending_count() == 0

        assert events.pending_count() == 1

    def test_delivered_after_commit(self, database, events, handler):
        with talent_uow() as repo:
            events.publish_after_commit(repo.db, 42)

        assert events.drain() == 1
        handler.assert_called_once_with(42)

    def test_rollback_drops_event(self, database, events, handler):
        with pytest.raises(RuntimeError):
            with talent_uow() as repo:
                events.publish_after_commit(repo.db, 42)
                raise RuntimeError("ingest failed")

        assert events.pending_count() == 0
        assert events.drain() == 0
        handler.assert_not_called()

    def test_separate_sessions_do_not_share_pending_ids(self, database, events):
        with talent_uow() as first:
            events.publish_after_commit(first.db, 1)
            with talent_uow():
                pass
            assert events.pending_count() == 0

        assert events.pending_count() == 1

    def test_closed_queue_ignores_commits(self, database, handler):
        queue = RequisitionEventQueue(handler=handler)
        queue.close()

        with talent_uow() as repo:
            queue.publish_after_commit(repo.db, 7)

        assert queue.pending_count() == 0

    def test_handler_error_does_not_stop_delivery(self, database, events, handler):
        handler.side_effect = [RuntimeError("boom"), None]
        events.publish(1)
        events.publish(2)

        assert events.drain() == 2
        assert handler.call_count == 2


class TestConsumerThread:

    def test_consumer_hands_ids_to_handler(self):
        received = []
        done = threading.Event()

        def handle(requisition_id):
            received.append(requisition_id)
            if len(received) == 2:
                done.set()

        queue = RequisitionEventQueue(handler=handle, poll_timeout=0.05)
        try:
            queue.start()
            queue.publish(10)
            queue.publish(11)

            assert done.wait(timeout=5)
            assert received == [10, 11]
        finally:
            queue.close()

    def test_stop_is_idempotent(self):
        queue = RequisitionEventQueue(handler=MagicMock(), poll_timeout=0.05)
        queue.start()
        queue.stop(timeout=5)
        queue.stop(timeout=5)
        queue.close()
