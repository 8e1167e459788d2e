"""
Post-commit "requisition ingested" signal.

The ingestion unit of work registers the new requisition id on its Session;
the id is handed to the in-process queue only from the Session's
``after_commit`` hook, so the consumer can never read the requisition
before the row that created it is durable. A rollback discards the id.

Usage:
    events = RequisitionEventQueue(handler=orchestrator.handle_requisition_ingested)
    events.start()

    with talent_uow() as repo:
        requisition = repo.requisitions.create(...)
        events.publish_after_commit(repo.db, requisition.id)
    # delivered here, after commit
"""
import logging
import queue
import threading
from typing import Callable, Optional

from sqlalchemy import event
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_STOP = object()


class RequisitionEventQueue:
    """In-process queue of committed requisition ids with a consumer thread."""

    def __init__(self, handler: Callable[[int], object], poll_timeout: float = 0.5):
        self.handler = handler
        self.poll_timeout = poll_timeout
        self._queue: "queue.Queue" = queue.Queue()
        self._info_key = f"pending_requisition_events_{id(self)}"
        self._thread: Optional[threading.Thread] = None
        self._stopped = threading.Event()

        event.listen(Session, "after_commit", self._on_commit)
        event.listen(Session, "after_rollback", self._on_rollback)

    # --- Producer side ---

    def publish_after_commit(self, session: Session, requisition_id: int) -> None:
        """Deliver requisition_id once ``session`` commits its transaction."""
        session.info.setdefault(self._info_key, []).append(requisition_id)
        logger.debug(f"Requisition {requisition_id} registered for post-commit delivery")

    def publish(self, requisition_id: int) -> None:
        """Enqueue an id whose row is already committed (e.g. manual re-trigger)."""
        self._queue.put(requisition_id)

    def _on_commit(self, session: Session) -> None:
        pending = session.info.pop(self._info_key, None)
        if not pending:
            return
        for requisition_id in pending:
            logger.info(f"Requisition {requisition_id} committed; queued for matching")
            self._queue.put(requisition_id)

    def _on_rollback(self, session: Session) -> None:
        dropped = session.info.pop(self._info_key, None)
        if dropped:
            logger.warning(f"Transaction rolled back; dropped requisition events {dropped}")

    # --- Consumer side ---

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stopped.clear()
        self._thread = threading.Thread(
            target=self._consume,
            name="requisition-events",
            daemon=True
        )
        self._thread.start()
        logger.info("Requisition event consumer started")

    def _consume(self) -> None:
        while not self._stopped.is_set():
            try:
                item = self._queue.get(timeout=self.poll_timeout)
            except queue.Empty:
                continue
            try:
                if item is _STOP:
                    return
                self.deliver(item)
            finally:
                self._queue.task_done()

    def deliver(self, requisition_id: int) -> None:
        try:
            self.handler(requisition_id)
        except Exception:
            logger.exception(f"Handler failed for requisition {requisition_id}")

    def drain(self) -> int:
        """Deliver everything queued on the calling thread. Returns the count."""
        delivered = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return delivered
            try:
                if item is not _STOP:
                    self.deliver(item)
                    delivered += 1
            finally:
                self._queue.task_done()

    def pending_count(self) -> int:
        return self._queue.qsize()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the consumer after it finishes what is already queued."""
        if self._thread is not None:
            self._queue.put(_STOP)
            self._thread.join(timeout)
            self._thread = None
        self._stopped.set()

    def close(self) -> None:
        self.stop()
        event.remove(Session, "after_commit", self._on_commit)
        event.remove(Session, "after_rollback", self._on_rollback)
