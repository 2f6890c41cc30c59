# SPDX-License-Identifier: MIT
# Copyright (c) 2025 log-relay contributors

"""Dispatch scheduler decoupling emitting threads from appender I/O.

Each appender instance gets its own FIFO queue and worker thread. dispatch()
renders the event once on the caller's thread, enqueues it for every target
appender and returns; it never waits on an appender. Because one worker
serves one appender, events reach a given appender in the order they were
dispatched, while a slow or failing appender holds up only its own queue.
"""

import logging
import queue
import threading
import time
import weakref
from collections.abc import Iterable

from .appender import Appender
from .diagnostics import ConsoleDiagnosticReporter, DiagnosticReporter
from .event import LogEvent, RenderedEvent
from .exceptions import RenderError
from .layouts import LayoutFunction, basic_layout

logger = logging.getLogger(__name__)

_STOP = object()


class _AppenderWorker:
    """Worker thread draining one appender's queue."""

    def __init__(self, appender: Appender, scheduler: "DispatchScheduler"):
        self.appender = appender
        self.scheduler = scheduler
        self.queue: queue.Queue = queue.Queue()
        self.thread = threading.Thread(
            target=self._run,
            name=f"log-relay-{type(appender).__name__}",
            daemon=True,
        )
        self.thread.start()

    def submit(self, rendered: RenderedEvent) -> None:
        self.queue.put(rendered)

    def _run(self) -> None:
        while True:
            item = self.queue.get()
            try:
                if item is _STOP:
                    return
                self._deliver(item)
            finally:
                self.queue.task_done()

    def _deliver(self, rendered: RenderedEvent) -> None:
        try:
            self.appender.invoke(rendered)
        except Exception as e:
            self.scheduler.reporter.report(e, context={
                "appender": type(self.appender).__name__,
                "category": rendered.event.category,
                "level": rendered.event.level.name,
            })

    def wait_idle(self, deadline: float | None) -> bool:
        """Block until every queued item is processed or the deadline passes."""
        with self.queue.all_tasks_done:
            while self.queue.unfinished_tasks:
                if deadline is None:
                    self.queue.all_tasks_done.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self.queue.all_tasks_done.wait(remaining)
        return True

    def stop(self, deadline: float | None) -> None:
        self.queue.put(_STOP)
        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        self.thread.join(remaining)


class DispatchScheduler:
    """Renders events and fans them out to appender workers."""

    def __init__(
        self,
        layout: LayoutFunction = basic_layout,
        reporter: DiagnosticReporter | None = None,
    ):
        """Initialize dispatch scheduler.

        Args:
            layout: Scheduler-level layout shared by appenders without their own
            reporter: Diagnostic side-channel (defaults to console diagnostics)
        """
        self.layout = layout
        self.reporter = reporter or ConsoleDiagnosticReporter()
        self._workers: dict[int, _AppenderWorker] = {}
        self._lock = threading.Lock()
        self._closed = False
        # id(appender) -> weak reference, for appenders retired by reconfiguration
        self._retired: dict[int, weakref.ref] = {}

    def _is_retired(self, appender: Appender) -> bool:
        # Caller holds _lock.
        ref = self._retired.get(id(appender))
        return ref is not None and ref() is appender

    def _worker_for(self, appender: Appender) -> _AppenderWorker | None:
        key = id(appender)
        worker = self._workers.get(key)
        if worker is not None and worker.appender is appender:
            return worker
        with self._lock:
            if self._closed or self._is_retired(appender):
                return None
            worker = self._workers.get(key)
            if worker is None or worker.appender is not appender:
                worker = _AppenderWorker(appender, self)
                self._workers[key] = worker
            return worker

    def render(self, event: LogEvent) -> str | None:
        """Render an event with the scheduler layout.

        Returns:
            Rendered text, or None if the layout failed (the failure is reported)
        """
        try:
            return self.layout(event)
        except Exception as e:
            self.reporter.report(
                RenderError(f"Layout failed for category {event.category}: {e}"),
                context={"category": event.category, "level": event.level.name},
            )
            return None

    def dispatch(self, event: LogEvent, appenders: Iterable[Appender]) -> None:
        """Hand an event to each appender's worker without waiting.

        Args:
            event: The accepted event
            appenders: Resolved appenders in delivery order
        """
        targets = tuple(appenders)
        if not targets:
            return
        if self._closed:
            self.reporter.capture_message(
                "Event dropped after scheduler shutdown",
                level="warning",
                context={"category": event.category},
            )
            return

        # Render lazily: skip the shared layout when every target has its own.
        text = None
        if any(appender.layout is None for appender in targets):
            text = self.render(event)
        rendered = RenderedEvent(event=event, text=text)

        for appender in targets:
            if text is None and appender.layout is None:
                # Render failure already reported once for this event.
                continue
            worker = self._worker_for(appender)
            if worker is not None:
                worker.submit(rendered)

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until every queued event has been delivered.

        Args:
            timeout: Maximum seconds to wait, or None to wait indefinitely

        Returns:
            True if all queues drained before the timeout
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._lock:
            workers = list(self._workers.values())
        return all(worker.wait_idle(deadline) for worker in workers)

    def shutdown(self, timeout: float | None = 5.0, appenders: Iterable[Appender] = ()) -> bool:
        """Drain pending deliveries, stop the workers and close the appenders.

        Deliveries still running when the timeout expires are abandoned.

        Args:
            timeout: Maximum seconds to wait for queues to drain
            appenders: Additional appenders to close that may never have
                received an event

        Returns:
            True if every queue drained before the timeout
        """
        with self._lock:
            if self._closed:
                return True
            self._closed = True
            workers = list(self._workers.values())
            self._workers.clear()

        drained = self._stop_and_close(workers, appenders, timeout)
        if not drained:
            logger.warning("Scheduler shutdown abandoned undelivered events")
        return drained

    def retire(self, appenders: Iterable[Appender], timeout: float | None = 5.0) -> bool:
        """Stop delivering to appenders dropped by a reconfiguration.

        Queued events are delivered first, then each worker thread is stopped
        and the appender closed. Events dispatched to a retired appender
        afterwards are dropped until reinstate() is called for it.

        Args:
            appenders: Appenders no longer referenced by the registry
            timeout: Maximum seconds to wait for their queues to drain

        Returns:
            True if every retired queue drained before the timeout
        """
        targets = list(appenders)
        if not targets:
            return True
        workers = []
        with self._lock:
            for appender in targets:
                key = id(appender)
                self._retired[key] = weakref.ref(
                    appender, lambda _, key=key: self._retired.pop(key, None)
                )
                worker = self._workers.get(key)
                if worker is not None and worker.appender is appender:
                    del self._workers[key]
                    workers.append(worker)

        drained = self._stop_and_close(workers, targets, timeout)
        if not drained:
            logger.warning(f"Retired {len(targets)} appender(s) with undelivered events")
        return drained

    def reinstate(self, appender: Appender) -> None:
        """Allow a previously retired appender to receive events again."""
        with self._lock:
            if self._is_retired(appender):
                del self._retired[id(appender)]

    def _stop_and_close(
        self,
        workers: list[_AppenderWorker],
        appenders: Iterable[Appender],
        timeout: float | None,
    ) -> bool:
        deadline = None if timeout is None else time.monotonic() + timeout
        drained = all([worker.wait_idle(deadline) for worker in workers])
        to_close = []
        for worker in workers:
            worker.stop(deadline)
            to_close.append(worker.appender)
        for appender in appenders:
            if all(appender is not c for c in to_close):
                to_close.append(appender)
        for appender in to_close:
            try:
                appender.close()
            except Exception as e:
                self.reporter.report(e, context={"appender": type(appender).__name__, "phase": "close"})
        return drained

    @property
    def closed(self) -> bool:
        return self._closed
