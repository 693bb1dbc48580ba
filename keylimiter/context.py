"""Cancellable scopes used to bound the lifetime of background work."""

from __future__ import annotations

import threading


class CancelScope:
    """A cancellation handle that can be nested.

    Cancelling a scope cancels every child derived from it. A child derived
    from an already-cancelled scope starts out cancelled.
    """

    def __init__(self, parent: CancelScope | None = None) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._children: list[CancelScope] = []
        self._parent = parent
        if parent is not None:
            parent._attach(self)

    def _attach(self, child: CancelScope) -> None:
        with self._lock:
            if not self._event.is_set():
                self._children.append(child)
                return
        child.cancel()

    def _detach(self, child: CancelScope) -> None:
        with self._lock:
            if child in self._children:
                self._children.remove(child)

    def child(self) -> CancelScope:
        return CancelScope(parent=self)

    def cancel(self) -> None:
        """Cancel this scope and all of its descendants (idempotent)."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            children = self._children
            self._children = []
        for child in children:
            child.cancel()
        if self._parent is not None:
            self._parent._detach(self)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block up to *timeout* seconds; return True once the scope is cancelled."""
        return self._event.wait(timeout)
