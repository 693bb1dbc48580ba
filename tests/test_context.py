"""Tests for cancel scopes."""

from __future__ import annotations

import threading
import time

from keylimiter.context import CancelScope


class TestCancelScope:
    def test_initially_active(self):
        scope = CancelScope()
        assert scope.cancelled is False
        assert scope.wait(0) is False

    def test_cancel_is_idempotent(self):
        scope = CancelScope()
        scope.cancel()
        scope.cancel()
        assert scope.cancelled is True
        assert scope.wait(0) is True

    def test_parent_cancels_children(self):
        parent = CancelScope()
        child = parent.child()
        grandchild = child.child()
        parent.cancel()
        assert child.cancelled
        assert grandchild.cancelled

    def test_child_does_not_cancel_parent(self):
        parent = CancelScope()
        child = parent.child()
        child.cancel()
        assert child.cancelled
        assert not parent.cancelled

    def test_child_of_cancelled_parent_starts_cancelled(self):
        parent = CancelScope()
        parent.cancel()
        assert parent.child().cancelled

    def test_cancelled_child_is_detached(self):
        parent = CancelScope()
        for _ in range(5):
            parent.child().cancel()
        assert parent._children == []

    def test_wait_wakes_on_cancel(self):
        scope = CancelScope()
        threading.Timer(0.05, scope.cancel).start()
        started = time.monotonic()
        assert scope.wait(5) is True
        assert time.monotonic() - started < 2
