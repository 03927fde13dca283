"""Deletions that can be undone for a short grace period."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from evoshape.domain.errors import StorageError

_logger = logging.getLogger(__name__)


@dataclass
class _Pending:
    handle: asyncio.TimerHandle
    action: Callable[[], None]


@dataclass
class DeferredDeletions:
    """One cancellable, single-shot timer per pending deletion."""

    delay_seconds: float = 5.0
    _pending: dict[str, _Pending] = field(default_factory=dict)

    @property
    def immediate(self) -> bool:
        """True when deletions are applied at once with no grace period."""
        return self.delay_seconds <= 0

    def schedule(self, key: str, action: Callable[[], None]) -> None:
        """Run ``action`` after the delay unless undone; must run in a loop.

        With a zero delay the action runs immediately and its errors propagate.
        """
        self.undo(key)
        if self.immediate:
            action()
            return
        loop = asyncio.get_running_loop()
        handle = loop.call_later(self.delay_seconds, self._fire, key)
        self._pending[key] = _Pending(handle=handle, action=action)

    def undo(self, key: str) -> bool:
        """Cancel a pending deletion; return False when nothing was pending."""
        pending = self._pending.pop(key, None)
        if pending is None:
            return False
        pending.handle.cancel()
        return True

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def flush(self) -> None:
        """Apply every pending deletion now."""
        for key in list(self._pending):
            pending = self._pending[key]
            pending.handle.cancel()
            self._fire(key)

    def _fire(self, key: str) -> None:
        pending = self._pending.pop(key, None)
        if pending is None:
            return
        try:
            pending.action()
        except StorageError as exc:
            _logger.error("Deferred deletion failed: key=%s error=%s", key, exc.message)
