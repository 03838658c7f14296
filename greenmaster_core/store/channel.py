# =============================================================================
# greenmaster_core/store/channel.py
# Typed publish/subscribe channel with replay of the latest value
# =============================================================================

from __future__ import annotations

import logging
import threading
import weakref
from typing import Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Unsubscribe = Callable[[], None]


class CollectionChannel(Generic[T]):
    """
    Broadcast channel for one collection.

    ``subscribe`` registers a callback and synchronously hands it the latest
    published value (if any). ``publish`` is the only way the cached value
    changes. A publish that happens while callbacks of an earlier publish are
    still running supersedes it: the remaining callbacks only see the newer
    value.
    """

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.RLock()
        self._subscribers: Dict[int, Callable[[T], None]] = {}
        self._next_token = 0
        self._version = 0
        self._value: Optional[T] = None
        self._has_value = False

    @property
    def has_value(self) -> bool:
        return self._has_value

    @property
    def latest(self) -> Optional[T]:
        return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, value: T) -> None:
        with self._lock:
            self._version += 1
            version = self._version
            self._value = value
            self._has_value = True
            for callback in list(self._subscribers.values()):
                if self._version != version:
                    break
                callback(value)

    def subscribe(self, callback: Callable[[T], None], weak: bool = False) -> Unsubscribe:
        """Register ``callback``; with ``weak=True`` only a weak reference to the
        bound method is kept and the subscription ends when its owner is collected."""
        with self._lock:
            token = self._next_token
            self._next_token += 1
            if weak:
                callback = self._weak_callback(token, weakref.WeakMethod(callback))
            self._subscribers[token] = callback
            if self._has_value:
                callback(self._value)

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(token, None)

        return unsubscribe

    def _weak_callback(self, token: int, ref: weakref.WeakMethod) -> Callable[[T], None]:
        def deliver(value: T) -> None:
            target = ref()
            if target is None:
                with self._lock:
                    self._subscribers.pop(token, None)
                logger.debug(f"{self.name}: dropped subscriber {token} (owner collected)")
                return
            target(value)

        return deliver
