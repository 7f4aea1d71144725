"""Lifecycle hook registry.

Handlers subscribe to a (model, event) slot and are invoked synchronously with
the affected instance. Exceptions raised by a handler are logged and propagate
to the caller, so a failing ``save`` or ``delete`` handler aborts the operation.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from enum import Enum
import logging
from threading import RLock
from typing import Any

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class HookEvent(str, Enum):
    LOAD = "load"
    SAVE = "save"
    DELETE = "delete"


class HookHandle:
    """Returned by ``HookRegistry.subscribe``; removes the handler on ``unsubscribe``."""

    def __init__(self, registry: HookRegistry, model: type, event: HookEvent, handler: Handler) -> None:
        self._registry = registry
        self.model = model
        self.event = event
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._registry._remove(self)
            self.active = False

    def __repr__(self) -> str:
        name = getattr(self.handler, "__name__", repr(self.handler))
        return f"<HookHandle({self.model.__name__}.{self.event.value} -> {name}, active={self.active})>"


class HookRegistry:
    def __init__(self) -> None:
        self._handles: dict[tuple[type, HookEvent], list[HookHandle]] = defaultdict(list)
        self._lock = RLock()

    def subscribe(self, model: type, event: HookEvent | str, handler: Handler) -> HookHandle:
        event = HookEvent(event)
        handle = HookHandle(self, model, event, handler)
        with self._lock:
            self._handles[(model, event)].append(handle)
        logger.debug("Subscribed %r", handle)
        return handle

    def handlers(self, model: type, event: HookEvent | str) -> list[Handler]:
        with self._lock:
            return [h.handler for h in self._handles.get((model, HookEvent(event)), [])]

    def dispatch(self, model: type, event: HookEvent | str, instance: Any) -> None:
        event = HookEvent(event)
        for handler in self.handlers(model, event):
            try:
                handler(instance)
            except Exception as e:
                logger.error(
                    "Hook %s failed on %s.%s for %r: %s",
                    getattr(handler, "__name__", handler),
                    model.__name__,
                    event.value,
                    instance,
                    e,
                )
                raise

    def clear(self) -> None:
        with self._lock:
            for handles in self._handles.values():
                for handle in handles:
                    handle.active = False
            self._handles.clear()

    def _remove(self, handle: HookHandle) -> None:
        with self._lock:
            handles = self._handles.get((handle.model, handle.event), [])
            if handle in handles:
                handles.remove(handle)
                logger.debug("Unsubscribed %r", handle)
