"""Process-wide runtime state: the hook registry and the model cache.

Created by ``init_runtime`` during application startup and released by
``shutdown_runtime``; request handlers reach it through ``get_runtime``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from core.cache import ModelCache
from core.config import settings
from core.config_models import CacheConfig
from core.hooks import HookRegistry
from db.events import InstalledListener, install_model_events, remove_model_events

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    hooks: HookRegistry
    cache: ModelCache
    listeners: list[InstalledListener] = field(default_factory=list)


_runtime: Runtime | None = None


def init_runtime(cache_config: CacheConfig | None = None) -> Runtime:
    """Create the runtime and wire ORM events to its hook registry (idempotent)."""
    global _runtime
    if _runtime is not None:
        return _runtime

    cfg = cache_config or settings.cache
    hooks = HookRegistry()
    cache = ModelCache(
        default_ttl=cfg.ttl_seconds,
        max_entries=cfg.max_entries,
        enabled=cfg.enabled,
    )
    _runtime = Runtime(hooks=hooks, cache=cache, listeners=install_model_events(hooks))
    logger.info(
        "Runtime initialized (cache enabled=%s, ttl=%ss, max_entries=%s)",
        cfg.enabled,
        cfg.ttl_seconds,
        cfg.max_entries,
    )
    return _runtime


def get_runtime() -> Runtime:
    if _runtime is None:
        raise RuntimeError("Runtime not initialized; call init_runtime() first")
    return _runtime


def shutdown_runtime() -> None:
    global _runtime
    if _runtime is None:
        return
    remove_model_events(_runtime.listeners)
    _runtime.hooks.clear()
    _runtime.cache.clear()
    _runtime = None
    logger.info("Runtime shut down")
