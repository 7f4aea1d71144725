from collections.abc import Callable
import logging
from typing import Any

from sqlalchemy import event

from core.hooks import HookEvent, HookRegistry
from db.models.post import Post

logger = logging.getLogger(__name__)

# Models whose ORM "load" event is forwarded to the hook registry
HOOKED_MODELS: tuple[type, ...] = (Post,)

InstalledListener = tuple[type, str, Callable[..., Any]]


def _forward_load(hooks: HookRegistry, model: type) -> Callable[[Any, Any], None]:
    def _on_load(target, _context) -> None:
        hooks.dispatch(model, HookEvent.LOAD, target)

    return _on_load


def install_model_events(hooks: HookRegistry) -> list[InstalledListener]:
    """Forward ORM materialization of hooked models to ``HookEvent.LOAD`` handlers."""
    installed: list[InstalledListener] = []
    for model in HOOKED_MODELS:
        _on_load = _forward_load(hooks, model)
        event.listen(model, "load", _on_load)
        installed.append((model, "load", _on_load))

    logger.debug("Installed load listeners for %d models", len(installed))
    return installed


def remove_model_events(installed: list[InstalledListener]) -> None:
    for model, name, fn in installed:
        if event.contains(model, name, fn):
            event.remove(model, name, fn)
    installed.clear()
