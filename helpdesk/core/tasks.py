# helpdesk/core/tasks.py
import logging
from typing import Any, Callable

log = logging.getLogger(__name__)


def fire_and_forget(operation: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    """Run a best-effort secondary write.

    Contract: never raises. Any exception from ``operation`` is logged and
    dropped, and the caller cannot observe whether it succeeded.
    """
    name = getattr(operation, "__qualname__", repr(operation))
    try:
        operation(*args, **kwargs)
    except Exception:
        log.warning("Best-effort operation %s failed", name, exc_info=True)


__all__ = ["fire_and_forget"]
