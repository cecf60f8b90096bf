import logging
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

CHECKBOX_SUFFIX = "Checkbox"


class HandlerRegistry:
    """Named callables that action cells refer to by ``handler_name``."""

    def __init__(self, handlers: Optional[Dict[str, Callable]] = None):
        self._handlers: Dict[str, Callable] = {}
        for name, fn in (handlers or {}).items():
            self.register(name, fn)

    def register(self, name: str, fn: Callable) -> Callable:
        if not callable(fn):
            raise TypeError(f"Handler '{name}' is not callable")
        self._handlers[name] = fn
        return fn

    def handler(self, name: Optional[str] = None):
        """Decorator form of :meth:`register`, defaulting to the function name."""

        def _decorate(fn):
            return self.register(name or fn.__name__, fn)

        return _decorate

    def unregister(self, name: str) -> None:
        self._handlers.pop(name, None)

    def resolve(self, name: Optional[str]) -> Optional[Callable]:
        if not name:
            return None
        return self._handlers.get(name)

    def invoke(self, name, row, row_index, checkbox_state=None) -> bool:
        fn = self.resolve(name)
        if fn is None:
            logger.warning("Function %s not found in handler registry", name)
            return False
        try:
            if checkbox_state is not None:
                fn(row, row_index, checkbox_state)
            else:
                fn(row, row_index)
        except Exception:
            logger.exception("Error in handler %s for row %s", name, row_index)
            return False
        return True

    def __contains__(self, name) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    @property
    def names(self) -> list[str]:
        return sorted(self._handlers)
