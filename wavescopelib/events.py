from __future__ import annotations

from typing import Any, Callable

# Notifications published by the visualizer to its host.
ERROR = "error"          # message: str
LOADED = "loaded"        # samples: SampleBuffer
CLEARED = "cleared"
PLAYING = "playing"      # is_playing: bool
MODE = "mode"            # mode: VisualizationMode
SEEKED = "seeked"        # time: float


class EventBus:
    """Minimal publish/subscribe hub for visualizer notifications.

    Used only from the UI thread; handlers run synchronously in
    subscription order.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Callable[..., Any]]] = {}

    def subscribe(self, event_type: str,
                  handler: Callable[..., Any]) -> Callable[[], None]:
        """Register *handler* and return a callable that removes it."""
        self._handlers.setdefault(event_type, []).append(handler)

        def _unsubscribe() -> None:
            self.unsubscribe(event_type, handler)

        return _unsubscribe

    def unsubscribe(self, event_type: str, handler: Callable[..., Any]) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_type: str, **data: Any) -> None:
        for handler in list(self._handlers.get(event_type, [])):
            handler(**data)

    def clear(self) -> None:
        self._handlers.clear()
