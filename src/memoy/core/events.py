"""
Synchronous publish/subscribe used by the session controller.

Listeners run in registration order on the emitting thread, so a front end
sees every view in the order the engine produced it.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, List, Optional

Listener = Callable[[str, Dict[str, Any]], None]


class EventBus:
    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def on(self, event_name: str, listener: Listener) -> None:
        self._listeners[event_name].append(listener)

    def off(self, event_name: str, listener: Listener) -> None:
        """Unsubscribe ``listener``; a listener that was never added is ignored."""
        listeners = self._listeners.get(event_name)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def emit(self, event_name: str, payload: Optional[Dict[str, Any]] = None) -> None:
        # Snapshot so a listener may unsubscribe itself while being notified.
        for listener in tuple(self._listeners.get(event_name, ())):
            listener(event_name, payload if payload is not None else {})
