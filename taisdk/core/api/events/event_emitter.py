"""
Transfer lifecycle events.

Handlers are plain callables invoked synchronously, in registration order,
from the task that raises the event.
"""
from collections import defaultdict
from typing import Callable, DefaultDict, List, Optional

UPLOAD_START = 'upload_start'
CHUNK_UPLOADED = 'chunk_uploaded'
UPLOAD_COMPLETE = 'upload_complete'
RETRY = 'retry'
ERROR = 'error'


class EventEmitter:
    """Observer registry shared by the store client and the transfer engine."""

    def __init__(self):
        self._handlers: DefaultDict[str, List[Callable]] = defaultdict(list)

    def on(self, event: str, callback: Callable) -> 'EventEmitter':
        """Subscribe callback to event."""
        self._handlers[event].append(callback)
        return self

    def once(self, event: str, callback: Callable) -> 'EventEmitter':
        """Subscribe callback for the next emission only."""
        def wrapper(*args, **kwargs):
            self.off(event, wrapper)
            callback(*args, **kwargs)
        return self.on(event, wrapper)

    def emit(self, event: str, *args, **kwargs) -> None:
        # Snapshot so handlers may unsubscribe while running
        for callback in tuple(self._handlers.get(event, ())):
            callback(*args, **kwargs)

    def off(self, event: str, callback: Optional[Callable] = None) -> 'EventEmitter':
        """Unsubscribe callback, or every handler of event when callback is None."""
        if callback is None:
            self._handlers.pop(event, None)
        elif event in self._handlers:
            remaining = [cb for cb in self._handlers[event] if cb != callback]
            if remaining:
                self._handlers[event] = remaining
            else:
                del self._handlers[event]
        return self

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))
