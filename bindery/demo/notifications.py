"""Observer-style notifications kept in memory."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple


class NotifierInterface(ABC):
    """Observer notified of order events."""

    @abstractmethod
    def update(self, event: str, data: Dict[str, Any]) -> None:
        """Handle an event."""


class EmailNotifier(NotifierInterface):
    def __init__(self):
        self.sent: List[Tuple[str, Dict[str, Any]]] = []

    def update(self, event: str, data: Dict[str, Any]) -> None:
        self.sent.append((event, data))


class SmsNotifier(NotifierInterface):
    def __init__(self):
        self.sent: List[Tuple[str, Dict[str, Any]]] = []

    def update(self, event: str, data: Dict[str, Any]) -> None:
        # Only order confirmations go out by SMS
        if event == "order.paid":
            self.sent.append((event, data))


class NotificationCenter:
    """Subject that fans events out to attached notifiers."""

    def __init__(self):
        self._observers: List[NotifierInterface] = []

    def attach(self, observer: NotifierInterface) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def detach(self, observer: NotifierInterface) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def notify(self, event: str, data: Dict[str, Any]) -> None:
        for observer in list(self._observers):
            observer.update(event, data)

    @property
    def observer_count(self) -> int:
        return len(self._observers)
