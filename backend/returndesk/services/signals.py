from typing import Callable, List


class RefreshSignal:
    """
    "Something changed" notification between components.

    Forms emit after a successful write; lists subscribe and re-query on their
    own. Nobody but the list touches the list's rows.
    """

    def __init__(self):
        self._subscribers: List[Callable[[], None]] = []

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def emit(self) -> None:
        for callback in list(self._subscribers):
            callback()
