import threading


class RequestCounter:
    """Process-wide tally of handled requests.

    Each increment returns the value it produced, so concurrent callers
    always see distinct numbers.
    """

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value
