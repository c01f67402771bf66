from typing import Generic, Iterator, TypeVar, Optional
import threading


T = TypeVar("T")


class SingleSlotQueue(Generic[T]):
    """Thread-safe, size=1, latest-wins queue. Consumers read the latest item."""

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._has_value = False
        self._value: Optional[T] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._condition:
            return self._closed

    def publish(self, item: T) -> bool:
        """Publish an item, overwriting any unread one. Returns False once the queue is closed."""
        with self._condition:
            if self._closed:
                return False
            self._value = item
            self._has_value = True
            self._condition.notify()
            return True

    def close(self) -> None:
        """Close the queue. An unread item can still be read once."""
        with self._condition:
            self._closed = True
            self._condition.notify_all()

    def get(self, timeout: Optional[float] = None) -> Optional[T]:
        """Blocks until a value is available or the queue is closed. Returns None on close."""
        with self._condition:
            ok = self._condition.wait_for(
                lambda: self._has_value or self._closed, timeout
            )
            if not ok:
                raise TimeoutError("queue get() timed out")
            if self._closed and not self._has_value:
                return None
            v = self._value
            self._value = None
            self._has_value = False
            return v

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self.get()
            if item is None:
                return
            yield item
