"""
Queue — thread-safe, indexable FIFO with a blocking dequeue.

Unlike queue.Queue, elements stay addressable while they wait: callers can
read them by index, search them, remove them, swap them and move them to
either end. Producers append with enqueue(); consumers pop with dequeue()
or block in dequeue_or_wait_for_next_element().

Listener handoff
----------------
A consumer that finds the queue empty registers a one-shot listener in a
bounded FIFO (max_listeners, default 1000). enqueue() offers its value to
pending listeners before touching the items:

  Producer: enqueue(v) ── pop listener ── offer(v) accepted? ── yes → done
                              │                              └─ no  → next listener
                              └─ none left → append v to items

An offer never blocks: a listener whose waiter already left refuses it and
the producer moves on. A value handed to a listener never enters the items.

Register-vs-enqueue race
------------------------
Registering a listener and checking for listeners are independent steps, so
a producer can look, see no listener, and append just before the consumer
registers. After registering, the consumer polls: iteration i waits up to
i ms for a handoff, then checks the items. After POLL_ITERATIONS rounds the
wait settles at POLL_ITERATIONS ms per round, so an element stranded by
that race is always picked up.

Locking
-------
One ReadWriteLock guards the items. Mutations and dequeues take the write
side; lookups take the read side. Predicates passed to find() run under the
read lock; exceptions they raise propagate and the lock is released.

Element identity
----------------
remove(), swap(), move_to_front(), move_to_back() and find_one() compare
with ``==`` and act on the first match. Use hashable/immutable values or
objects with a meaningful __eq__.
"""
from __future__ import annotations

import contextlib
import dataclasses
import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable
from typing import Any

from gzkit.core.rwlock import ReadWriteLock
from gzkit.domain.errors import (
    IDNotFoundError,
    IndexOutOfBoundsError,
    MoveIndexBackPositionError,
    MoveIndexFrontPositionError,
    QueueEmptyError,
    SwapIndexesMatchError,
    TooManyListenersError,
)

logger = logging.getLogger(__name__)

MAX_LISTENERS: int = 1000
POLL_ITERATIONS: int = 10

Criteria = Callable[[Any], bool]


class _Listener:
    """One-shot rendezvous slot. Accepts at most one value, and none once closed."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._taken = False
        self._closed = False
        self.value: Any = None

    def offer(self, value: Any) -> bool:
        """Non-blocking handoff. Returns False if the slot is taken or closed."""
        with self._lock:
            if self._taken or self._closed:
                return False
            self.value = value
            self._taken = True
        self._event.set()
        return True

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)

    def close(self) -> bool:
        """Refuse further offers. Returns True if a value arrived first."""
        with self._lock:
            self._closed = True
            return self._taken


@dataclasses.dataclass
class Queue:
    """
    Thread-safe FIFO with index access and reorder operations.

    Parameters
    ----------
    max_listeners : how many consumers may wait in
                    dequeue_or_wait_for_next_element() at the same time
    """

    max_listeners: int = MAX_LISTENERS

    _items: list[Any] = dataclasses.field(
        default_factory=list, init=False, repr=False
    )
    _capacity: int = dataclasses.field(default=0, init=False, repr=False)
    _lock: ReadWriteLock = dataclasses.field(
        default_factory=ReadWriteLock, init=False, repr=False
    )
    _listeners: deque[_Listener] = dataclasses.field(
        default_factory=deque, init=False, repr=False
    )
    _listeners_lock: threading.Lock = dataclasses.field(
        default_factory=threading.Lock, init=False, repr=False
    )

    # ------------------------------------------------------------------ #
    # Enqueue / dequeue                                                    #
    # ------------------------------------------------------------------ #

    def enqueue(self, value: Any) -> None:
        """Hand `value` to a waiting consumer, or append it to the back."""
        while (listener := self._next_listener()) is not None:
            if listener.offer(value):
                return
        with self._lock.write():
            self._append(value)

    def dequeue(self) -> Any:
        """Pop the front element. Raises QueueEmptyError if there is none."""
        with self._lock.write():
            if not self._items:
                raise QueueEmptyError()
            return self._items.pop(0)

    def dequeue_or_wait_for_next_element(self) -> Any:
        """
        Pop the front element, or block until the next one is enqueued.

        Each waiting call holds one listener slot. Raises TooManyListenersError
        without blocking when max_listeners calls are already waiting.

        The wait cannot be interrupted; run it in a worker thread and abandon
        the thread if a timeout is needed.
        """
        while True:
            with self._lock.write():
                if self._items:
                    return self._items.pop(0)

            listener = self._register_listener()
            if self._wait_for_handoff(listener):
                return listener.value
            # An element was appended by a producer that missed our listener.
            if self._unregister_listener(listener):
                return listener.value

    # ------------------------------------------------------------------ #
    # Read operations                                                      #
    # ------------------------------------------------------------------ #

    def get_element(self, index: int) -> Any:
        """Return the element at `index` without removing it."""
        with self._lock.read():
            if index < 0 or index >= len(self._items):
                raise IndexOutOfBoundsError()
            return self._items[index]

    def get_elements(self) -> list[Any]:
        """Snapshot of every element, front first."""
        with self._lock.read():
            return list(self._items)

    def get_filtered_elements(self, offset: int, limit: int) -> list[Any]:
        """
        Return up to `limit` elements starting at `offset`.

        An empty queue yields []. Otherwise offset must be a valid index and
        limit positive; limit is clamped to the end of the queue.
        """
        with self._lock.write():
            length = len(self._items)
            if length == 0:
                return []
            if offset < 0 or offset >= length or limit <= 0:
                raise IndexOutOfBoundsError()
            return self._items[offset : min(offset + limit, length)]

    def find(self, criteria: Criteria) -> list[int]:
        """Indices of every element matching `criteria`, in queue order."""
        with self._lock.read():
            return [i for i, item in enumerate(self._items) if criteria(item)]

    def find_one(self, target: Any) -> int:
        """Index of the first element equal to `target`, or -1."""
        with self._lock.read():
            return self._find_one(target)

    def find_by_ids(self, ids: Iterable[int]) -> list[Any]:
        """Elements at the given indices, in queue order. Unknown indices are skipped."""
        wanted = set(ids)
        with self._lock.read():
            return [item for i, item in enumerate(self._items) if i in wanted]

    def get_len(self) -> int:
        with self._lock.read():
            return len(self._items)

    def get_cap(self) -> int:
        """Slots reserved by the item buffer (its high-water mark)."""
        with self._lock.read():
            return self._capacity

    def __len__(self) -> int:
        return self.get_len()

    # ------------------------------------------------------------------ #
    # Mutations                                                            #
    # ------------------------------------------------------------------ #

    def remove(self, target: Any) -> None:
        """Remove the first element equal to `target`."""
        with self._lock.write():
            index = self._find_one(target)
            if index == -1:
                raise IDNotFoundError()
            del self._items[index]

    def swap(self, a: Any, b: Any) -> None:
        """Exchange the positions of elements `a` and `b`."""
        with self._lock.write():
            if not self._items:
                raise QueueEmptyError()
            a_index = self._find_one(a)
            b_index = self._find_one(b)
            if a_index == -1 or b_index == -1:
                raise IDNotFoundError()
            if a_index == b_index:
                raise SwapIndexesMatchError()
            items = self._items
            items[a_index], items[b_index] = items[b_index], items[a_index]

    def move_to_front(self, target: Any) -> None:
        """
        Move `target` to the front, one adjacent swap at a time.

        Every other element keeps its relative order.
        """
        with self._lock.write():
            if not self._items:
                raise QueueEmptyError()
            index = self._find_one(target)
            if index == -1:
                raise IDNotFoundError()
            if index == 0:
                raise MoveIndexFrontPositionError()
            items = self._items
            for i in range(index, 0, -1):
                items[i], items[i - 1] = items[i - 1], items[i]

    def move_to_back(self, target: Any) -> None:
        """Move `target` to the back, one adjacent swap at a time."""
        with self._lock.write():
            length = len(self._items)
            if length == 0:
                raise QueueEmptyError()
            index = self._find_one(target)
            if index == -1:
                raise IDNotFoundError()
            if index == length - 1:
                raise MoveIndexBackPositionError()
            items = self._items
            for i in range(index, length - 1):
                items[i], items[i + 1] = items[i + 1], items[i]

    # ------------------------------------------------------------------ #
    # Internal helpers (callers hold the lock where needed)               #
    # ------------------------------------------------------------------ #

    def _append(self, value: Any) -> None:
        self._items.append(value)
        self._capacity = max(self._capacity, len(self._items))

    def _find_one(self, target: Any) -> int:
        for i, item in enumerate(self._items):
            if item == target:
                return i
        return -1

    def _next_listener(self) -> _Listener | None:
        with self._listeners_lock:
            return self._listeners.popleft() if self._listeners else None

    def _register_listener(self) -> _Listener:
        listener = _Listener()
        with self._listeners_lock:
            if len(self._listeners) >= self.max_listeners:
                raise TooManyListenersError()
            self._listeners.append(listener)
            pending = len(self._listeners)
        logger.debug("registered dequeue listener (%d pending)", pending)
        return listener

    def _wait_for_handoff(self, listener: _Listener) -> bool:
        """
        Block until a value is handed to `listener` (True) or items appear (False).

        Iteration i waits up to i ms; after POLL_ITERATIONS the wait settles
        at POLL_ITERATIONS ms per check.
        """
        i = 0
        while not listener.wait(min(i, POLL_ITERATIONS) / 1000):
            if self.get_len() > 0:
                return False
            i += 1
        return True

    def _unregister_listener(self, listener: _Listener) -> bool:
        """Withdraw a listener. Returns True if a value was handed to it first."""
        taken = listener.close()
        with self._listeners_lock, contextlib.suppress(ValueError):
            # Already popped by a producer that offered to it.
            self._listeners.remove(listener)
        return taken
