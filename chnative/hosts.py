"""Round-robin choice among the hosts a connection may be opened to."""

from __future__ import annotations

import itertools
import threading
from typing import Iterable, Tuple


class HostRotator:
    """Hands out hosts in turn: the primary first, then each alternate.

    Every call to :meth:`next_host` moves on to the following host and
    wraps around after the last one. Safe to share between threads.
    """

    def __init__(self, primary: str, alt_hosts: Iterable[str] = ()) -> None:
        self._hosts: Tuple[str, ...] = (primary, *alt_hosts)
        self._counter = itertools.count()
        self._lock = threading.Lock()

    @property
    def hosts(self) -> Tuple[str, ...]:
        """All hosts in rotation order."""
        return self._hosts

    def __len__(self) -> int:
        return len(self._hosts)

    def next_host(self) -> str:
        """Return the next host in rotation."""
        with self._lock:
            index = next(self._counter)
        return self._hosts[index % len(self._hosts)]