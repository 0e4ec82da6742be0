"""
Two-class FIFO queue with time-based promotion.

Clients wait in either the normal or the priority sequence. Priority status
is a function of clock time, so a waiting normal client can become
eligible later; ``promote()`` moves such clients across before each dequeue.
"""

import logging
import threading
from collections import deque
from typing import Deque, Iterable, List, NamedTuple, Optional

from .client import Client
from .clock import Clock
from .errors import InvalidClient
from .results import AdmissionReport
from .simulator_config import PROMOTE_ALL, PROMOTE_FIRST, PROMOTION_POLICIES

logger = logging.getLogger(__name__)


class QueueEntry(NamedTuple):
    """A queued client plus the bookkeeping needed for waiting-time metrics."""

    client: Client
    admitted_at: float
    from_priority: bool = False


class DualQueue:
    """
    Normal and priority FIFO sequences sharing one clock.

    Discipline:
        - Priority always wins over normal, however long a normal client waited
        - Strict FIFO within each class
        - Position is fixed at admission or promotion and never reordered

    Membership reflects priority status as of the last ``promote()`` call, not
    the live predicate. All mutation happens under ``lock`` so incremental
    admission from another thread cannot interleave with a selection.

    Example:
        >>> clock = ManualClock(start=0.0)
        >>> queue = DualQueue(clock)
        >>> queue.admit([Client(0, 5.0, 9.0), Client(1, 0.0, 9.0)])
        AdmissionReport(admitted=2, admitted_priority=1, rejected=[])
        >>> queue.select_next().client_id  # Client 1 is busy now
        1
    """

    def __init__(self, clock: Clock, promotion_policy: str = PROMOTE_FIRST):
        if promotion_policy not in PROMOTION_POLICIES:
            raise ValueError(
                f"promotion_policy must be one of {PROMOTION_POLICIES}, "
                f"got {promotion_policy!r}"
            )

        self.clock = clock
        self.promotion_policy = promotion_policy
        self.normal: Deque[QueueEntry] = deque()
        self.priority: Deque[QueueEntry] = deque()
        self.lock = threading.RLock()

    def admit(self, clients: Iterable[Client]) -> AdmissionReport:
        """
        Place each valid client into the priority or normal sequence.

        Each client's predicate is evaluated once, against the clock reading
        taken when that client is placed. Input order is preserved within
        each resulting class. Invalid clients are rejected individually and
        admission continues with the rest.

        Args:
            clients: Clients in arrival order (may be empty)

        Returns:
            AdmissionReport with admitted/priority counts and rejected clients
        """
        report = AdmissionReport()

        with self.lock:
            for client in clients:
                try:
                    client.validate()
                except InvalidClient as exc:
                    logger.warning("Rejected at admission: %s", exc)
                    report.rejected.append(exc)
                    continue

                now = self.clock.now()
                if client.is_priority(now):
                    self.priority.append(QueueEntry(client, now))
                    report.admitted_priority += 1
                else:
                    self.normal.append(QueueEntry(client, now))
                report.admitted += 1

        return report

    def promote(self) -> List[Client]:
        """
        Move newly eligible clients from the normal to the priority sequence.

        Scans the normal sequence in FIFO order. Under the "first" policy at
        most one client (the first eligible) is moved per call; under "all"
        every eligible client is moved, keeping their relative order.

        Returns:
            Promoted clients in the order they were appended to priority
        """
        with self.lock:
            now = self.clock.now()
            promoted: List[Client] = []
            remaining: Deque[QueueEntry] = deque()

            while self.normal:
                entry = self.normal.popleft()
                eligible = entry.client.is_priority(now)
                if eligible and (self.promotion_policy == PROMOTE_ALL or not promoted):
                    self.priority.append(entry)
                    promoted.append(entry.client)
                else:
                    remaining.append(entry)

            self.normal = remaining

        for client in promoted:
            logger.debug("Promoted client %d at t=%.3f", client.client_id, now)
        return promoted

    def select_next(self) -> Optional[Client]:
        """
        Remove and return the next client to serve.

        Returns:
            Head of priority if non-empty, else head of normal, else None
        """
        entry = self.select_next_entry()
        return entry.client if entry is not None else None

    def select_next_entry(self) -> Optional[QueueEntry]:
        """Like ``select_next`` but keeps the admission time and source class."""
        with self.lock:
            if self.priority:
                return self.priority.popleft()._replace(from_priority=True)
            if self.normal:
                return self.normal.popleft()._replace(from_priority=False)
            return None

    def is_empty(self) -> bool:
        """True if both sequences are empty."""
        with self.lock:
            return not self.priority and not self.normal

    def normal_length(self) -> int:
        return len(self.normal)

    def priority_length(self) -> int:
        return len(self.priority)

    def __len__(self) -> int:
        with self.lock:
            return len(self.normal) + len(self.priority)

    def __repr__(self) -> str:
        return (
            f"DualQueue(priority={self.priority_length()}, "
            f"normal={self.normal_length()}, policy={self.promotion_policy})"
        )
