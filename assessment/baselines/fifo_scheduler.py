"""
FIFO Scheduler (Lower Bound Baseline for espresso scheduler evaluation).

Pure first-come-first-served queueing with no priority: demonstrates what
happens when super-busy engineers wait like everyone else.
"""

from collections import deque
from typing import Deque, Iterable, Optional

from espresso_sim import AdmissionReport, Client, InvalidClient, QueueEntry, ServiceLoop


class FIFOScheduler(ServiceLoop):
    """
    First-In-First-Out (FIFO) espresso queue.

    Scheduling policy:
        - Serve engineers in strict admission order
        - Ignores priority windows entirely
        - Completely fair, no urgency awareness

    Events still report ``was_priority`` so the cost of ignoring super-busy
    engineers can be measured.

    Example:
        >>> scheduler = FIFOScheduler(SimulatorConfig(service_duration=1.0), ManualClock())
        >>> _ = scheduler.admit([Client(0, 50.0, 60.0), Client(1, 0.0, 10.0)])
        >>> scheduler.run().service_order  # Arrival order, busy engineer waits
        [0, 1]
    """

    name = "fifo"

    def __init__(self, config=None, clock=None, on_serve=None):
        super().__init__(config, clock, on_serve)
        self.queue: Deque[QueueEntry] = deque()

    def admit(self, clients: Iterable[Client]) -> AdmissionReport:
        """Append valid clients in order; reject inverted windows."""
        report = AdmissionReport()
        for client in clients:
            try:
                client.validate()
            except InvalidClient as exc:
                report.rejected.append(exc)
                continue

            now = self.clock.now()
            if client.is_priority(now):
                report.admitted_priority += 1
            self.queue.append(QueueEntry(client, now))
            report.admitted += 1

        self.rejected.extend(report.rejected)
        return report

    def _next_entry(self) -> Optional[QueueEntry]:
        if not self.queue:
            return None
        return self.queue.popleft()

    def is_empty(self) -> bool:
        return not self.queue

    def __repr__(self) -> str:
        return f"FIFOScheduler(service_duration={self.cfg.service_duration})"
