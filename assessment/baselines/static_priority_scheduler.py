"""
Static Priority Scheduler (baseline without promotion).

Classifies engineers once, at admission, and never re-checks. Demonstrates
the problem lazy promotion solves: an engineer who turns super-busy while
waiting in the normal line is never moved ahead.
"""

from typing import Iterable, Optional

from espresso_sim import AdmissionReport, Client, DualQueue, QueueEntry, ServiceLoop


class StaticPriorityScheduler(ServiceLoop):
    """
    Two-class queue with a priority label fixed at admission.

    Scheduling policy:
        - Busy at admission -> priority queue, otherwise normal queue
        - Priority served first, FIFO within each class
        - No promotion: windows opening later are ignored

    Example:
        >>> clock = ManualClock()
        >>> scheduler = StaticPriorityScheduler(SimulatorConfig(service_duration=1.0), clock)
        >>> _ = scheduler.admit([Client(0, 50.0, 60.0), Client(1, 0.5, 10.0)])
        >>> scheduler.run().service_order  # Client 1 turned busy but never moved
        [0, 1]
    """

    name = "static"

    def __init__(self, config=None, clock=None, on_serve=None):
        super().__init__(config, clock, on_serve)
        self.queue = DualQueue(self.clock)

    def admit(self, clients: Iterable[Client]) -> AdmissionReport:
        report = self.queue.admit(clients)
        self.rejected.extend(report.rejected)
        return report

    def _next_entry(self) -> Optional[QueueEntry]:
        return self.queue.select_next_entry()

    def is_empty(self) -> bool:
        return self.queue.is_empty()

    def __repr__(self) -> str:
        return f"StaticPriorityScheduler(service_duration={self.cfg.service_duration})"
