"""
Data structures for simulation results.

Provides the service-completion event log and the admission report, plus
waiting-time summaries over a finished run.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from .errors import InvalidClient

# Queue classes (0 = served first)
CLASS_PRIORITY = 0
CLASS_NORMAL = 1


@dataclass(frozen=True)
class ServiceEvent:
    """
    One completed service, in the order it happened.

    Attributes:
        client_id: Identity of the served client
        was_priority: Priority predicate re-evaluated when service completed
        served_from_priority: True if the client was dequeued from the priority queue
        admitted_at: Clock reading when the client was admitted
        started_at: Clock reading when service started
        completed_at: Clock reading when service completed
    """

    client_id: int
    was_priority: bool
    served_from_priority: bool = False
    admitted_at: float = 0.0
    started_at: float = 0.0
    completed_at: float = 0.0

    @property
    def waiting_time(self) -> float:
        """Admission to service start."""
        return self.started_at - self.admitted_at

    @property
    def queue_class(self) -> int:
        """Class the client was dequeued from (CLASS_PRIORITY or CLASS_NORMAL)."""
        return CLASS_PRIORITY if self.served_from_priority else CLASS_NORMAL


@dataclass
class AdmissionReport:
    """
    Outcome of one admission batch.

    Attributes:
        admitted: Number of clients placed into the queue
        admitted_priority: How many of them went straight to the priority queue
        rejected: One InvalidClient per rejected client, in input order
    """

    admitted: int = 0
    admitted_priority: int = 0
    rejected: List[InvalidClient] = field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)

    @property
    def admitted_normal(self) -> int:
        return self.admitted - self.admitted_priority


@dataclass
class SimulationResult:
    """
    Container for a finished (or stopped) service loop.

    Attributes:
        events: Service-completion events in strict service order
        rejected: Clients rejected at admission
        drained: True if the loop ended because both queues were empty
        metadata: Scheduler-specific data (policy, promotion count, ...)
        waiting_times: Per-event waiting time, aligned with ``events``
        priorities: Per-event queue class, aligned with ``events``
    """

    events: List[ServiceEvent]
    rejected: List[InvalidClient] = field(default_factory=list)
    drained: bool = True
    metadata: Optional[Dict] = None
    waiting_times: np.ndarray = field(init=False)
    priorities: List[int] = field(init=False)

    def __post_init__(self):
        """Derive per-event arrays from the event log."""
        self.waiting_times = np.array([e.waiting_time for e in self.events], dtype=float)
        self.priorities = [e.queue_class for e in self.events]

    @property
    def service_order(self) -> List[int]:
        """Client ids in the order they were served."""
        return [e.client_id for e in self.events]

    @property
    def n_served(self) -> int:
        return len(self.events)

    @property
    def n_priority_at_service(self) -> int:
        """Number of clients that were super-busy when served."""
        return sum(1 for e in self.events if e.was_priority)

    def avg_waiting_time(self, priority_class: Optional[int] = None) -> float:
        """
        Compute average waiting time, optionally filtered by queue class.

        Args:
            priority_class: CLASS_PRIORITY or CLASS_NORMAL (None for all)

        Returns:
            Mean waiting time (0.0 if no client matches)
        """
        values = self._waiting_for(priority_class)
        if values.size == 0:
            return 0.0
        return float(np.mean(values))

    def max_waiting_time(self, priority_class: Optional[int] = None) -> float:
        """Longest waiting time, optionally filtered by queue class."""
        values = self._waiting_for(priority_class)
        if values.size == 0:
            return 0.0
        return float(np.max(values))

    def percentile_waiting_time(
        self, percentile: float, priority_class: Optional[int] = None
    ) -> float:
        """
        Compute percentile of waiting times.

        Args:
            percentile: Percentile to compute (0-100)
            priority_class: If specified, compute only for this class

        Returns:
            Percentile value of waiting times
        """
        if not 0 <= percentile <= 100:
            raise ValueError(f"Percentile must be in [0, 100], got {percentile}")

        values = self._waiting_for(priority_class)
        if values.size == 0:
            return 0.0
        return float(np.percentile(values, percentile))

    def per_class_waiting_times(self) -> Dict[int, float]:
        """Average waiting time for each queue class that was served."""
        return {cls: self.avg_waiting_time(cls) for cls in sorted(set(self.priorities))}

    def _waiting_for(self, priority_class: Optional[int]) -> np.ndarray:
        if priority_class is None:
            return self.waiting_times
        mask = np.array([p == priority_class for p in self.priorities], dtype=bool)
        if mask.size == 0:
            return self.waiting_times
        return self.waiting_times[mask]
