"""
Espresso machine scheduler.

Serves engineers one at a time. Super-busy engineers (those inside their
priority window) are served before everyone else; among each class the
first-come-first-served rule applies.
"""

from typing import Callable, Iterable, Optional

from .base import SchedulerState, ServiceLoop
from .client import Client
from .clock import Clock
from .dual_queue import DualQueue, QueueEntry
from .results import AdmissionReport, ServiceEvent
from .simulator_config import SimulatorConfig


class EspressoScheduler(ServiceLoop):
    """
    Two-class service loop with lazy promotion.

    Step algorithm (repeated while RUNNING):
        1. Promote newly super-busy clients from normal to priority
        2. Select the head of priority, else the head of normal
        3. Serve: sleep for ``service_duration``, then emit an event whose
           ``was_priority`` is re-evaluated at that moment
        4. Repeat; an empty selection means DRAINED

    Priority is re-checked before every dequeue because it is a function of
    time, not a label fixed at admission.

    Example:
        >>> clock = ManualClock(start=0.0)
        >>> scheduler = EspressoScheduler(SimulatorConfig(service_duration=1.0), clock)
        >>> _ = scheduler.admit([Client(0, 50.0, 60.0), Client(1, 0.0, 10.0)])
        >>> scheduler.run().service_order
        [1, 0]
    """

    name = "espresso"

    def __init__(
        self,
        config: Optional[SimulatorConfig] = None,
        clock: Optional[Clock] = None,
        on_serve: Optional[Callable[[ServiceEvent], None]] = None,
    ):
        super().__init__(config, clock, on_serve)
        self.queue = DualQueue(self.clock, promotion_policy=self.cfg.promotion_policy)
        self.promotions = 0

    def admit(self, clients: Iterable[Client]) -> AdmissionReport:
        """
        Admit clients into the dual queue.

        Safe to call from another thread while ``run()`` is active.

        Returns:
            AdmissionReport; rejected clients are also kept for the result
        """
        report = self.queue.admit(clients)
        self.rejected.extend(report.rejected)
        return report

    def _next_entry(self) -> Optional[QueueEntry]:
        with self.queue.lock:
            self.promotions += len(self.queue.promote())
            return self.queue.select_next_entry()

    def is_empty(self) -> bool:
        return self.queue.is_empty()

    def _metadata(self) -> dict:
        metadata = super()._metadata()
        metadata.update(
            {
                "promotion_policy": self.cfg.promotion_policy,
                "promotions": self.promotions,
                "rejected": len(self.rejected),
            }
        )
        return metadata

    def __repr__(self) -> str:
        return (
            f"EspressoScheduler(state={self.state.value}, "
            f"service_duration={self.cfg.service_duration}, "
            f"policy={self.cfg.promotion_policy})"
        )


__all__ = ["EspressoScheduler", "SchedulerState"]
