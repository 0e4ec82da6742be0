"""
Abstract base class for single-machine service loops.

Defines the loop shared by the two-class scheduler and the comparison
baselines: pick the next client, occupy the machine for the fixed service
duration, record a completion event, repeat until drained.
"""

import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterable, List, Optional

from .client import Client
from .clock import Clock, SystemClock
from .dual_queue import QueueEntry
from .errors import InvalidClient
from .results import AdmissionReport, ServiceEvent, SimulationResult
from .simulator_config import SimulatorConfig

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    RUNNING = "running"
    DRAINED = "drained"


class ServiceLoop(ABC):
    """
    Base class for single-resource service loops.

    All loops operate on the same inputs:
    - A batch (or stream) of admitted clients
    - A clock supplying ``now()`` and ``sleep()``
    - A fixed service duration from ``SimulatorConfig``

    And produce the same output: a ``SimulationResult`` whose events are in
    strict service order.
    """

    name = "base"

    def __init__(
        self,
        config: Optional[SimulatorConfig] = None,
        clock: Optional[Clock] = None,
        on_serve: Optional[Callable[[ServiceEvent], None]] = None,
    ):
        """
        Initialize the service loop.

        Args:
            config: Simulator configuration (defaults to SimulatorConfig())
            clock: Time source (defaults to SystemClock())
            on_serve: Optional callback invoked with each completion event
        """
        self.cfg = config if config is not None else SimulatorConfig()
        self.clock = clock if clock is not None else SystemClock()
        self.on_serve = on_serve

        self.events: List[ServiceEvent] = []
        self.rejected: List[InvalidClient] = []
        self._stop = threading.Event()

    @abstractmethod
    def admit(self, clients: Iterable[Client]) -> AdmissionReport:
        """Admit a batch of clients; invalid ones are rejected and reported."""

    @abstractmethod
    def _next_entry(self) -> Optional[QueueEntry]:
        """Select and remove the next client to serve, or None when drained."""

    @abstractmethod
    def is_empty(self) -> bool:
        """True if no client is waiting."""

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.DRAINED if self.is_empty() else SchedulerState.RUNNING

    def step(self) -> Optional[ServiceEvent]:
        """
        Serve one client.

        Returns:
            The completion event, or None if nothing was left to serve
        """
        entry = self._next_entry()
        if entry is None:
            return None
        return self._serve(entry)

    def run(self) -> SimulationResult:
        """
        Serve clients until both queues are empty or ``stop()`` is called.

        Each call starts with the stop signal cleared, so a stopped loop can
        be resumed and a ``stop()`` issued before ``run()`` has no effect.

        Returns:
            SimulationResult with the event log collected so far
        """
        self._stop.clear()
        while not self._stop.is_set():
            if self.step() is None:
                break

        return self._build_result()

    def stop(self) -> None:
        """Ask ``run()`` to return before the next step."""
        self._stop.set()

    def _serve(self, entry: QueueEntry) -> ServiceEvent:
        """
        Occupy the machine for one service duration and record the outcome.

        The priority flag is re-evaluated after the service completes; it can
        differ from the class the client was dequeued from.
        """
        started_at = self.clock.now()
        self.clock.sleep(self.cfg.service_duration)
        completed_at = self.clock.now()

        event = ServiceEvent(
            client_id=entry.client.client_id,
            was_priority=entry.client.is_priority(completed_at),
            served_from_priority=entry.from_priority,
            admitted_at=entry.admitted_at,
            started_at=started_at,
            completed_at=completed_at,
        )
        self.events.append(event)
        logger.debug(
            "Served client %d (priority=%s, waited %.3fs)",
            event.client_id,
            event.was_priority,
            event.waiting_time,
        )

        if self.on_serve is not None:
            self.on_serve(event)
        return event

    def _metadata(self) -> dict:
        return {
            "scheduler": self.name,
            "service_duration": self.cfg.service_duration,
        }

    def _build_result(self) -> SimulationResult:
        return SimulationResult(
            events=list(self.events),
            rejected=list(self.rejected),
            drained=self.is_empty(),
            metadata=self._metadata(),
        )
