"""
Espresso machine simulator with time-boxed priority.

One espresso machine serves a queue of engineers first-come-first-served,
except that "super-busy" engineers (those inside their priority window) are
served ahead of everyone who is not.

Main components:
    - EspressoScheduler: Service loop that promotes, selects and serves
    - DualQueue: Normal/priority FIFO pair with time-based promotion
    - Client: Engineer with an immutable priority window
    - SimulatorConfig: Service duration, population bounds, promotion policy
    - SystemClock / ManualClock: Real-time (monotonic) and deterministic time sources

Example:
    >>> from espresso_sim import Client, EspressoScheduler, ManualClock, SimulatorConfig
    >>> clock = ManualClock(start=0.0)
    >>> scheduler = EspressoScheduler(SimulatorConfig(service_duration=1.0), clock)
    >>> report = scheduler.admit([
    ...     Client(0, 10.0, 20.0),  # normal now
    ...     Client(1, 0.0, 5.0),    # super-busy now
    ... ])
    >>> scheduler.run().service_order
    [1, 0]
"""

from .base import SchedulerState, ServiceLoop
from .client import Client
from .clock import Clock, ManualClock, SystemClock
from .dual_queue import DualQueue, QueueEntry
from .errors import InvalidClient
from .population import generate_population, generate_random_client
from .results import (
    CLASS_NORMAL,
    CLASS_PRIORITY,
    AdmissionReport,
    ServiceEvent,
    SimulationResult,
)
from .scheduler import EspressoScheduler
from .simulator_config import (
    PROMOTE_ALL,
    PROMOTE_FIRST,
    SimulatorConfig,
    create_simulator_custom,
    create_simulator_default,
)

__all__ = [
    # Main scheduler
    "EspressoScheduler",
    "ServiceLoop",
    "SchedulerState",
    # Configuration
    "SimulatorConfig",
    "create_simulator_default",
    "create_simulator_custom",
    "PROMOTE_FIRST",
    "PROMOTE_ALL",
    # Components
    "Client",
    "DualQueue",
    "QueueEntry",
    "Clock",
    "SystemClock",
    "ManualClock",
    # Results and errors
    "ServiceEvent",
    "AdmissionReport",
    "SimulationResult",
    "InvalidClient",
    "CLASS_PRIORITY",
    "CLASS_NORMAL",
    # Population
    "generate_population",
    "generate_random_client",
]

__version__ = "1.0.0"
