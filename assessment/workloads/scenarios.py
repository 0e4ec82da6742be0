"""
Evaluation scenarios for espresso scheduler benchmarking.

Each workload describes a queue of engineers by their priority windows,
expressed as offsets (seconds) from the moment the batch is admitted:
1. Random Population - The classic office setup
2. Priority Surge - Windows open one after another behind a normal backlog
3. All Normal - Nobody becomes super-busy (pure FIFO)
4. Late Promotion - A single engineer turns super-busy mid-run
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from espresso_sim import Client, generate_population

# Offset pair for a window that never opens during any realistic run
NEVER_BUSY: Tuple[float, float] = (1e9, 1e9)


@dataclass
class Workload:
    """
    Workload specification for the espresso scheduler.

    Attributes:
        windows: (from_offset, to_offset) per engineer, in arrival order
        service_duration: Service duration the scenario was designed for
        description: Human-readable scenario description
    """

    windows: List[Tuple[float, float]]
    service_duration: float = 1.0
    description: str = ""

    def __post_init__(self):
        """Validate workload consistency."""
        if self.service_duration <= 0:
            raise ValueError(
                f"service_duration must be positive, got {self.service_duration}"
            )
        for i, (start, end) in enumerate(self.windows):
            if start > end:
                raise ValueError(f"window {i} is inverted ({start} > {end})")

    @property
    def n_clients(self) -> int:
        """Total number of engineers."""
        return len(self.windows)

    @property
    def n_busy_at_admission(self) -> int:
        """Engineers already super-busy when the batch is admitted."""
        return sum(1 for start, end in self.windows if start <= 0.0 <= end)

    @property
    def horizon(self) -> float:
        """Time needed to serve everyone back to back."""
        return self.n_clients * self.service_duration

    def to_clients(self, start: float = 0.0) -> List[Client]:
        """
        Materialize the workload as clients with absolute windows.

        Args:
            start: Admission timestamp the offsets are relative to

        Returns:
            Clients with ids 0..n-1 in arrival order
        """
        return [
            Client(client_id=i, priority_from=start + lo, priority_to=start + hi)
            for i, (lo, hi) in enumerate(self.windows)
        ]


def generate_random_population(
    n_clients: int = 100,
    service_duration: float = 1.0,
    seed: Optional[int] = None,
) -> Workload:
    """
    Scenario 1: Random Population.

    Every engineer is super-busy during one random window inside the time it
    takes to serve the whole queue.

    Args:
        n_clients: Number of engineers
        service_duration: Seconds per espresso
        seed: Random seed (None for non-deterministic)

    Returns:
        Workload with n_clients random windows
    """
    clients = generate_population(n_clients, service_duration, now=0.0, seed=seed)
    return Workload(
        windows=[(c.priority_from, c.priority_to) for c in clients],
        service_duration=service_duration,
        description=f"Random population ({n_clients} engineers)",
    )


def generate_priority_surge(
    n_normal: int = 20,
    n_surge: int = 30,
    service_duration: float = 1.0,
    seed: Optional[int] = None,
) -> Workload:
    """
    Scenario 2: Priority Surge.

    A backlog of engineers who never become busy arrives first, followed by
    engineers whose windows open one service slot apart. Every cycle has a
    freshly eligible engineer, so the backlog waits until the surge is over.
    This is the starvation property of strict two-class priority.

    Args:
        n_normal: Engineers in the backlog (never busy)
        n_surge: Engineers whose windows open successively
        service_duration: Seconds per espresso
        seed: Jitter seed; None opens windows exactly on the half slot

    Returns:
        Workload with n_normal + n_surge engineers
    """
    import numpy as np

    rng = np.random.default_rng(seed=seed) if seed is not None else None

    windows = [NEVER_BUSY] * n_normal
    horizon = (n_normal + n_surge) * service_duration
    for k in range(n_surge):
        # Opens between slots k and k+1, so one new engineer per cycle
        jitter = float(rng.uniform(0.1, 0.9)) if rng is not None else 0.5
        opens = (k + jitter) * service_duration
        windows.append((opens, horizon * 2))

    return Workload(
        windows=windows,
        service_duration=service_duration,
        description=f"Priority surge ({n_surge} busy behind {n_normal} normal)",
    )


def generate_all_normal(
    n_clients: int = 50,
    service_duration: float = 1.0,
    seed: Optional[int] = None,
) -> Workload:
    """
    Scenario 3: All Normal.

    Nobody is ever super-busy; service order must equal arrival order.
    """
    return Workload(
        windows=[NEVER_BUSY] * n_clients,
        service_duration=service_duration,
        description=f"All normal ({n_clients} engineers)",
    )


def generate_late_promotion(
    n_clients: int = 20,
    opens_after_slots: float = 5.5,
    service_duration: float = 1.0,
    seed: Optional[int] = None,
) -> Workload:
    """
    Scenario 4: Late Promotion.

    All engineers start normal; the last one in line turns super-busy after
    ``opens_after_slots`` service slots and must overtake everyone still
    waiting.

    Args:
        n_clients: Number of engineers (the last one is promoted)
        opens_after_slots: When the last engineer's window opens, in slots
        service_duration: Seconds per espresso

    Returns:
        Workload with one late-promoted engineer at the tail
    """
    if n_clients < 2:
        raise ValueError(f"n_clients must be at least 2, got {n_clients}")

    opens = opens_after_slots * service_duration
    windows = [NEVER_BUSY] * (n_clients - 1)
    windows.append((opens, opens + n_clients * service_duration))

    return Workload(
        windows=windows,
        service_duration=service_duration,
        description=f"Late promotion after {opens_after_slots} slots",
    )
