"""
Synthetic client populations.

Each generated engineer is super-busy during a random window that starts and
ends somewhere between ``now`` and ``now + busy_to_max``.
"""

from typing import List, Optional

import numpy as np

from .client import Client


def generate_random_client(
    client_id: int,
    busy_to_max: float,
    now: float,
    rng: Optional[np.random.Generator] = None,
) -> Client:
    """
    Generate a client that is busy at a random time.

    Window sampling:
        - priority_from ~ U[now, now + busy_to_max)
        - priority_to ~ U[priority_from, now + busy_to_max)

    Args:
        client_id: Identity for the new client
        busy_to_max: Horizon (seconds) within which the window must fall
        now: Reference timestamp (seconds)
        rng: Optional numpy Generator (useful for deterministic tests)

    Returns:
        A valid Client (priority_from <= priority_to)
    """
    if busy_to_max <= 0:
        raise ValueError(f"busy_to_max must be positive, got {busy_to_max}")

    r = rng if rng is not None else np.random.default_rng()
    horizon = now + busy_to_max
    busy_from = float(r.uniform(now, horizon))
    busy_to = float(r.uniform(busy_from, horizon))
    return Client(client_id=client_id, priority_from=busy_from, priority_to=busy_to)


def generate_population(
    n_clients: int,
    service_duration: float,
    now: float,
    seed: Optional[int] = None,
) -> List[Client]:
    """
    Generate ``n_clients`` engineers with ids ``0..n_clients-1``.

    The busy horizon is the time it would take to serve everyone
    (``service_duration * n_clients``), so every window can open while the
    queue is still being drained.

    Args:
        n_clients: Population size (0 yields an empty list)
        service_duration: Seconds to serve one client
        now: Reference timestamp (seconds)
        seed: Random seed (None for non-deterministic)

    Returns:
        Clients in id order
    """
    if n_clients < 0:
        raise ValueError(f"n_clients must be non-negative, got {n_clients}")
    if service_duration <= 0:
        raise ValueError(f"service_duration must be positive, got {service_duration}")

    rng = np.random.default_rng(seed=seed)
    busy_to_max = service_duration * n_clients
    return [generate_random_client(i, busy_to_max, now, rng) for i in range(n_clients)]
