"""
Configuration for the espresso machine simulator.

Defines the fixed service duration, the accepted population bounds for the
console front-end, and the promotion policy of the two-class queue.
"""

from dataclasses import dataclass

# Promotion policies
PROMOTE_FIRST = "first"  # At most one normal client promoted per service cycle
PROMOTE_ALL = "all"  # Every eligible normal client promoted per service cycle

PROMOTION_POLICIES = (PROMOTE_FIRST, PROMOTE_ALL)


@dataclass
class SimulatorConfig:
    """
    Configuration for the two-class espresso scheduler.

    Service:
        Every client occupies the machine for exactly ``service_duration``
        seconds. No other client is served during that time.

    Promotion:
        Before each dequeue the normal queue is scanned for clients whose
        priority window has opened:
        - "first": move only the first eligible client (FIFO order)
        - "all": move every eligible client, preserving FIFO order

    Population bounds:
        ``min_clients``/``max_clients`` bound the count accepted from the
        console. The scheduler itself accepts any batch size.
    """

    # === Service ===
    service_duration: float = 0.1  # Seconds to make one espresso

    # === Population bounds (console front-end) ===
    min_clients: int = 10
    max_clients: int = 500

    # === Queue discipline ===
    promotion_policy: str = PROMOTE_FIRST

    def __post_init__(self):
        """Validate configuration parameters."""
        if not self.service_duration > 0:
            raise ValueError(
                f"service_duration must be positive, got {self.service_duration}"
            )

        if self.min_clients < 0:
            raise ValueError(
                f"min_clients must be non-negative, got {self.min_clients}"
            )

        if self.max_clients < self.min_clients:
            raise ValueError(
                f"max_clients ({self.max_clients}) must be >= "
                f"min_clients ({self.min_clients})"
            )

        if self.promotion_policy not in PROMOTION_POLICIES:
            raise ValueError(
                f"promotion_policy must be one of {PROMOTION_POLICIES}, "
                f"got {self.promotion_policy!r}"
            )


# Convenience factory functions


def create_simulator_default() -> SimulatorConfig:
    """
    Create a simulator configuration matching the classic office setup.

    Defaults:
        - 100 ms per espresso
        - 10 to 500 engineers accepted from the console
        - single promotion per service cycle

    Returns:
        SimulatorConfig with default parameters
    """
    return SimulatorConfig()


def create_simulator_custom(
    service_duration: float = 0.1,
    promotion_policy: str = PROMOTE_FIRST,
    min_clients: int = 10,
    max_clients: int = 500,
) -> SimulatorConfig:
    """
    Create a simulator configuration with custom parameters.

    Args:
        service_duration: Seconds to serve one client
        promotion_policy: "first" or "all"
        min_clients: Smallest population accepted from the console
        max_clients: Largest population accepted from the console

    Returns:
        SimulatorConfig with custom parameters
    """
    return SimulatorConfig(
        service_duration=service_duration,
        promotion_policy=promotion_policy,
        min_clients=min_clients,
        max_clients=max_clients,
    )
