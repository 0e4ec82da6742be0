"""
Console front-end for the espresso machine simulator.

Usage:
    espresso-sim                      # prompts for the number of engineers
    espresso-sim --clients 50 --seed 7
    espresso-sim --clients 20 --promotion-policy all --verbose
"""

import argparse
import logging
from typing import Callable, List, Optional

from .clock import SystemClock
from .population import generate_population
from .results import ServiceEvent
from .scheduler import EspressoScheduler
from .simulator_config import PROMOTION_POLICIES, SimulatorConfig


def read_client_count(
    config: SimulatorConfig,
    input_fn: Optional[Callable[[str], str]] = None,
    output_fn: Optional[Callable[[str], None]] = None,
) -> int:
    """
    Read an integer within the configured bounds, asking again until valid.

    Args:
        config: Supplies min_clients/max_clients
        input_fn: Line reader (``input`` by default)
        output_fn: Line writer (``print`` by default)

    Returns:
        The accepted population size
    """
    input_fn = input_fn or input
    output_fn = output_fn or print

    while True:
        raw = input_fn("> ")
        try:
            value = int(raw.strip())
        except ValueError:
            value = None

        if value is not None and config.min_clients <= value <= config.max_clients:
            return value

        output_fn(
            f"This is not a number between {config.min_clients} "
            f"and {config.max_clients}!"
        )


def format_event(event: ServiceEvent) -> str:
    """Render one completion event as a status line."""
    busy = "busy " if event.was_priority else ""
    return f"Made espresso for {busy}engineer with ID {event.client_id}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Espresso machine simulator with super-busy priority"
    )
    parser.add_argument(
        "--clients",
        type=int,
        default=None,
        help="number of engineers (prompted for when omitted)",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--service-duration",
        type=float,
        default=0.1,
        help="seconds to make one espresso (default: 0.1)",
    )
    parser.add_argument(
        "--promotion-policy",
        choices=PROMOTION_POLICIES,
        default=PROMOTION_POLICIES[0],
        help="promote the first eligible engineer per cycle, or all of them",
    )
    parser.add_argument("--verbose", action="store_true", help="log promotions at DEBUG")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        config = SimulatorConfig(
            service_duration=args.service_duration,
            promotion_policy=args.promotion_policy,
        )
    except ValueError as exc:
        parser.error(str(exc))

    print("Welcome to the EspressoSimulator.")

    n_clients = args.clients
    if n_clients is None:
        print(
            "How many engineers queueing up for espresso do you want to simulate? "
            f"Please choose a number between {config.min_clients} and {config.max_clients}"
        )
        n_clients = read_client_count(config)
    elif not config.min_clients <= n_clients <= config.max_clients:
        print(
            f"This is not a number between {config.min_clients} "
            f"and {config.max_clients}!"
        )
        return 2

    print(f"Generating {n_clients} random engineers...")
    clock = SystemClock()
    clients = generate_population(
        n_clients, config.service_duration, now=clock.now(), seed=args.seed
    )

    print("Adding them to the queue.")
    scheduler = EspressoScheduler(
        config, clock, on_serve=lambda event: print(format_event(event))
    )
    scheduler.admit(clients)

    print(f"Starting simulation with {n_clients} engineers!")
    scheduler.run()

    print("No more engineers in queue! Everyone is happy!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
