"""
Tests for promotion policies, incremental admission and the stop signal.
"""

import threading
import time

import pytest

from espresso_sim import (
    PROMOTE_ALL,
    PROMOTE_FIRST,
    Client,
    EspressoScheduler,
    ManualClock,
    SchedulerState,
    SimulatorConfig,
    SystemClock,
    create_simulator_custom,
    create_simulator_default,
)

NEVER = (1000.0, 2000.0)

# Absolute windows for the real clock, whose readings have no fixed origin
ALWAYS = (float("-inf"), float("inf"))
NEVER_OPENS = (float("inf"), float("inf"))


def closing_window_batch():
    """
    Two normal clients, then two that turn busy at t=0.5.

    Client 3's window closes at t=1.5, so whether it is still served ahead of
    client 1 depends on the promotion policy.
    """
    return [
        Client(0, *NEVER),
        Client(1, *NEVER),
        Client(2, 0.5, 100.0),
        Client(3, 0.5, 1.5),
    ]


def run_with_policy(policy, clients):
    clock = ManualClock(start=0.0)
    scheduler = EspressoScheduler(
        SimulatorConfig(service_duration=1.0, promotion_policy=policy), clock
    )
    scheduler.admit(clients)
    return scheduler.run()


# === Promotion policies ===


def test_first_policy_single_promotion_per_cycle():
    """Only client 2 is promoted at t=1; client 3's window has closed by t=2."""
    result = run_with_policy(PROMOTE_FIRST, closing_window_batch())

    assert result.service_order == [0, 2, 1, 3]
    assert result.metadata["promotions"] == 1
    assert result.metadata["promotion_policy"] == "first"


def test_all_policy_promotes_every_eligible_client():
    """Both clients are promoted at t=1 and keep their relative order."""
    result = run_with_policy(PROMOTE_ALL, closing_window_batch())

    assert result.service_order == [0, 2, 3, 1]
    assert result.metadata["promotions"] == 2
    # Client 3 came from the priority queue but its window closed at t=1.5
    event_3 = result.events[2]
    assert event_3.served_from_priority
    assert not event_3.was_priority


@pytest.mark.parametrize("policy", [PROMOTE_FIRST, PROMOTE_ALL])
def test_policies_agree_without_promotions(policy):
    """Policies only differ when promotions happen."""
    clients = [Client(0, *NEVER), Client(1, 0.0, 100.0), Client(2, *NEVER)]

    result = run_with_policy(policy, clients)

    assert result.service_order == [1, 0, 2]


# === Incremental admission ===


def test_admission_while_running():
    """A client admitted mid-run joins its class and is served."""
    clock = ManualClock(start=0.0)
    scheduler = EspressoScheduler(SimulatorConfig(service_duration=1.0), clock)

    def admit_late(event):
        if event.client_id == 0:
            scheduler.admit([Client(99, 0.0, 100.0)])

    scheduler.on_serve = admit_late
    scheduler.admit([Client(0, *NEVER), Client(1, *NEVER)])

    result = scheduler.run()

    # Client 99 is busy at admission and overtakes client 1
    assert result.service_order == [0, 99, 1]
    assert result.events[1].admitted_at == 1.0
    assert result.events[1].waiting_time == 0.0


def test_admission_after_drain_reopens_queue():
    clock = ManualClock()
    scheduler = EspressoScheduler(SimulatorConfig(service_duration=1.0), clock)
    scheduler.admit([Client(0, *NEVER)])
    scheduler.run()
    assert scheduler.state is SchedulerState.DRAINED

    scheduler.admit([Client(1, *NEVER)])
    assert scheduler.state is SchedulerState.RUNNING

    result = scheduler.run()
    assert result.service_order == [0, 1]


# === Stop signal ===


def test_stop_signal_leaves_remaining_clients_queued():
    clock = ManualClock()
    scheduler = EspressoScheduler(SimulatorConfig(service_duration=1.0), clock)
    scheduler.on_serve = lambda event: scheduler.stop()
    scheduler.admit([Client(i, *NEVER) for i in range(5)])

    result = scheduler.run()

    assert result.n_served == 1
    assert not result.drained
    assert scheduler.state is SchedulerState.RUNNING
    assert len(scheduler.queue) == 4


def test_run_resumes_after_stop():
    clock = ManualClock()
    scheduler = EspressoScheduler(SimulatorConfig(service_duration=1.0), clock)
    scheduler.on_serve = lambda event: scheduler.stop()
    scheduler.admit([Client(i, *NEVER) for i in range(3)])
    assert scheduler.run().n_served == 1

    scheduler.on_serve = None
    result = scheduler.run()

    assert result.service_order == [0, 1, 2]
    assert result.drained


# === Cross-thread admission and stop ===


def test_admission_from_another_thread():
    """A feeder thread admits while run() drains on the real clock."""
    scheduler = EspressoScheduler(SimulatorConfig(service_duration=0.001), SystemClock())
    scheduler.admit([Client(i, *NEVER_OPENS) for i in range(50)])
    busy_ids = set(range(100, 150, 2))

    def feed():
        for client_id in range(100, 150):
            window = ALWAYS if client_id in busy_ids else NEVER_OPENS
            scheduler.admit([Client(client_id, *window)])
            time.sleep(0.0005)

    feeder = threading.Thread(target=feed)
    feeder.start()
    scheduler.run()
    feeder.join(timeout=5)
    assert not feeder.is_alive()
    # Serve whatever arrived after the queue first drained
    result = scheduler.run()

    assert sorted(result.service_order) == list(range(50)) + list(range(100, 150))
    assert result.drained
    for event in result.events:
        assert event.served_from_priority == (event.client_id in busy_ids)
    normal_order = [e.client_id for e in result.events if not e.served_from_priority]
    priority_order = [e.client_id for e in result.events if e.served_from_priority]
    assert normal_order == sorted(normal_order)
    assert priority_order == sorted(priority_order)


def test_stop_from_another_thread():
    scheduler = EspressoScheduler(SimulatorConfig(service_duration=0.005), SystemClock())
    scheduler.admit([Client(i, *NEVER_OPENS) for i in range(1000)])
    first_served = threading.Event()
    scheduler.on_serve = lambda event: first_served.set()
    outcome = []

    runner = threading.Thread(target=lambda: outcome.append(scheduler.run()))
    runner.start()
    assert first_served.wait(timeout=5)
    scheduler.stop()
    runner.join(timeout=5)

    assert not runner.is_alive()
    (result,) = outcome
    assert not result.drained
    assert 1 <= result.n_served < 1000
    assert result.service_order == list(range(result.n_served))
    assert result.n_served + len(scheduler.queue) == 1000


# === Configuration ===


def test_config_defaults():
    config = create_simulator_default()

    assert config.service_duration == 0.1
    assert config.min_clients == 10
    assert config.max_clients == 500
    assert config.promotion_policy == PROMOTE_FIRST


def test_config_custom_factory():
    config = create_simulator_custom(service_duration=0.5, promotion_policy=PROMOTE_ALL)

    assert config.service_duration == 0.5
    assert config.promotion_policy == PROMOTE_ALL


def test_config_validation():
    with pytest.raises(ValueError, match="service_duration must be positive"):
        SimulatorConfig(service_duration=0.0)

    with pytest.raises(ValueError, match="service_duration must be positive"):
        SimulatorConfig(service_duration=float("nan"))

    with pytest.raises(ValueError, match="max_clients"):
        SimulatorConfig(min_clients=20, max_clients=10)

    with pytest.raises(ValueError, match="min_clients must be non-negative"):
        SimulatorConfig(min_clients=-1)

    with pytest.raises(ValueError, match="promotion_policy must be one of"):
        SimulatorConfig(promotion_policy="random")
