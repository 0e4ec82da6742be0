"""
Tests for baseline schedulers (Static Priority and FIFO).

Verifies that baselines behave correctly and demonstrate the problems
that lazy promotion solves.
"""

import pytest

from assessment.baselines import FIFOScheduler, StaticPriorityScheduler
from espresso_sim import Client, EspressoScheduler, ManualClock, SimulatorConfig

NEVER = (1000.0, 2000.0)


def run(scheduler_cls, clients, service_duration=1.0):
    scheduler = scheduler_cls(SimulatorConfig(service_duration=service_duration), ManualClock())
    report = scheduler.admit(clients)
    return report, scheduler.run()


# === Static Priority Scheduler Tests ===


def test_static_priority_busy_at_admission_first():
    """Engineers busy at admission are served first."""
    _, result = run(
        StaticPriorityScheduler,
        [Client(0, *NEVER), Client(1, 0.0, 100.0), Client(2, *NEVER)],
    )

    assert result.service_order == [1, 0, 2]


def test_static_priority_ignores_later_windows():
    """A window opening while waiting is ignored - demonstrates the problem."""
    clients = [Client(0, *NEVER), Client(1, *NEVER), Client(2, 0.5, 100.0)]

    _, static = run(StaticPriorityScheduler, clients)
    _, espresso = run(EspressoScheduler, clients)

    assert static.service_order == [0, 1, 2]  # Busy engineer stuck behind client 1
    assert espresso.service_order == [0, 2, 1]  # Promotion moves it ahead


def test_static_priority_rejects_invalid():
    report, result = run(
        StaticPriorityScheduler,
        [Client(0, *NEVER), Client(1, 5.0, 1.0)],
    )

    assert report.rejected_count == 1
    assert result.service_order == [0]


# === FIFO Scheduler Tests ===


def test_fifo_ignores_priority():
    """FIFO serves in admission order regardless of windows."""
    _, result = run(
        FIFOScheduler,
        [Client(0, *NEVER), Client(1, 0.0, 100.0), Client(2, *NEVER)],
    )

    assert result.service_order == [0, 1, 2]
    # Busy engineer is still reported as busy when served
    assert result.events[1].was_priority
    assert not any(e.served_from_priority for e in result.events)


def test_fifo_admission_report():
    report, result = run(
        FIFOScheduler,
        [Client(0, 0.0, 100.0), Client(1, 3.0, 2.0), Client(2, *NEVER)],
    )

    assert report.admitted == 2
    assert report.admitted_priority == 1
    assert report.rejected_count == 1
    assert result.service_order == [0, 2]
    assert len(result.rejected) == 1


def test_fifo_empty():
    _, result = run(FIFOScheduler, [])

    assert result.events == []
    assert result.drained


@pytest.mark.parametrize("scheduler_cls", [FIFOScheduler, StaticPriorityScheduler])
def test_baseline_service_timing(scheduler_cls):
    """Baselines share the fixed-duration service loop."""
    _, result = run(scheduler_cls, [Client(i, *NEVER) for i in range(4)], service_duration=0.5)

    assert [e.started_at for e in result.events] == [0.0, 0.5, 1.0, 1.5]
    assert result.metadata["scheduler"] == scheduler_cls.name
    assert result.metadata["service_duration"] == 0.5
