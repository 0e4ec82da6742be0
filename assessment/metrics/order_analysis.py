"""
Order-based analysis for scheduler evaluation.

Computes clock-independent metrics by comparing arrival order vs service order.
Complements waiting-time metrics with reordering analysis.
"""

import csv
from pathlib import Path
from typing import Dict, List, Sequence

import numpy as np

from espresso_sim import Client, SimulationResult


def compute_service_order(result: SimulationResult) -> List[int]:
    """
    Client ids in the order they were served.

    Example:
        >>> # If client 5 was served first, client 0 second, client 1 third:
        >>> service_order = [5, 0, 1, ...]
    """
    return result.service_order


def compute_position_jumps(
    result: SimulationResult,
    arrival_order: Sequence[int],
) -> List[int]:
    """
    Positions gained (positive) or lost (negative) per client.

    jump = arrival_rank - service_rank

    Args:
        result: Simulation result
        arrival_order: Client ids in admission order

    Returns:
        One jump per served client, aligned with ``arrival_order``
        (clients that were never served are skipped)

    Example:
        >>> # Arrival [A, B, C], service [C, A, B] -> jumps [-1, -1, +2]
    """
    service_rank = {cid: rank for rank, cid in enumerate(result.service_order)}
    jumps = []
    for arrival_rank, cid in enumerate(arrival_order):
        if cid in service_rank:
            jumps.append(arrival_rank - service_rank[cid])
    return jumps


def count_class_inversions(
    result: SimulationResult,
    clients: Sequence[Client],
) -> int:
    """
    Count services given to non-busy engineers while a busy one was waiting.

    An inversion occurs when a service starts at time t for a client that is
    not super-busy at t, while another client admitted by t, not yet served,
    is super-busy at t.

    Args:
        result: Simulation result
        clients: All admitted clients

    Returns:
        Number of inversions (0 = every busy engineer was preferred)
    """
    by_id: Dict[int, Client] = {c.client_id: c for c in clients}
    waiting_since = {e.client_id: e.admitted_at for e in result.events}

    inversions = 0
    served = set()
    for event in result.events:
        t = event.started_at
        served_client = by_id[event.client_id]
        if not served_client.is_priority(t):
            for cid, admitted_at in waiting_since.items():
                if cid in served or cid == event.client_id or admitted_at > t:
                    continue
                if by_id[cid].is_priority(t):
                    inversions += 1
                    break
        served.add(event.client_id)

    return inversions


def compute_consecutive_priority_runs(result: SimulationResult) -> List[int]:
    """
    Lengths of consecutive runs served from the priority queue.

    Long runs mean the normal queue was starved for that many slots.

    Example:
        >>> # Classes [P, P, N, P, N, N] -> [2, 1]
    """
    runs = []
    current = 0
    for event in result.events:
        if event.served_from_priority:
            current += 1
        elif current:
            runs.append(current)
            current = 0
    if current:
        runs.append(current)
    return runs


def compute_order_metrics(
    result: SimulationResult,
    clients: Sequence[Client],
) -> Dict[str, float]:
    """
    Compute all order-based metrics.

    Args:
        result: Simulation result
        clients: Admitted clients in arrival order

    Returns:
        Dictionary with:
            - mean_abs_jump: Mean absolute position change
            - max_forward_jump: Largest number of positions gained
            - max_backward_jump: Largest number of positions lost
            - class_inversions: Non-busy served while busy waited
            - longest_priority_run: Longest starvation streak for normal
    """
    jumps = compute_position_jumps(result, [c.client_id for c in clients])
    runs = compute_consecutive_priority_runs(result)

    return {
        "mean_abs_jump": float(np.mean(np.abs(jumps))) if jumps else 0.0,
        "max_forward_jump": float(max(jumps)) if jumps else 0.0,
        "max_backward_jump": float(-min(jumps)) if jumps else 0.0,
        "class_inversions": float(count_class_inversions(result, clients)),
        "longest_priority_run": float(max(runs)) if runs else 0.0,
    }


def export_output_order(
    result: SimulationResult,
    scenario_name: str,
    scheduler_name: str,
    output_dir: str = "results",
) -> str:
    """
    Export service order to CSV.

    Columns: rank, client_id, was_priority, served_from_priority,
    admitted_at, started_at, waiting_time

    Returns:
        Path to the written CSV file
    """
    out_dir = Path(output_dir) / scenario_name
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"output_order_{scheduler_name}.csv"

    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(
            [
                "rank",
                "client_id",
                "was_priority",
                "served_from_priority",
                "admitted_at",
                "started_at",
                "waiting_time",
            ]
        )
        for rank, event in enumerate(result.events):
            writer.writerow(
                [
                    rank,
                    event.client_id,
                    int(event.was_priority),
                    int(event.served_from_priority),
                    f"{event.admitted_at:.6f}",
                    f"{event.started_at:.6f}",
                    f"{event.waiting_time:.6f}",
                ]
            )

    return str(path)
