"""
Visualization tools for scheduler comparison.

Creates plots comparing reordering and waiting-time behavior across
promotion policies and baselines.
"""

from pathlib import Path
from typing import Dict, List, Tuple

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from espresso_sim import CLASS_NORMAL, CLASS_PRIORITY, SimulationResult

COLORS = {
    "first": "#2ca02c",  # Green
    "all": "#9467bd",  # Purple
    "static": "#ff7f0e",  # Orange
    "fifo": "#1f77b4",  # Blue
}


def _save(fig, output_dir: str, scenario_name: str, filename: str) -> str:
    scenario_dir = Path(output_dir) / scenario_name
    scenario_dir.mkdir(parents=True, exist_ok=True)
    plot_path = scenario_dir / filename

    fig.tight_layout()
    fig.savefig(plot_path, dpi=150, bbox_inches="tight")
    plt.close(fig)

    return str(plot_path)


def plot_rank_change_comparison(
    results_dict: Dict[str, Tuple[SimulationResult, List[int]]],
    scenario_name: str,
    output_dir: str = "results",
) -> str:
    """
    Scatter plot comparing arrival rank vs service rank for each scheduler.

    - Points on diagonal = FIFO (no reordering)
    - Points below diagonal = jumped forward (promoted or busy on arrival)
    - Points above diagonal = pushed back

    Args:
        results_dict: {"first": (result, arrival_order), "fifo": (...), ...}
        scenario_name: Scenario name for plot title and filename
        output_dir: Base directory for output

    Returns:
        Path to created plot file
    """
    fig, ax = plt.subplots(figsize=(10, 8))

    max_rank = 0
    for name, (result, arrival_order) in results_dict.items():
        service_rank = {cid: rank for rank, cid in enumerate(result.service_order)}
        arrival_ranks = [i for i, cid in enumerate(arrival_order) if cid in service_rank]
        service_ranks = [service_rank[arrival_order[i]] for i in arrival_ranks]
        max_rank = max(max_rank, len(arrival_order))

        ax.scatter(
            arrival_ranks,
            service_ranks,
            alpha=0.5,
            s=20,
            label=name,
            color=COLORS.get(name),
        )

    ax.plot([0, max_rank], [0, max_rank], "k--", alpha=0.3, linewidth=2, label="No reordering")

    ax.set_xlabel("Arrival Rank", fontsize=12)
    ax.set_ylabel("Service Rank", fontsize=12)
    ax.set_title(f"Queue Reordering: {scenario_name}", fontsize=14, fontweight="bold")
    ax.legend(loc="upper left", fontsize=10)
    ax.grid(True, alpha=0.2)

    return _save(fig, output_dir, scenario_name, "rank_change_comparison.png")


def plot_waiting_time_by_class(
    results_dict: Dict[str, SimulationResult],
    scenario_name: str,
    output_dir: str = "results",
) -> str:
    """
    Grouped bars of mean and max waiting time per queue class.

    Args:
        results_dict: {"first": result, "static": result, ...}
        scenario_name: Scenario name for plot title and filename
        output_dir: Base directory for output

    Returns:
        Path to created plot file
    """
    names = list(results_dict.keys())
    x = np.arange(len(names))
    width = 0.2

    series = [
        ("priority mean", lambda r: r.avg_waiting_time(CLASS_PRIORITY)),
        ("normal mean", lambda r: r.avg_waiting_time(CLASS_NORMAL)),
        ("priority max", lambda r: r.max_waiting_time(CLASS_PRIORITY)),
        ("normal max", lambda r: r.max_waiting_time(CLASS_NORMAL)),
    ]

    fig, ax = plt.subplots(figsize=(10, 6))
    for i, (label, metric) in enumerate(series):
        values = [metric(results_dict[name]) for name in names]
        ax.bar(x + (i - 1.5) * width, values, width, label=label)

    ax.set_xticks(x)
    ax.set_xticklabels(names)
    ax.set_ylabel("Waiting time (s)", fontsize=12)
    ax.set_title(f"Waiting Time by Class: {scenario_name}", fontsize=14, fontweight="bold")
    ax.legend(fontsize=10)
    ax.grid(True, axis="y", alpha=0.2)

    return _save(fig, output_dir, scenario_name, "waiting_time_by_class.png")
