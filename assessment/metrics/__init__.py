"""
Metrics and evaluation tools for the espresso scheduler.
"""

from espresso_sim import SimulationResult

from .compute import (
    HEADLINE_METRICS,
    PolicyDelta,
    RunSummary,
    compare_policies,
    compute_waiting_metrics,
    format_policy_deltas,
    jain_fairness_index,
    summarize_runs,
)
from .order_analysis import (
    compute_consecutive_priority_runs,
    compute_order_metrics,
    compute_position_jumps,
    compute_service_order,
    count_class_inversions,
    export_output_order,
)
from .visualization import plot_rank_change_comparison, plot_waiting_time_by_class

__all__ = [
    # Core data structures
    "SimulationResult",
    # Waiting-time metrics
    "jain_fairness_index",
    "compute_waiting_metrics",
    # Multi-run analysis
    "HEADLINE_METRICS",
    "RunSummary",
    "PolicyDelta",
    "summarize_runs",
    "compare_policies",
    "format_policy_deltas",
    # Order-based metrics
    "compute_service_order",
    "compute_position_jumps",
    "count_class_inversions",
    "compute_consecutive_priority_runs",
    "compute_order_metrics",
    "export_output_order",
    # Visualization
    "plot_rank_change_comparison",
    "plot_waiting_time_by_class",
]
