"""
Metrics computation for espresso scheduler evaluation.

Implements:
- Waiting time per class (avg, P95, max)
- Starvation indicator (longest normal-class wait)
- Jain fairness index over waiting times
- Multi-run summaries (t-interval) and seed-paired policy comparisons
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence

import numpy as np
from scipy import stats

from espresso_sim import CLASS_NORMAL, CLASS_PRIORITY, SimulationResult


def jain_fairness_index(values: List[float]) -> float:
    """
    Compute Jain's fairness index.

    JFI = (sum(x_i))^2 / (n * sum(x_i^2))

    Range: [1/n, 1.0]
    - 1.0 = perfect fairness (all values equal)
    - 1/n = maximum unfairness (one gets all)

    Example:
        >>> jain_fairness_index([1.0, 1.0, 1.0])  # Perfect fairness
        1.0
        >>> jain_fairness_index([10.0, 0.0, 0.0])  # Maximum unfairness
        0.333...
    """
    if len(values) == 0:
        return 1.0

    n = len(values)
    sum_x = sum(values)
    sum_x2 = sum(x**2 for x in values)

    if sum_x2 == 0:
        return 1.0

    return (sum_x**2) / (n * sum_x2)


def compute_waiting_metrics(result: SimulationResult) -> Dict[str, float]:
    """
    Compute waiting-time metrics for a single run.

    Metrics:
        - avg_wait / p95_wait: Over all served engineers
        - avg_priority_wait / avg_normal_wait: Per queue class
        - max_normal_wait: Longest wait in the normal class (starvation)
        - wait_fairness: Jain index over all waiting times
        - served: Number of engineers served
        - busy_share: Fraction of engineers still busy when served

    Args:
        result: Simulation result

    Returns:
        Dictionary with waiting-time metrics
    """
    served = result.n_served
    if served == 0:
        return {
            "avg_wait": 0.0,
            "p95_wait": 0.0,
            "avg_priority_wait": 0.0,
            "avg_normal_wait": 0.0,
            "max_normal_wait": 0.0,
            "wait_fairness": 1.0,
            "served": 0.0,
            "busy_share": 0.0,
        }

    return {
        "avg_wait": result.avg_waiting_time(),
        "p95_wait": result.percentile_waiting_time(95),
        "avg_priority_wait": result.avg_waiting_time(CLASS_PRIORITY),
        "avg_normal_wait": result.avg_waiting_time(CLASS_NORMAL),
        "max_normal_wait": result.max_waiting_time(CLASS_NORMAL),
        "wait_fairness": jain_fairness_index(list(result.waiting_times)),
        "served": float(served),
        "busy_share": result.n_priority_at_service / served,
    }


# =============================================================================
# Multi-run analysis
#
# Every scheduler in a benchmark sees the same seeded workloads, so runs are
# paired by seed and policies are compared on per-seed differences.
# =============================================================================

# Metrics where a smaller value means engineers get coffee sooner
HEADLINE_METRICS = ("avg_priority_wait", "max_normal_wait", "class_inversions")

SIGNIFICANCE_LEVEL = 0.05


@dataclass(frozen=True)
class RunSummary:
    """Mean of one metric over seeded runs, with a 95% t-interval."""

    mean: float
    std: float
    ci_low: float
    ci_high: float
    runs: int

    def __str__(self) -> str:
        return f"{self.mean:.3f}±{self.std:.3f} [{self.ci_low:.3f}, {self.ci_high:.3f}]"


def summarize_runs(values: Sequence[float]) -> RunSummary:
    """
    Summarize one metric collected over seeded runs.

    Raises:
        ValueError: If no runs were recorded
    """
    samples = np.asarray(values, dtype=float)
    if samples.size == 0:
        raise ValueError("Cannot summarize a metric with no runs")

    mean = float(samples.mean())
    if samples.size < 2 or np.ptp(samples) == 0:
        return RunSummary(mean, 0.0, mean, mean, int(samples.size))

    std = float(samples.std(ddof=1))
    low, high = stats.t.interval(
        0.95, df=samples.size - 1, loc=mean, scale=stats.sem(samples)
    )
    return RunSummary(mean, std, float(low), float(high), int(samples.size))


@dataclass(frozen=True)
class PolicyDelta:
    """
    Seed-paired difference between a baseline and a candidate on one metric.

    ``mean_difference`` is candidate minus baseline, so a negative value
    means the candidate waits less (or reorders less) than the baseline.
    """

    baseline: str
    candidate: str
    metric: str
    baseline_mean: float
    candidate_mean: float
    mean_difference: float
    p_value: float

    @property
    def verdict(self) -> str:
        """Outcome for the candidate: better, worse or same."""
        if self.p_value >= SIGNIFICANCE_LEVEL:
            return "same"
        return "better" if self.mean_difference < 0 else "worse"


def compare_policies(
    baseline: str,
    baseline_runs: Mapping[str, Sequence[float]],
    candidate: str,
    candidate_runs: Mapping[str, Sequence[float]],
    metrics: Sequence[str] = HEADLINE_METRICS,
) -> List[PolicyDelta]:
    """
    Compare two schedulers from their ``{metric: [value per seed]}`` maps.

    Uses a paired t-test on per-seed differences. When every seed shows the
    same difference the test is undefined; the result is then significant
    exactly when that difference is non-zero.

    Raises:
        ValueError: If a metric has no runs or the run counts differ
    """
    deltas = []
    for metric in metrics:
        before = np.asarray(baseline_runs[metric], dtype=float)
        after = np.asarray(candidate_runs[metric], dtype=float)
        if before.size == 0 or before.size != after.size:
            raise ValueError(
                f"{metric}: runs must be paired by seed "
                f"({before.size} vs {after.size})"
            )

        difference = after - before
        if np.ptp(difference) == 0:
            p_value = 0.0 if difference[0] != 0 else 1.0
        else:
            p_value = float(stats.ttest_rel(after, before).pvalue)

        deltas.append(
            PolicyDelta(
                baseline=baseline,
                candidate=candidate,
                metric=metric,
                baseline_mean=float(before.mean()),
                candidate_mean=float(after.mean()),
                mean_difference=float(difference.mean()),
                p_value=p_value,
            )
        )
    return deltas


def format_policy_deltas(deltas: List[PolicyDelta], title: str = "POLICY COMPARISON") -> str:
    """Render deltas as a fixed-width table, one row per metric and pair."""
    header = (
        f"{'Metric':<20} {'Baseline':<10} {'Candidate':<10} "
        f"{'Base mean':>10} {'Cand mean':>10} {'Diff':>9} {'p':>8}  Verdict"
    )
    lines = ["=" * len(header), title, "=" * len(header), header, "-" * len(header)]

    for delta in deltas:
        p_text = "<0.001" if delta.p_value < 0.001 else f"{delta.p_value:.3f}"
        lines.append(
            f"{delta.metric:<20} {delta.baseline:<10} {delta.candidate:<10} "
            f"{delta.baseline_mean:>10.2f} {delta.candidate_mean:>10.2f} "
            f"{delta.mean_difference:>+9.2f} {p_text:>8}  {delta.verdict}"
        )

    return "\n".join(lines)
