"""
Espresso Scheduler Policy Benchmark with Multi-Run Analysis.

Runs the two promotion policies ("first", "all") and the two baselines
(static priority, FIFO) on seeded workloads using a manual clock, so runs
take no wall-clock time, then aggregates metrics with confidence intervals
and compares each baseline against "first" with seed-paired t-tests.

Usage:
    # Quick test (5 runs)
    python assessment/benchmarks/policy_benchmark.py --n-runs 5

    # Single scenario with plots
    python assessment/benchmarks/policy_benchmark.py --scenario priority_surge --plot

    # All scenarios
    python assessment/benchmarks/policy_benchmark.py --all --n-runs 30
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from tqdm import tqdm

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from assessment.baselines import FIFOScheduler, StaticPriorityScheduler
from assessment.metrics import (
    HEADLINE_METRICS,
    compare_policies,
    compute_order_metrics,
    compute_waiting_metrics,
    export_output_order,
    format_policy_deltas,
    plot_rank_change_comparison,
    plot_waiting_time_by_class,
    summarize_runs,
)
from assessment.workloads import (
    Workload,
    generate_all_normal,
    generate_late_promotion,
    generate_priority_surge,
    generate_random_population,
)
from espresso_sim import (
    PROMOTE_ALL,
    PROMOTE_FIRST,
    EspressoScheduler,
    ManualClock,
    ServiceLoop,
    SimulationResult,
    SimulatorConfig,
)

SCHEDULER_NAMES = ["first", "all", "static", "fifo"]

SCENARIOS: Dict[str, Tuple[Callable[..., Workload], str]] = {
    "random_population": (generate_random_population, "Random Population"),
    "priority_surge": (generate_priority_surge, "Priority Surge"),
    "all_normal": (generate_all_normal, "All Normal"),
    "late_promotion": (generate_late_promotion, "Late Promotion"),
}


def build_scheduler(name: str, service_duration: float, clock: ManualClock) -> ServiceLoop:
    """Create one of the compared schedulers on a shared manual clock."""
    if name == "first":
        return EspressoScheduler(
            SimulatorConfig(service_duration=service_duration, promotion_policy=PROMOTE_FIRST),
            clock,
        )
    if name == "all":
        return EspressoScheduler(
            SimulatorConfig(service_duration=service_duration, promotion_policy=PROMOTE_ALL),
            clock,
        )
    if name == "static":
        return StaticPriorityScheduler(SimulatorConfig(service_duration=service_duration), clock)
    if name == "fifo":
        return FIFOScheduler(SimulatorConfig(service_duration=service_duration), clock)
    raise ValueError(f"Unknown scheduler: {name}")


def run_scenario(workload: Workload, scheduler_name: str) -> Tuple[Dict[str, float], SimulationResult]:
    """
    Run a single scheduler on a workload and compute metrics.

    Returns:
        Tuple of (metrics dict, SimulationResult)
    """
    clock = ManualClock(start=0.0)
    clients = workload.to_clients(start=clock.now())

    scheduler = build_scheduler(scheduler_name, workload.service_duration, clock)
    scheduler.admit(clients)
    result = scheduler.run()

    metrics = {**compute_waiting_metrics(result), **compute_order_metrics(result, clients)}
    return metrics, result


def run_statistical_benchmark(
    workload_generator: Callable[..., Workload],
    scenario_name: str,
    n_runs: int = 30,
    base_seed: int = 999,
    output_dir: str = "results/policy",
    plot: bool = False,
) -> Dict[str, Dict[str, List[float]]]:
    """
    Run every scheduler on ``n_runs`` seeded workloads.

    Returns:
        {scheduler_name: {metric_name: [value per run]}}
    """
    print("=" * 100)
    print(f"POLICY BENCHMARK: {scenario_name}")
    print("=" * 100)
    print(f"Number of runs: {n_runs}")
    print(f"Seeds: {base_seed} to {base_seed + n_runs - 1}")
    print()

    all_metrics: Dict[str, Dict[str, List[float]]] = {name: {} for name in SCHEDULER_NAMES}
    last_results: Dict[str, Tuple[SimulationResult, List[int]]] = {}

    for run_idx in tqdm(
        range(n_runs),
        desc="Simulations",
        unit="run",
        ncols=80,
        ascii="░█",
        bar_format="{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]",
    ):
        seed = base_seed + run_idx
        workload = workload_generator(seed=seed)
        arrival_order = list(range(workload.n_clients))

        for name in SCHEDULER_NAMES:
            metrics, result = run_scenario(workload, name)
            for key, value in metrics.items():
                all_metrics[name].setdefault(key, []).append(value)
            last_results[name] = (result, arrival_order)

    print_summary(all_metrics)

    deltas = [
        delta
        for other in ("all", "static", "fifo")
        for delta in compare_policies(other, all_metrics[other], "first", all_metrics["first"])
    ]
    print()
    print(format_policy_deltas(deltas, title=f"POLICY COMPARISON: {scenario_name}"))

    if plot:
        slug = scenario_name.lower().replace(" ", "_")
        rank_plot = plot_rank_change_comparison(last_results, slug, output_dir)
        wait_plot = plot_waiting_time_by_class(
            {name: res for name, (res, _) in last_results.items()}, slug, output_dir
        )
        for name, (res, _) in last_results.items():
            export_output_order(res, slug, name, output_dir)
        print(f"\nPlots written: {rank_plot}, {wait_plot}")

    return all_metrics


def print_summary(all_metrics: Dict[str, Dict[str, List[float]]]) -> None:
    """Print mean±std [95% CI] for the headline metrics of every scheduler."""
    headline = ["avg_wait", "avg_normal_wait", *HEADLINE_METRICS]

    print(f"\n{'Metric':<22}" + "".join(f"{name:>28}" for name in SCHEDULER_NAMES))
    print("-" * (22 + 28 * len(SCHEDULER_NAMES)))
    for metric in headline:
        row = f"{metric:<22}"
        for name in SCHEDULER_NAMES:
            row += f"{str(summarize_runs(all_metrics[name][metric])):>28}"
        print(row)


def main():
    """Main entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Espresso Scheduler Policy Benchmark with Multi-Run Analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scenario",
        type=str,
        choices=sorted(SCENARIOS.keys()),
        default="random_population",
        help="Scenario to run (default: random_population)",
    )
    parser.add_argument("--all", action="store_true", help="Run all scenarios")
    parser.add_argument(
        "--n-runs",
        type=int,
        default=30,
        help="Number of runs with different seeds (default: 30)",
    )
    parser.add_argument(
        "--base-seed",
        type=int,
        default=999,
        help="Base seed for runs (seeds will be base_seed, ..., base_seed+n_runs-1)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="results/policy",
        help="Output directory for results (default: results/policy)",
    )
    parser.add_argument("--plot", action="store_true", help="Write plots and CSV service orders")

    args = parser.parse_args()
    os.makedirs(args.output_dir, exist_ok=True)

    selected = sorted(SCENARIOS.keys()) if args.all else [args.scenario]
    summary = {}
    for key in selected:
        generator, title = SCENARIOS[key]
        all_metrics = run_statistical_benchmark(
            generator,
            title,
            n_runs=args.n_runs,
            base_seed=args.base_seed,
            output_dir=args.output_dir,
            plot=args.plot,
        )
        summary[key] = {
            name: {metric: summarize_runs(values).mean for metric, values in metrics.items()}
            for name, metrics in all_metrics.items()
        }

    json_path = Path(args.output_dir) / "policy_summary.json"
    with open(json_path, "w") as f:
        json.dump(summary, f, indent=2)
    print(f"\nSummary written to {json_path}")


if __name__ == "__main__":
    main()
