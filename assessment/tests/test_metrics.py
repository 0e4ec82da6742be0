"""
Tests for waiting-time metrics, statistics and plots.
"""

import pytest

from assessment.benchmarks.policy_benchmark import run_scenario, run_statistical_benchmark
from assessment.metrics import (
    HEADLINE_METRICS,
    compare_policies,
    compute_waiting_metrics,
    format_policy_deltas,
    jain_fairness_index,
    plot_rank_change_comparison,
    plot_waiting_time_by_class,
    summarize_runs,
)
from assessment.workloads import generate_all_normal, generate_priority_surge
from espresso_sim import Client, EspressoScheduler, ManualClock, SimulationResult, SimulatorConfig


def run_batch(clients, service_duration=1.0):
    scheduler = EspressoScheduler(SimulatorConfig(service_duration=service_duration), ManualClock())
    scheduler.admit(clients)
    return scheduler.run()


# === Jain Fairness ===


def test_jain_fairness_perfect():
    assert jain_fairness_index([1.0, 1.0, 1.0]) == pytest.approx(1.0)


def test_jain_fairness_worst_case():
    assert jain_fairness_index([10.0, 0.0, 0.0]) == pytest.approx(1 / 3)


def test_jain_fairness_degenerate():
    assert jain_fairness_index([]) == 1.0
    assert jain_fairness_index([0.0, 0.0]) == 1.0


# === Waiting metrics ===


def test_waiting_metrics_all_normal():
    result = run_batch(generate_all_normal(n_clients=3).to_clients())

    metrics = compute_waiting_metrics(result)

    assert metrics["avg_wait"] == pytest.approx(1.0)
    assert metrics["avg_normal_wait"] == pytest.approx(1.0)
    assert metrics["avg_priority_wait"] == 0.0
    assert metrics["max_normal_wait"] == 2.0
    assert metrics["wait_fairness"] == pytest.approx(0.6)
    assert metrics["served"] == 3.0
    assert metrics["busy_share"] == 0.0


def test_waiting_metrics_mixed_classes():
    result = run_batch(
        [Client(0, 1000.0, 2000.0), Client(1, 0.0, 100.0), Client(2, 0.0, 100.0)]
    )

    metrics = compute_waiting_metrics(result)

    # Busy clients 1 and 2 wait 0 and 1; client 0 waits 2
    assert metrics["avg_priority_wait"] == pytest.approx(0.5)
    assert metrics["max_normal_wait"] == 2.0
    assert metrics["busy_share"] == pytest.approx(2 / 3)


def test_waiting_metrics_empty():
    metrics = compute_waiting_metrics(SimulationResult(events=[]))

    assert metrics["served"] == 0.0
    assert metrics["wait_fairness"] == 1.0


def test_result_percentile_validation():
    result = run_batch([Client(0, 0.0, 1.0)])

    with pytest.raises(ValueError, match="Percentile must be in"):
        result.percentile_waiting_time(120)


# === Multi-run analysis ===


def test_summarize_runs_constant():
    summary = summarize_runs([2.0, 2.0, 2.0])

    assert summary.mean == 2.0
    assert summary.std == 0.0
    assert summary.ci_low == summary.ci_high == 2.0
    assert summary.runs == 3


def test_summarize_runs_interval():
    summary = summarize_runs([1.0, 2.0, 3.0])

    assert summary.mean == pytest.approx(2.0)
    assert summary.std == pytest.approx(1.0)
    assert summary.ci_low < 2.0 < summary.ci_high
    assert str(summary).startswith("2.000±1.000")


def test_summarize_runs_empty():
    with pytest.raises(ValueError, match="no runs"):
        summarize_runs([])


def test_compare_policies_constant_difference():
    """Every seed shows the same gap, so the t-test is skipped."""
    baseline = {"max_normal_wait": [3.0, 5.0], "class_inversions": [2.0, 4.0]}
    candidate = {"max_normal_wait": [1.0, 3.0], "class_inversions": [2.0, 4.0]}

    waits, inversions = compare_policies(
        "fifo", baseline, "first", candidate, metrics=["max_normal_wait", "class_inversions"]
    )

    assert waits.mean_difference == pytest.approx(-2.0)
    assert waits.p_value == 0.0
    assert waits.verdict == "better"
    assert inversions.mean_difference == 0.0
    assert inversions.verdict == "same"


def test_compare_policies_paired_by_seed():
    """Large per-seed spread hides nothing once runs are paired."""
    baseline = {"avg_priority_wait": [1.0, 10.0, 20.0, 30.0]}
    candidate = {"avg_priority_wait": [5.0, 14.1, 24.0, 34.05]}

    (delta,) = compare_policies(
        "static", baseline, "first", candidate, metrics=["avg_priority_wait"]
    )

    assert delta.baseline_mean == pytest.approx(15.25)
    assert delta.mean_difference == pytest.approx(4.0375)
    assert delta.p_value < 0.001
    assert delta.verdict == "worse"


def test_compare_policies_requires_paired_runs():
    with pytest.raises(ValueError, match="paired by seed"):
        compare_policies("a", {"m": [1.0, 2.0]}, "b", {"m": [1.0]}, metrics=["m"])

    with pytest.raises(ValueError, match="paired by seed"):
        compare_policies("a", {"m": []}, "b", {"m": []}, metrics=["m"])


def test_format_policy_deltas():
    deltas = compare_policies(
        "fifo", {"max_normal_wait": [3.0, 3.0]}, "first", {"max_normal_wait": [1.0, 1.0]},
        metrics=["max_normal_wait"],
    )

    table = format_policy_deltas(deltas, title="TEST TABLE")

    assert "TEST TABLE" in table
    assert "max_normal_wait" in table
    assert "-2.00" in table
    assert "<0.001" in table
    assert table.rstrip().endswith("better")


def test_benchmark_metrics_feed_comparison(capsys):
    all_metrics = run_statistical_benchmark(
        lambda seed: generate_priority_surge(n_normal=4, n_surge=6, seed=seed),
        "Small Surge",
        n_runs=3,
    )

    deltas = compare_policies("fifo", all_metrics["fifo"], "first", all_metrics["first"])

    assert [d.metric for d in deltas] == list(HEADLINE_METRICS)
    for delta in deltas:
        assert delta.baseline_mean == pytest.approx(summarize_runs(all_metrics["fifo"][delta.metric]).mean)
        assert delta.candidate_mean == pytest.approx(summarize_runs(all_metrics["first"][delta.metric]).mean)
    assert "POLICY COMPARISON: Small Surge" in capsys.readouterr().out




# === Benchmark plumbing ===


@pytest.mark.parametrize("name", ["first", "all", "static", "fifo"])
def test_run_scenario_serves_everyone(name):
    workload = generate_priority_surge(n_normal=5, n_surge=10)

    metrics, result = run_scenario(workload, name)

    assert sorted(result.service_order) == list(range(15))
    assert metrics["served"] == 15.0


def test_run_scenario_surge_starvation():
    metrics, _ = run_scenario(generate_priority_surge(n_normal=5, n_surge=10), "first")

    assert metrics["max_normal_wait"] == 14.0


# === Plots ===


def test_plots_written(tmp_path):
    workload = generate_priority_surge(n_normal=3, n_surge=5)
    results = {name: run_scenario(workload, name)[1] for name in ("first", "fifo")}
    arrival_order = list(range(workload.n_clients))

    rank_path = plot_rank_change_comparison(
        {name: (res, arrival_order) for name, res in results.items()},
        "surge",
        output_dir=str(tmp_path),
    )
    wait_path = plot_waiting_time_by_class(results, "surge", output_dir=str(tmp_path))

    assert (tmp_path / "surge" / "rank_change_comparison.png").exists()
    assert (tmp_path / "surge" / "waiting_time_by_class.png").exists()
    assert rank_path.endswith("rank_change_comparison.png")
    assert wait_path.endswith("waiting_time_by_class.png")
