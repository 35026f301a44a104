#!/usr/bin/env python3
"""
Performance evaluation script for the Held-Karp TSP solver.

This script benchmarks the runtime and memory usage of the $O(N^{2} 2^{N})$
Held-Karp dynamic program across a range of city counts, for both fill
backends. It checks how closely the measured runtime tracks $N^{2} 2^{N}$
and plots the results.
"""

import time
import tracemalloc
import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path

from held_karp_tsp.held_karp import HeldKarpConfig
from held_karp_tsp.solver import solve


def generate_random_matrix(num_cities: int, seed: int = None, max_weight: int = 100) -> np.ndarray:
    """
    Generate a random asymmetric integer distance matrix.

    Parameters
    ----------
    num_cities : int
        The number of cities ($N$).
    seed : int, optional
        Seed for the random number generator for reproducibility.
    max_weight : int, optional
        Exclusive upper bound on edge weights. The default is 100.

    Returns
    -------
    np.ndarray
        An $N \\times N$ float matrix with a zero diagonal.
    """
    rng = np.random.default_rng(seed)
    matrix = rng.integers(1, max_weight, size=(num_cities, num_cities)).astype(np.float64)
    np.fill_diagonal(matrix, 0.0)
    return matrix


def benchmark_runtime(city_counts: list[int], backend: str, num_trials: int = 3) -> dict:
    """
    Benchmark the mean runtime across different city counts ($N$).

    Returns
    -------
    dict
        'city_counts', 'mean_times', 'std_times' and 'costs' (one cost per N,
        from the last trial).
    """
    config = HeldKarpConfig(backend=backend, max_cities=max(city_counts))

    # Trigger JIT compilation outside the timed region.
    if backend == "numba":
        solve(generate_random_matrix(4, seed=0), config)

    results = {
        'city_counts': city_counts,
        'mean_times': [],
        'std_times': [],
        'costs': []
    }

    for n in city_counts:
        print(f"\nBenchmarking N={n} ({backend})...")
        trial_times = []

        for trial in range(num_trials):
            matrix = generate_random_matrix(n, seed=42 + trial)

            start = time.perf_counter()
            result = solve(matrix, config)
            elapsed = time.perf_counter() - start

            trial_times.append(elapsed)
            print(f"  Trial {trial + 1}/{num_trials}: {elapsed:.3f}s")

        results['mean_times'].append(float(np.mean(trial_times)))
        results['std_times'].append(float(np.std(trial_times)))
        results['costs'].append(result.cost)

        print(f"  Mean: {results['mean_times'][-1]:.3f}s ± {results['std_times'][-1]:.3f}s")
        print(f"  Cost: {results['costs'][-1]:g}")

    return results


def benchmark_memory(city_counts: list[int], backend: str) -> dict:
    """
    Benchmark peak memory usage across different city counts ($N$).

    Uses `tracemalloc`, which also tracks numpy buffer allocations, to
    measure the peak memory allocated during one solve.
    """
    config = HeldKarpConfig(backend=backend, max_cities=max(city_counts))
    results = {
        'city_counts': city_counts,
        'peak_memory_mb': []
    }

    for n in city_counts:
        matrix = generate_random_matrix(n, seed=42)

        tracemalloc.start()
        solve(matrix, config)
        current, peak = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        peak_mb = peak / 1024 ** 2
        results['peak_memory_mb'].append(peak_mb)
        print(f"  N={n}: peak memory {peak_mb:.2f} MB")

    return results


def analyze_complexity(city_counts: list[int], times: list[float]) -> tuple[float, np.ndarray]:
    """
    Fit runtime against the model $T = a \\cdot N^{2} 2^{N}$.

    A linear regression of $\\log T$ on $\\log(N^{2} 2^{N})$ gives a slope
    near 1 when the runtime follows the expected growth.

    Returns
    -------
    tuple of (float, numpy.ndarray)
        The fitted slope and the fitted times.
    """
    counts = np.asarray(city_counts, dtype=np.float64)
    work = counts ** 2 * 2.0 ** counts
    coeffs = np.polyfit(np.log(work), np.log(times), 1)
    slope, intercept = coeffs[0], coeffs[1]

    fitted_times = np.exp(intercept) * work ** slope

    print(f"\n{'=' * 60}")
    print("COMPLEXITY ANALYSIS")
    print(f"{'=' * 60}")
    print(f"Fitted slope against N^2 2^N: {slope:.2f} (1.00 means exact agreement)")
    print(f"{'=' * 60}\n")

    return slope, fitted_times


def plot_results(runtime_results: dict, memory_results: dict, fitted_times: np.ndarray, slope: float):
    """
    Create and save runtime and memory plots.
    """
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    ax1 = axes[0]
    counts = runtime_results['city_counts']
    ax1.errorbar(counts, runtime_results['mean_times'], yerr=runtime_results['std_times'],
                 fmt='o-', capsize=5, label='Measured', linewidth=2, markersize=8)
    ax1.plot(counts, fitted_times, '--', label=f'Fit $(N^2 2^N)^{{{slope:.2f}}}$', linewidth=2, alpha=0.7)
    ax1.set_xlabel('Cities ($N$)', fontsize=12)
    ax1.set_ylabel('Runtime (seconds)', fontsize=12)
    ax1.set_title('Runtime Performance', fontsize=14, fontweight='bold')
    ax1.legend(fontsize=10)
    ax1.grid(True, alpha=0.3)
    ax1.set_yscale('log')

    ax2 = axes[1]
    ax2.plot(counts, memory_results['peak_memory_mb'], 's-', linewidth=2, markersize=8, color='orange')
    ax2.set_xlabel('Cities ($N$)', fontsize=12)
    ax2.set_ylabel('Peak Memory (MB)', fontsize=12)
    ax2.set_title('Memory Usage', fontsize=14, fontweight='bold')
    ax2.grid(True, alpha=0.3)
    ax2.set_yscale('log')

    plt.tight_layout()

    output_dir = Path('performance_results')
    output_dir.mkdir(exist_ok=True)
    plt.savefig(output_dir / 'performance_analysis.png', dpi=300, bbox_inches='tight')
    print(f"\nPlot saved to: {output_dir / 'performance_analysis.png'}")

    plt.show()


def generate_markdown_table(runtime_results: dict, memory_results: dict):
    """
    Print the results as a Markdown table.
    """
    print("\n| Cities ($N$) | Runtime (s) | Peak Memory (MB) | Tour Cost |")
    print("|--------------|-------------|------------------|-----------|")

    for i, n in enumerate(runtime_results['city_counts']):
        time_mean = runtime_results['mean_times'][i]
        time_std = runtime_results['std_times'][i]
        memory = memory_results['peak_memory_mb'][i]
        cost = runtime_results['costs'][i]
        print(f"| {n:12d} | {time_mean:5.3f} ± {time_std:.3f} | {memory:16.2f} | {cost:9g} |")

    print("\n")


def main():
    """
    Runs the runtime and memory benchmarks, fits the complexity model and
    prints the results.
    """
    print("=" * 60)
    print("HELD-KARP TSP - PERFORMANCE EVALUATION")
    print("=" * 60)

    city_counts = [8, 10, 12, 14, 16]
    num_trials = 3
    backend = "numba"

    print(f"\nCity counts to test: {city_counts}")
    print(f"Trials per count: {num_trials}")

    runtime_results = benchmark_runtime(city_counts, backend, num_trials)
    memory_results = benchmark_memory(city_counts, backend)

    slope, fitted_times = analyze_complexity(runtime_results['city_counts'], runtime_results['mean_times'])

    plot_results(runtime_results, memory_results, fitted_times, slope)
    generate_markdown_table(runtime_results, memory_results)


if __name__ == "__main__":
    main()
