"""
Solver Benchmark

Throughput of the channel flow solver (cylinder, walls and inflow) on a
range of grid sizes, in Million Lattice Updates Per Second, with a
per-phase breakdown.
"""

import time
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from simulations.channel_flow import build_channel_solver


def benchmark_channel(nx, ny, num_steps, warmup_steps=20):
    """
    Benchmark the channel solver.

    Returns
    -------
    mlups : float
        Million Lattice Updates Per Second
    phases : dict
        Mean seconds per step spent in each phase
    """
    solver = build_channel_solver(nx, ny, reporter=lambda line: None)

    # Warmup (includes JIT compilation)
    for _ in range(warmup_steps):
        solver.step()

    phases = {}
    start = time.perf_counter()
    for _ in range(num_steps):
        for name, seconds in solver.step().items():
            phases[name] = phases.get(name, 0.0) + seconds
    elapsed = time.perf_counter() - start

    mlups = num_steps * nx * ny / elapsed / 1e6
    return mlups, {name: total / num_steps for name, total in phases.items()}


def compute_memory_bandwidth(mlups, bytes_per_site=144):
    """Compute effective memory bandwidth (GB/s) from MLUPS."""
    return mlups * bytes_per_site / 1000


def run_full_benchmark(grid_sizes=None, num_steps=200):
    """
    Run the benchmark on every grid size and print a summary table.
    """
    if grid_sizes is None:
        grid_sizes = [
            (100, 50),
            (300, 150),
            (600, 300),
            (1200, 600),
        ]

    print("=" * 72)
    print("LBM Solver Benchmark - Channel Flow")
    print("=" * 72)
    print(f"Steps: {num_steps}")
    print()

    header = (f"{'Grid':<12} {'MLUPS':>8} {'GB/s':>8} "
              f"{'stream':>10} {'collide':>10} {'bcs':>10}")
    print(header)
    print("-" * 72)

    results = {}
    for nx, ny in grid_sizes:
        mlups, phases = benchmark_channel(nx, ny, num_steps)
        results[(nx, ny)] = mlups
        print(f"{nx:4d}x{ny:<4d}    {mlups:>8.1f} {compute_memory_bandwidth(mlups):>8.1f} "
              f"{phases['propagation'] * 1e3:>8.2f}ms {phases['collision'] * 1e3:>8.2f}ms "
              f"{phases['bcs'] * 1e3:>8.2f}ms")

    print("=" * 72)

    best = max(results.items(), key=lambda item: item[1])
    print(f"\nPeak Performance: {best[1]:.1f} MLUPS on {best[0][0]}x{best[0][1]}")

    return results


if __name__ == "__main__":
    run_full_benchmark()
