"""
Posit vs IEEE float matrix arithmetic benchmark.

Times add/subtract/multiply on a narrow posit format and on native float32,
and measures each product's mean absolute error against a float64 reference.

Entry point: bench.py (positbench.cli.main)
"""

from .formats import NumberFormat, TorchFormat, make_format
from .harness import BenchmarkResult, Sink, benchmark
from .sweep import SweepRecord, run_sweep

__all__ = [
    "BenchmarkResult",
    "NumberFormat",
    "Sink",
    "SweepRecord",
    "TorchFormat",
    "benchmark",
    "make_format",
    "run_sweep",
]
