"""
Error/timing harness: one benchmark call for one matrix shape and one pair of
fill values.

Per repetition the narrow and native matrices each run the same workload
(product, sum, difference) under the clock. Only the product feeds the error
metric; the sum and difference are handed to a Sink so they count as used.
The float64 reference product and the error pass run outside the timed region.
"""
from dataclasses import asdict, dataclass
from typing import Any, Optional, Tuple

from tools.helpers import measure_time
from tools.master_logger import MasterLogger

from .formats import NumberFormat
from .metrics import mean_abs_error

logger = MasterLogger


class Sink:
    """Black-box consumer for values that are computed only to be timed."""

    def __init__(self):
        self.consumed = 0
        self._last: Tuple[Any, ...] = ()

    def consume(self, *values: Any) -> None:
        self._last = values
        self.consumed += len(values)


@dataclass
class BenchmarkResult:
    rows: int
    cols: int
    repetitions: int
    narrow: str
    native: str
    narrow_time_us: float
    native_time_us: float
    narrow_mae: float
    native_mae: float

    @property
    def shape(self) -> str:
        return f"{self.rows}x{self.cols}"

    def to_dict(self) -> dict:
        return asdict(self)


def _timed_workload(lhs, rhs, sink: Sink):
    """Run product, sum and difference under the clock. Returns (product, elapsed_us)."""
    with measure_time() as elapsed:
        product = lhs @ rhs
        sink.consume(lhs + rhs, lhs - rhs)
    return product, elapsed() * 1e6


def check_params(rows: int, cols: int, repetitions: int) -> None:
    if repetitions <= 0:
        raise ValueError(f"repetitions must be > 0, got {repetitions}")
    if rows <= 0 or cols <= 0:
        raise ValueError(f"matrix shape must be positive, got {rows}x{cols}")
    if rows != cols:
        # both operands share one shape, so the product is only defined for square matrices
        raise ValueError(f"matrix shape must be square, got {rows}x{cols}")


def benchmark(
    rows: int,
    cols: int,
    repetitions: int,
    a: float,
    b: float,
    *,
    narrow: NumberFormat,
    native: NumberFormat,
    reference: NumberFormat,
    sink: Optional[Sink] = None,
) -> Optional[BenchmarkResult]:
    """
    Time narrow vs native matrix arithmetic and measure their product error
    against the reference format.

    Returns None (after logging the reason) when the native product or a
    narrow input matrix is not finite; no partial result is produced.
    """
    check_params(rows, cols, repetitions)
    sink = sink if sink is not None else Sink()

    na, nb = narrow.full(rows, cols, a), narrow.full(rows, cols, b)
    fa, fb = native.full(rows, cols, a), native.full(rows, cols, b)
    da, db = reference.full(rows, cols, a), reference.full(rows, cols, b)

    narrow_us = 0.0
    native_us = 0.0
    narrow_err = 0.0
    native_err = 0.0
    for _ in range(repetitions):
        narrow_mul, dt = _timed_workload(na, nb, sink)
        narrow_us += dt
        native_mul, dt = _timed_workload(fa, fb, sink)
        native_us += dt

        ref = reference.to_reference(da @ db)
        narrow_as_ref = narrow.to_reference(narrow_mul)

        if not native.all_finite(native_mul):
            logger.error(f"{native.name} result has NaN or Inf at size {rows}x{cols}")
            return None
        if not (narrow.all_finite(na) and narrow.all_finite(nb)):
            logger.error(f"{narrow.name} input matrices are invalid at size {rows}x{cols}")
            return None

        narrow_err += mean_abs_error(narrow_as_ref, ref)
        native_err += mean_abs_error(native.to_reference(native_mul), ref)

    return BenchmarkResult(
        rows=rows,
        cols=cols,
        repetitions=repetitions,
        narrow=narrow.name,
        native=native.name,
        narrow_time_us=narrow_us / repetitions,
        native_time_us=native_us / repetitions,
        narrow_mae=narrow_err / repetitions,
        native_mae=native_err / repetitions,
    )


__all__ = ["BenchmarkResult", "Sink", "benchmark", "check_params"]
