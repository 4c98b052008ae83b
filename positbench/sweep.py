"""
Sweep driver: every configured size crossed with every configured regime,
size-major, one harness call per combination.
"""
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from tools.master_logger import MasterLogger

from .config import Regime, SweepConfig
from .formats import make_format
from .harness import BenchmarkResult, benchmark
from .report import ReportWriter

logger = MasterLogger


@dataclass
class SweepRecord:
    rows: int
    cols: int
    regime: Regime
    narrow: str
    native: str
    result: Optional[BenchmarkResult]  # None when the call aborted on a non-finite value

    @property
    def aborted(self) -> bool:
        return self.result is None


def iter_cases(cfg: SweepConfig) -> Iterator[Tuple[Tuple[int, int], Regime]]:
    for size in cfg.sizes:
        for regime in cfg.regimes:
            yield size, regime


def run_sweep(
    cfg: SweepConfig,
    writer: Optional[ReportWriter] = None,
    bench_fn: Callable[..., Optional[BenchmarkResult]] = benchmark,
) -> List[SweepRecord]:
    narrow = make_format(cfg.narrow)
    native = make_format(cfg.native)
    reference = make_format(cfg.reference)
    logger.info(
        f"Sweep: {len(cfg.sizes)} size(s) x {len(cfg.regimes)} regime(s), "
        f"repetitions={cfg.repetitions}, narrow={narrow.name} native={native.name} reference={reference.name}"
    )
    records: List[SweepRecord] = []
    for (rows, cols), regime in iter_cases(cfg):
        logger.debug(f"[case] {rows}x{cols} {regime.label} a={regime.a!r} b={regime.b!r}")
        result = bench_fn(
            rows, cols, cfg.repetitions, regime.a, regime.b,
            narrow=narrow, native=native, reference=reference,
        )
        records.append(SweepRecord(rows=rows, cols=cols, regime=regime, narrow=narrow.name, native=native.name, result=result))
        if result is None:
            logger.warning(f"[case] {rows}x{cols} {regime.label}: no result (aborted)")
        elif writer is not None:
            writer.write_result(result, regime.label)
    return records


__all__ = ["SweepRecord", "iter_cases", "run_sweep"]
