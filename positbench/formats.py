"""
Numeric formats the harness can benchmark.

A format knows how to build a filled matrix of its own element type, how to
bring a matrix of its elements into the float64 reference representation and
how to tell whether a matrix is entirely finite. Matrices themselves only need
to support `+`, `-` and `@`, so torch tensors and numpy object arrays of posit
scalars both qualify.
"""
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Protocol, runtime_checkable

import torch

REFERENCE_DTYPE = torch.float64


@runtime_checkable
class NumberFormat(Protocol):
    name: str

    def full(self, rows: int, cols: int, value: float) -> Any: ...

    def to_reference(self, matrix: Any) -> torch.Tensor: ...

    def all_finite(self, matrix: Any) -> bool: ...

    def to_double(self, scalar: Any) -> float: ...

    def epsilon(self) -> float: ...

    def digits10(self) -> int: ...


@dataclass(frozen=True)
class TorchFormat:
    """IEEE binary format backed by a CPU torch dtype."""
    name: str
    dtype: torch.dtype

    def full(self, rows: int, cols: int, value: float) -> torch.Tensor:
        # build in float64 and cast: out-of-range values round to inf instead of raising
        return torch.full((rows, cols), float(value), dtype=REFERENCE_DTYPE).to(self.dtype)

    def to_reference(self, matrix: torch.Tensor) -> torch.Tensor:
        return matrix.to(REFERENCE_DTYPE)

    def all_finite(self, matrix: torch.Tensor) -> bool:
        return bool(torch.isfinite(matrix).all().item())

    def to_double(self, scalar) -> float:
        return float(scalar)

    def epsilon(self) -> float:
        return float(torch.finfo(self.dtype).eps)

    def digits10(self) -> int:
        # finfo.resolution is 10**-precision
        return int(round(-math.log10(torch.finfo(self.dtype).resolution)))


def _posit(nbits: int) -> Callable[[], NumberFormat]:
    def factory() -> NumberFormat:
        # sfpy is only needed once a posit format is actually requested
        from .posit import PositFormat
        return PositFormat(nbits)
    return factory


FORMATS: Dict[str, Callable[[], NumberFormat]] = {
    "float16": lambda: TorchFormat("float16", torch.float16),
    "bfloat16": lambda: TorchFormat("bfloat16", torch.bfloat16),
    "float32": lambda: TorchFormat("float32", torch.float32),
    "float64": lambda: TorchFormat("float64", torch.float64),
    "posit8": _posit(8),
    "posit16": _posit(16),
    "posit32": _posit(32),
}


def available_formats() -> List[str]:
    return sorted(FORMATS)


def make_format(name: str) -> NumberFormat:
    try:
        factory = FORMATS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown number format '{name}'; expected one of {available_formats()}") from None
    return factory()


__all__ = [
    "NumberFormat",
    "TorchFormat",
    "REFERENCE_DTYPE",
    "available_formats",
    "make_format",
]
