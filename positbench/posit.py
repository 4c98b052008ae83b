"""
Posit matrices on top of sfpy (Python bindings for SoftPosit).

Matrices are numpy object arrays of sfpy posit scalars. numpy's object-dtype
matmul multiplies and adds the scalars pairwise, so every product and partial
sum goes through SoftPosit rounding exactly as a scalar loop would.
"""
import math

import numpy as np
import sfpy
import torch

from .formats import REFERENCE_DTYPE

# nbits -> (scalar type, exponent size) for the standard posit layouts
POSIT_LAYOUTS = {
    8: (sfpy.Posit8, 0),
    16: (sfpy.Posit16, 1),
    32: (sfpy.Posit32, 2),
}


class PositFormat:
    def __init__(self, nbits: int = 32):
        if nbits not in POSIT_LAYOUTS:
            raise ValueError(f"Unsupported posit width {nbits}; expected one of {sorted(POSIT_LAYOUTS)}")
        self.nbits = nbits
        self.name = f"posit{nbits}"
        self.scalar_type, self.es = POSIT_LAYOUTS[nbits]

    def __repr__(self) -> str:
        return f"PositFormat(nbits={self.nbits}, es={self.es})"

    def scalar(self, value: float):
        # sfpy reads int arguments as raw bit patterns, so always hand it a float
        return self.scalar_type(float(value))

    def full(self, rows: int, cols: int, value: float) -> np.ndarray:
        m = np.empty((rows, cols), dtype=object)
        m.fill(self.scalar(value))
        return m

    def to_double(self, scalar) -> float:
        # NaR converts to nan
        return float(scalar)

    def to_reference(self, matrix: np.ndarray) -> torch.Tensor:
        # object arrays have no cast path to float64
        out = np.empty(matrix.shape, dtype=np.float64)
        for idx, x in np.ndenumerate(matrix):
            out[idx] = self.to_double(x)
        return torch.from_numpy(out).to(REFERENCE_DTYPE)

    def all_finite(self, matrix: np.ndarray) -> bool:
        return all(math.isfinite(self.to_double(x)) for x in matrix.flat)

    def fraction_bits(self) -> int:
        # Fraction bits left next to 1.0: sign, two regime bits and es exponent bits are spent
        return self.nbits - 3 - self.es

    def epsilon(self) -> float:
        return 2.0 ** -self.fraction_bits()

    def digits10(self) -> int:
        return int(math.floor(self.fraction_bits() * math.log10(2)))
