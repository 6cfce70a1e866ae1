"""
adgraph NN - Positional Encoding
================================

Frequency encoding of low-dimensional coordinates, as used by
coordinate networks (NeRF-style image fitting).

For an input of size S and N frequencies the output has size 2*N*S,
laid out as N pairs of blocks:

    block 2i    : sin(2^i * x)
    block 2i+1  : sin(2^i * x + pi/2) = cos(2^i * x)
"""

from __future__ import annotations
from typing import Tuple

import numpy as np

from ..ops.elementwise import sin
from ..ops.reduction import expand
from .module import Module


def _encoding_constants(n_frequencies: int, input_size: int) -> Tuple[np.ndarray, np.ndarray]:
    out_size = 2 * n_frequencies * input_size
    scales = np.zeros(out_size)
    offsets = np.zeros(out_size)
    for i in range(n_frequencies):
        start = 2 * i * input_size
        scales[start:start + 2 * input_size] = 2.0 ** i
        offsets[start + input_size:start + 2 * input_size] = np.pi / 2
    return scales, offsets


def positional_encoding(x, n_frequencies: int):
    """
    Encode a scalar or vector node with ``n_frequencies`` sine/cosine pairs.

    With zero frequencies the input node is returned unchanged.
    """
    if n_frequencies < 0:
        raise ValueError(f"n_frequencies must be >= 0, got {n_frequencies}")
    if n_frequencies == 0:
        return x
    scales, offsets = _encoding_constants(n_frequencies, x.shape.size)
    return sin(expand(x, 2 * n_frequencies) * scales + offsets)


class PositionalEncoding(Module):
    """Module form of ``positional_encoding``."""

    def __init__(self, n_frequencies: int):
        super().__init__()
        if n_frequencies < 0:
            raise ValueError(f"n_frequencies must be >= 0, got {n_frequencies}")
        self.n_frequencies = n_frequencies

    def output_size(self, input_size: int) -> int:
        if self.n_frequencies == 0:
            return input_size
        return 2 * self.n_frequencies * input_size

    def forward(self, x):
        return positional_encoding(x, self.n_frequencies)

    def __repr__(self) -> str:
        return f"PositionalEncoding({self.n_frequencies})"
