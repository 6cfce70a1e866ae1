"""
adgraph NN - Linear Layer
=========================

Fully connected layer built from a matrix-vector product, so the weight
gradient comes out of the outer-product law and the input gradient out
of the transposed product.
"""

from __future__ import annotations
from typing import Optional

import numpy as np

from ..core.shapes import Shape, ShapeKind
from ..errors import ShapeMismatchError
from ..ops.base import _as_node
from .module import Module, Parameter


class Linear(Module):
    """
    y = W * x + b, with W of shape (out_features, in_features).

    Args:
        in_features: Size of the input vector
        out_features: Size of the output vector
        bias: Whether to add a learnable bias vector
        rng: Generator used for the Xavier-normal weight draw
    """

    def __init__(
        self,
        in_features: int,
        out_features: int,
        bias: bool = True,
        rng: Optional[np.random.Generator] = None,
    ):
        super().__init__()
        if in_features < 1 or out_features < 1:
            raise ValueError(
                f"Linear needs positive sizes, got ({in_features}, {out_features})"
            )
        rng = np.random.default_rng() if rng is None else rng

        self.in_features = in_features
        self.out_features = out_features

        # Xavier: var = 2 / (fan_in + fan_out)
        scale = np.sqrt(2.0 / (in_features + out_features))
        self.weight = Parameter(scale * rng.standard_normal((out_features, in_features)))
        self.bias = Parameter(np.zeros(out_features)) if bias else None

    def forward(self, x):
        x = _as_node(x)
        expected = Shape(ShapeKind.VECTOR, (self.in_features,))
        if x.shape != expected:
            raise ShapeMismatchError(f"Linear expects input {expected}, got {x.shape}")
        y = self.weight * x
        return y if self.bias is None else y + self.bias

    def __repr__(self) -> str:
        return f"Linear({self.in_features}, {self.out_features}, bias={self.bias is not None})"
