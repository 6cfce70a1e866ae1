"""Reductions and replication: sum and expand."""

from __future__ import annotations
import numbers

from ..autograd.grad_fn import ExpandBackward, SumBackward
from ..core import linalg
from ..errors import ShapeMismatchError
from ..node import Node
from .base import _as_node, _make


def sum(x) -> Node:
    """Scalar sum of every element; the sum of a scalar is itself."""
    x = _as_node(x)
    return _make(linalg.total(x._value), SumBackward(x), x)


def expand(x, n: int) -> Node:
    """
    Repeat a scalar or vector ``n`` times.

    A scalar becomes V[n]; a vector V[S] becomes V[n*S] made of n
    consecutive copies, so element i*S + j equals x[j].
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n < 1:
        raise ValueError(f"expand() needs a positive integer count, got {n!r}")
    x = _as_node(x)
    if x.shape.is_matrix:
        raise ShapeMismatchError(f"expand() takes a scalar or vector, got {x.shape}")
    n = int(n)
    return _make(linalg.tile(x._value, n), ExpandBackward(x, n), x)
