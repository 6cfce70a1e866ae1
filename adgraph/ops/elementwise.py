"""Element-wise activations and trigonometric functions."""

from __future__ import annotations

import numpy as np

from ..autograd.grad_fn import CosBackward, ReluBackward, SigmoidBackward, SinBackward
from ..core import linalg
from ..node import Node
from .base import _as_node, _make


def _relu(v):
    return v if v > 0 else 0.0


def _sigmoid(v):
    # Split on sign so exp never overflows
    if v >= 0:
        return 1.0 / (1.0 + np.exp(-v))
    e = np.exp(v)
    return e / (1.0 + e)


def relu(x) -> Node:
    """max(x, 0) for every element."""
    x = _as_node(x)
    out = linalg.emap(_relu, x._value)
    return _make(out, ReluBackward(x, out), x)


def sigmoid(x) -> Node:
    """1 / (1 + exp(-x)) for every element."""
    x = _as_node(x)
    out = linalg.emap(_sigmoid, x._value)
    return _make(out, SigmoidBackward(x, out), x)


def sin(x) -> Node:
    x = _as_node(x)
    return _make(linalg.emap(np.sin, x._value), SinBackward(x), x)


def cos(x) -> Node:
    x = _as_node(x)
    return _make(linalg.emap(np.cos, x._value), CosBackward(x), x)
