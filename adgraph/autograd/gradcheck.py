"""
adgraph Autograd - Gradient Check
=================================

Central-difference verification of the backward rules.
"""

from __future__ import annotations
from typing import Callable, List, Sequence

import numpy as np

from ..errors import ShapeMismatchError
from ..logger import get_logger
from .engine import backward

logger = get_logger(__name__)


def _evaluate(func: Callable, inputs: Sequence) -> float:
    return float(func(*inputs)._value)


def numerical_gradient(func: Callable, inputs: Sequence, index: int, eps: float = 1e-6) -> np.ndarray:
    """
    (f(x + eps) - f(x - eps)) / 2eps for every element of ``inputs[index]``.

    Values are perturbed in place and restored afterwards.
    """
    node = inputs[index]
    flat = node._value.reshape(-1)
    result = np.zeros(flat.size, dtype=flat.dtype)
    for j in range(flat.size):
        original = flat[j]
        flat[j] = original + eps
        f_plus = _evaluate(func, inputs)
        flat[j] = original - eps
        f_minus = _evaluate(func, inputs)
        flat[j] = original
        result[j] = (f_plus - f_minus) / (2 * eps)
    return result.reshape(node._value.shape)


def check_gradients(
    func: Callable,
    inputs: List,
    eps: float = 1e-6,
    atol: float = 1e-5,
    rtol: float = 1e-4
) -> bool:
    """
    Compare backward-pass gradients of a scalar function with central
    finite differences.

    Parameters
    ----------
    func : Callable
        Builds a scalar node from the input nodes.
    inputs : List[Node]
        Leaf nodes passed to func; each is marked as requiring gradient.
    eps : float
        Finite difference step size
    atol, rtol : float
        Absolute and relative tolerance

    Returns
    -------
    True if gradients match, raises AssertionError otherwise
    """
    for node in inputs:
        node.requires_grad = True

    output = func(*inputs)
    if not output.shape.is_scalar:
        raise ShapeMismatchError(
            f"check_gradients needs a scalar-valued function, got {output.shape}"
        )
    analytical = backward(output, sources=inputs)

    for i, expected in enumerate(analytical):
        if expected is None:
            continue
        numerical = numerical_gradient(func, inputs, i, eps)
        if not np.allclose(expected, numerical, atol=atol, rtol=rtol):
            logger.error(
                "gradient mismatch for input %d\n  backward:  %s\n  numerical: %s",
                i, expected, numerical,
            )
            raise AssertionError(f"Gradient check failed for input {i}")

    return True
