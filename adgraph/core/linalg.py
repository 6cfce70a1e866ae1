"""
adgraph Core: Fixed-Size Linear Algebra
=======================================

The small set of vector/matrix primitives the graph engine consumes.
Everything is plain NumPy; operators and backward rules never call
NumPy directly for shape-sensitive math, they go through here.
"""

from __future__ import annotations
from typing import Callable

import numpy as np


def emap(fn: Callable, x: np.ndarray) -> np.ndarray:
    """Apply a scalar function to every element, keeping the shape and dtype."""
    x = np.asarray(x)
    if isinstance(fn, np.ufunc):
        return np.asarray(fn(x), dtype=x.dtype)
    return np.asarray(np.vectorize(fn, otypes=[x.dtype])(x))


def total(x: np.ndarray) -> np.ndarray:
    """Sum of all elements as a 0-d array."""
    x = np.asarray(x)
    return np.asarray(x.sum(), dtype=x.dtype)


def transpose(m: np.ndarray) -> np.ndarray:
    return np.asarray(m).T


def power(x: np.ndarray, exponent) -> np.ndarray:
    """Element-wise power."""
    return np.power(x, exponent)


def ewise_mult(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.multiply(a, b)


def matvec(m: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Matrix (R, C) times vector (C,) -> vector (R,)."""
    return np.asarray(m) @ np.asarray(v)


def outer(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Outer product a ⊗ b -> matrix (len(a), len(b))."""
    return np.outer(a, b)


def ones_like(x: np.ndarray) -> np.ndarray:
    return np.ones_like(np.asarray(x))


def zeros_like(x: np.ndarray) -> np.ndarray:
    return np.zeros_like(np.asarray(x))


def tile(x: np.ndarray, n: int) -> np.ndarray:
    """
    Repeat x in n consecutive blocks.

    For a vector of size S the result has size n*S with
    result[i*S + j] == x[j]. A scalar becomes a vector of size n.
    """
    x = np.asarray(x)
    return np.tile(x.reshape(-1), n)


def fold(x: np.ndarray, n: int) -> np.ndarray:
    """
    Inverse of ``tile`` for gradients: sum the n blocks of x together.

    Element j of the result is x[j] + x[j+S] + x[j+2S] + ...
    """
    x = np.asarray(x)
    return x.reshape(n, -1).sum(axis=0)
