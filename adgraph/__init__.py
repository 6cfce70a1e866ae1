"""
adgraph: Reverse-Mode Autodiff over Scalars, Vectors and Matrices
=================================================================

Operators on nodes build a computation graph as they run; ``backward()``
on the result walks it in reverse and leaves a gradient on every
ancestor. Shapes are fixed at construction: a scalar, a vector of N
elements or an R x C matrix.

Example:
    >>> import adgraph as ag
    >>> W = ag.matrix([[1.0, 0.0], [0.0, 2.0]])
    >>> x = ag.vector([3.0, 4.0])
    >>> y = ag.sum(ag.relu(W * x + 1))
    >>> y.backward()
    >>> W.grad
    array([[3., 4.],
           [3., 4.]])
"""

__version__ = "0.1.0"

import numbers
from typing import Any, Optional

import numpy as np

from .config import Config, get_config, set_default_dtype
from .errors import (
    ADError,
    GradientNotComputedError,
    UnsupportedGradientError,
    ShapeMismatchError,
)
from .core import Shape, ShapeKind, as_array
from .node import Node, NodeState
from .ops import (
    add, sub, mul, div, neg, pow,
    relu, sigmoid, sin, cos,
    sum, expand,
)
from .autograd import backward, grad, check_gradients
from . import nn
from . import optim


def _is_number(values: Any) -> bool:
    return isinstance(values, numbers.Real) and not isinstance(values, bool)


def scalar(value: Any, requires_grad: bool = True, name: Optional[str] = None) -> Node:
    """
    Create a scalar node.

    Example:
        >>> x = ag.scalar(-3.0, name="x")
    """
    arr = as_array(value)
    if arr.ndim != 0:
        raise ShapeMismatchError(f"scalar() needs a single number, got shape {arr.shape}")
    return Node(arr, requires_grad=requires_grad, name=name)


def vector(
    values: Any,
    size: Optional[int] = None,
    requires_grad: bool = True,
    name: Optional[str] = None,
) -> Node:
    """
    Create a vector node.

    Args:
        values: Sequence of numbers, or a single number to fill with
        size: Number of elements; required when ``values`` is a number
        requires_grad: Whether backward descends into this node
        name: Optional label used when printing expressions

    Example:
        >>> v = ag.vector([1.0, 2.0, 3.0])
        >>> b = ag.vector(0.5, size=3)
    """
    if _is_number(values):
        if size is None:
            raise ShapeMismatchError("vector() from a single number needs a size")
        values = np.full(size, values)
    arr = as_array(values)
    if arr.ndim != 1:
        raise ShapeMismatchError(f"vector() needs a flat sequence, got shape {arr.shape}")
    if size is not None and arr.shape[0] != size:
        raise ShapeMismatchError(f"vector() got {arr.shape[0]} elements, expected {size}")
    return Node(arr, requires_grad=requires_grad, name=name)


def matrix(
    values: Any,
    rows: Optional[int] = None,
    cols: Optional[int] = None,
    requires_grad: bool = True,
    name: Optional[str] = None,
) -> Node:
    """
    Create a matrix node from nested rows, or fill one from a number.

    Example:
        >>> I = ag.matrix(np.eye(3))
        >>> W = ag.matrix(0.0, rows=2, cols=4)
    """
    if _is_number(values):
        if rows is None or cols is None:
            raise ShapeMismatchError("matrix() from a single number needs rows and cols")
        values = np.full((rows, cols), values)
    arr = as_array(values)
    if arr.ndim != 2:
        raise ShapeMismatchError(f"matrix() needs nested rows, got shape {arr.shape}")
    if rows is not None and arr.shape[0] != rows:
        raise ShapeMismatchError(f"matrix() got {arr.shape[0]} rows, expected {rows}")
    if cols is not None and arr.shape[1] != cols:
        raise ShapeMismatchError(f"matrix() got {arr.shape[1]} columns, expected {cols}")
    return Node(arr, requires_grad=requires_grad, name=name)


def constant(value: Any) -> Node:
    """Node that never receives gradient."""
    return Node.constant(value)


__all__ = [
    # Version
    "__version__",

    # Main classes
    "Node",
    "NodeState",
    "Shape",
    "ShapeKind",

    # Factory functions
    "scalar",
    "vector",
    "matrix",
    "constant",

    # Operators
    "add",
    "sub",
    "mul",
    "div",
    "neg",
    "pow",
    "relu",
    "sigmoid",
    "sin",
    "cos",
    "sum",
    "expand",

    # Autograd
    "backward",
    "grad",
    "check_gradients",

    # Errors
    "ADError",
    "GradientNotComputedError",
    "UnsupportedGradientError",
    "ShapeMismatchError",

    # Configuration
    "Config",
    "get_config",
    "set_default_dtype",

    # Submodules
    "nn",
    "optim",
]
