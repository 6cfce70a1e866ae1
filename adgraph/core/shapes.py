"""
adgraph Core: Shape Classification
==================================

Every value in the graph is one of three kinds:

    S       a scalar
    V[N]    a fixed vector of N elements
    M[R,C]  a fixed matrix of R rows and C columns

The kind decides which gradient law an operator uses and whether a
broadcast gradient has to be summed back down to a scalar.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple
import numbers

import numpy as np

from ..config import get_config
from ..errors import ShapeMismatchError


class ShapeKind(Enum):
    SCALAR = "scalar"
    VECTOR = "vector"
    MATRIX = "matrix"


_KIND_BY_RANK = {
    0: ShapeKind.SCALAR,
    1: ShapeKind.VECTOR,
    2: ShapeKind.MATRIX,
}


@dataclass(frozen=True)
class Shape:
    """Structural kind of a value together with its fixed dimensions."""
    kind: ShapeKind
    dims: Tuple[int, ...] = ()

    @staticmethod
    def of(array: np.ndarray) -> 'Shape':
        ndim = np.ndim(array)
        if ndim not in _KIND_BY_RANK:
            raise ShapeMismatchError(
                f"Only scalars, vectors and matrices are supported, got rank {ndim}"
            )
        return Shape(_KIND_BY_RANK[ndim], tuple(np.shape(array)))

    @property
    def is_scalar(self) -> bool:
        return self.kind is ShapeKind.SCALAR

    @property
    def is_vector(self) -> bool:
        return self.kind is ShapeKind.VECTOR

    @property
    def is_matrix(self) -> bool:
        return self.kind is ShapeKind.MATRIX

    @property
    def size(self) -> int:
        result = 1
        for d in self.dims:
            result *= d
        return result

    @property
    def rows(self) -> int:
        if not self.is_matrix:
            raise ShapeMismatchError(f"{self} has no rows")
        return self.dims[0]

    @property
    def cols(self) -> int:
        if not self.is_matrix:
            raise ShapeMismatchError(f"{self} has no columns")
        return self.dims[1]

    def __str__(self) -> str:
        if self.is_scalar:
            return "S"
        if self.is_vector:
            return f"V[{self.dims[0]}]"
        return f"M[{self.dims[0]},{self.dims[1]}]"


SCALAR = Shape(ShapeKind.SCALAR)


def is_literal(data: Any) -> bool:
    """True for raw numeric data that can be wrapped into a constant node."""
    if isinstance(data, bool):
        return False
    return isinstance(data, (numbers.Real, np.ndarray, list, tuple))


def as_array(data: Any, dtype: Optional[type] = None) -> np.ndarray:
    """
    Convert a numeric literal into an array of the configured dtype.

    Scalars become 0-d arrays, flat sequences vectors, nested sequences
    matrices. Input is always copied so the caller's data is never aliased.
    """
    if not is_literal(data):
        raise TypeError(
            f"Expected a number, sequence or ndarray, but got {type(data).__name__}"
        )
    if dtype is None:
        dtype = get_config().dtype
    try:
        arr = np.array(data, dtype=dtype)
    except ValueError as e:
        raise ShapeMismatchError(f"Ragged or non-numeric data: {e}") from e
    if arr.ndim > 2:
        raise ShapeMismatchError(
            f"Only scalars, vectors and matrices are supported, got shape {arr.shape}"
        )
    if arr.size == 0:
        raise ShapeMismatchError("Empty vectors and matrices are not supported")
    return arr


def classify(data: Any) -> Shape:
    """Shape of a literal or array."""
    if isinstance(data, np.ndarray):
        return Shape.of(data)
    return Shape.of(as_array(data))


def check_shape(array: np.ndarray, expected: Shape, what: str = "value"):
    actual = Shape.of(array)
    if actual != expected:
        raise ShapeMismatchError(f"{what} has shape {actual}, expected {expected}")
