"""Core shape and linear-algebra infrastructure for adgraph."""

from .shapes import (
    ShapeKind,
    Shape,
    SCALAR,
    as_array,
    classify,
    check_shape,
    is_literal,
)
from . import linalg

__all__ = [
    'ShapeKind',
    'Shape',
    'SCALAR',
    'as_array',
    'classify',
    'check_shape',
    'is_literal',
    'linalg',
]
