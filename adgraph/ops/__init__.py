"""Operators that build new graph nodes."""

from .arithmetic import add, sub, mul, div, neg, pow
from .elementwise import relu, sigmoid, sin, cos
from .reduction import sum, expand

__all__ = [
    # Arithmetic
    'add', 'sub', 'mul', 'div', 'neg', 'pow',

    # Element-wise
    'relu', 'sigmoid', 'sin', 'cos',

    # Reductions
    'sum', 'expand',
]
