"""
Arithmetic operators: + - * / negation and power.

Literal operands (numbers, lists, arrays) are wrapped as constant nodes,
so ``x * 3`` and ``3 * x`` both work. Every operator validates the shape
pair before computing anything.
"""

from __future__ import annotations

from ..autograd.dispatch import binary_result_shape, mul_rule, multiply
from ..autograd.grad_fn import (
    AddBackward,
    DivBackward,
    MulBackward,
    NegBackward,
    PowBackward,
    SubBackward,
)
from ..core import linalg
from ..errors import ShapeMismatchError
from ..node import Node
from .base import _as_node, _make


def add(x, y) -> Node:
    x, y = _as_node(x), _as_node(y)
    binary_result_shape("+", x.shape, y.shape)
    return _make(x._value + y._value, AddBackward(x, y), x, y)


def sub(x, y) -> Node:
    x, y = _as_node(x), _as_node(y)
    binary_result_shape("-", x.shape, y.shape)
    return _make(x._value - y._value, SubBackward(x, y), x, y)


def mul(x, y) -> Node:
    """
    Product whose meaning depends on shapes: scalar scaling, element-wise
    product of equal shapes, or matrix-vector product for M[R,C] * V[C].
    """
    x, y = _as_node(x), _as_node(y)
    rule = mul_rule(x.shape, y.shape)
    return _make(multiply(rule, x._value, y._value), MulBackward(x, y, rule), x, y)


def div(x, y) -> Node:
    x, y = _as_node(x), _as_node(y)
    binary_result_shape("/", x.shape, y.shape)
    return _make(x._value / y._value, DivBackward(x, y), x, y)


def neg(x) -> Node:
    x = _as_node(x)
    return _make(-x._value, NegBackward(x), x)


def pow(base, exponent) -> Node:
    """
    Raise ``base`` to ``exponent`` element-wise.

    The exponent is a scalar or has the base's shape. Only the base is
    differentiable: backward through an exponent that requires gradient
    raises UnsupportedGradientError.
    """
    base, exponent = _as_node(base), _as_node(exponent)
    if not (exponent.shape.is_scalar or exponent.shape == base.shape):
        raise ShapeMismatchError(
            f"Unsupported operands for **: {base.shape} ** {exponent.shape}"
        )
    value = linalg.power(base._value, exponent._value)
    return _make(value, PowBackward(base, exponent), base, exponent)
