"""
adgraph Autograd - Shape Dispatch
=================================

Picks forward semantics and gradient laws from the operand shape pair.

Supported pairs:

    + - /   S∘S, S∘V, V∘S, S∘M, M∘S, V[N]∘V[N], M[R,C]∘M[R,C]
    *       the above, plus M[R,C] * V[C] -> V[R]

Multiplication has four gradient laws:

    SCALAR     S*S          ordinary product rule
    BROADCAST  S*V, S*M...  elementwise product with the sibling, summed
                            down on the scalar side
    HADAMARD   V*V, M*M     local gradient is the sibling's value
    LINEAR     M*V          dv = Mᵗ·g,  dM = g ⊗ v
"""

from __future__ import annotations
from enum import Enum
from typing import Tuple

import numpy as np

from ..core import linalg
from ..core.shapes import Shape, ShapeKind
from ..errors import ShapeMismatchError


class MulRule(Enum):
    SCALAR = "scalar"
    BROADCAST = "broadcast"
    HADAMARD = "hadamard"
    LINEAR = "linear"


_MUL_RULES = {
    (ShapeKind.SCALAR, ShapeKind.SCALAR): MulRule.SCALAR,
    (ShapeKind.SCALAR, ShapeKind.VECTOR): MulRule.BROADCAST,
    (ShapeKind.SCALAR, ShapeKind.MATRIX): MulRule.BROADCAST,
    (ShapeKind.VECTOR, ShapeKind.SCALAR): MulRule.BROADCAST,
    (ShapeKind.MATRIX, ShapeKind.SCALAR): MulRule.BROADCAST,
    (ShapeKind.VECTOR, ShapeKind.VECTOR): MulRule.HADAMARD,
    (ShapeKind.MATRIX, ShapeKind.MATRIX): MulRule.HADAMARD,
    (ShapeKind.MATRIX, ShapeKind.VECTOR): MulRule.LINEAR,
}


def _elementwise_shape(symbol: str, lhs: Shape, rhs: Shape) -> Shape:
    if lhs.is_scalar:
        return rhs
    if rhs.is_scalar:
        return lhs
    if lhs == rhs:
        return lhs
    raise ShapeMismatchError(f"Unsupported operands for {symbol}: {lhs} {symbol} {rhs}")


def binary_result_shape(symbol: str, lhs: Shape, rhs: Shape) -> Shape:
    """Validate an operand pair and return the result shape."""
    if symbol == "*":
        rule = mul_rule(lhs, rhs)
        if rule is MulRule.LINEAR:
            return Shape(ShapeKind.VECTOR, (lhs.rows,))
    return _elementwise_shape(symbol, lhs, rhs)


def mul_rule(lhs: Shape, rhs: Shape) -> MulRule:
    rule = _MUL_RULES.get((lhs.kind, rhs.kind))
    if rule is None:
        raise ShapeMismatchError(f"Unsupported operands for *: {lhs} * {rhs}")
    if rule is MulRule.HADAMARD and lhs != rhs:
        raise ShapeMismatchError(f"Unsupported operands for *: {lhs} * {rhs}")
    if rule is MulRule.LINEAR and lhs.cols != rhs.dims[0]:
        raise ShapeMismatchError(
            f"Matrix-vector product needs {lhs.cols} vector elements, got {rhs}"
        )
    return rule


def multiply(rule: MulRule, lhs: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    """Forward value of lhs * rhs under an already-selected rule."""
    if rule is MulRule.LINEAR:
        return linalg.matvec(lhs, rhs)
    return linalg.ewise_mult(lhs, rhs)


def reduce_to(grad: np.ndarray, shape: Shape) -> np.ndarray:
    """Sum a broadcast gradient down to a scalar operand; pass through otherwise."""
    if shape.is_scalar:
        return linalg.total(grad)
    return grad


def mul_grads(
    rule: MulRule,
    grad: np.ndarray,
    lhs: np.ndarray,
    rhs: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Local gradients of lhs * rhs.

    Parameters
    ----------
    rule : MulRule
        Law selected when the product was built
    grad : np.ndarray
        Gradient of the product
    lhs, rhs : np.ndarray
        Forward values of the operands

    Returns
    -------
    (grad_lhs, grad_rhs), each shaped like its operand
    """
    if rule is MulRule.LINEAR:
        # lhs is the matrix, rhs the vector
        grad_lhs = linalg.outer(grad, rhs)
        grad_rhs = linalg.matvec(linalg.transpose(lhs), grad)
        return grad_lhs, grad_rhs

    grad_lhs = linalg.ewise_mult(grad, rhs)
    grad_rhs = linalg.ewise_mult(grad, lhs)
    if rule is MulRule.BROADCAST:
        grad_lhs = reduce_to(grad_lhs, Shape.of(lhs))
        grad_rhs = reduce_to(grad_rhs, Shape.of(rhs))
    return grad_lhs, grad_rhs
