"""Shared plumbing for building operator nodes."""

from __future__ import annotations
from typing import Any

import numpy as np

from ..core.shapes import is_literal
from ..node import Node


def _as_node(x: Any) -> Node:
    """Ensure x is a Node; otherwise wrap a numeric literal as a constant."""
    if isinstance(x, Node):
        return x
    if not is_literal(x):
        raise TypeError(f"Unsupported operand type: {type(x).__name__}")
    return Node.constant(x)


def _make(value: np.ndarray, grad_fn, *operands: Node) -> Node:
    """
    Result node for an operator application.

    The result owns its operands through ``grad_fn``; each operand only
    gets a weak back-reference to the result.
    """
    out = Node(
        value,
        requires_grad=True,
        grad_fn=grad_fn,
        op_name=type(grad_fn).__name__.replace("Backward", ""),
    )
    for op in operands:
        op._set_parent(out)
    return out
