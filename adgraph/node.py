"""
adgraph Node
============

One value in the computation graph: a forward payload, a gradient slot
of the same shape, and the backward rule of the operator that made it.

Ownership runs one way. A node owns its children through its ``grad_fn``;
the ``parent`` back-reference is a weak reference used only for
diagnostics, so dropping the root of an expression frees the whole graph.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional, Tuple
import weakref

import numpy as np

from .core.shapes import Shape, as_array, check_shape
from .core import linalg
from .errors import GradientNotComputedError, ShapeMismatchError


class NodeState(Enum):
    """Where a node is in the current backward pass."""
    UNVISITED = "unvisited"
    SEEDED = "seeded"
    RESOLVED = "resolved"


class Node:
    """
    A differentiable scalar, vector or matrix value.

    Leaves are created directly; every operator returns a new Node whose
    ``grad_fn`` remembers the operands and how to differentiate through
    them.

    Example:
        >>> x = Node([1.0, 2.0, 3.0])
        >>> y = adgraph.sum(x * 2)
        >>> y.backward()
        >>> x.grad
        array([2., 2., 2.])
    """

    # Keep NumPy from broadcasting over a Node; ndarray <op> Node falls
    # through to the Node's reflected operator.
    __array_ufunc__ = None

    def __init__(
        self,
        value: Any,
        requires_grad: bool = True,
        name: Optional[str] = None,
        grad_fn: Optional[Any] = None,
        op_name: str = "Value",
    ):
        self._value = as_array(value)
        self._shape = Shape.of(self._value)
        self._grad = linalg.zeros_like(self._value)
        self._state = NodeState.UNVISITED
        self.requires_grad = requires_grad
        self.name = name
        self.grad_fn = grad_fn
        self.op_name = op_name
        self._parent_ref: Optional[weakref.ref] = None

    @classmethod
    def constant(cls, value: Any) -> 'Node':
        """Wrap a literal operand; constants never receive gradient."""
        return cls(value, requires_grad=False, op_name="Const")

    # ------------------------------------------------------------------
    # Value and gradient
    # ------------------------------------------------------------------

    @property
    def value(self):
        """Forward value. Vectors and matrices are returned live, so
        element assignment updates the node in place."""
        if self._shape.is_scalar:
            return self._value[()]
        return self._value

    @value.setter
    def value(self, new_value):
        arr = as_array(new_value, dtype=self._value.dtype)
        check_shape(arr, self._shape, "new value")
        self._value = arr

    @property
    def grad(self):
        if self._state is not NodeState.RESOLVED:
            raise GradientNotComputedError(
                "grad requested on a node without computed gradient"
            )
        if self._shape.is_scalar:
            return self._grad[()]
        return self._grad

    @property
    def has_grad(self) -> bool:
        return self._state is NodeState.RESOLVED

    @property
    def state(self) -> NodeState:
        return self._state

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def children(self) -> Tuple['Node', ...]:
        if self.grad_fn is None:
            return ()
        return self.grad_fn.inputs

    @property
    def is_leaf(self) -> bool:
        return self.grad_fn is None

    @property
    def parent(self) -> Optional['Node']:
        """The node most recently built from this one, if still alive."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def _set_parent(self, node: 'Node'):
        self._parent_ref = weakref.ref(node)

    # Engine hooks; only the backward engine moves nodes between states.

    def _reset_grad(self):
        self._grad = linalg.zeros_like(self._value)
        self._state = NodeState.UNVISITED

    def _accumulate(self, contribution: np.ndarray):
        contribution = np.asarray(contribution, dtype=self._value.dtype)
        if contribution.shape != self._value.shape:
            raise ShapeMismatchError(
                f"gradient of shape {contribution.shape} for {self._shape} node"
            )
        self._grad = np.asarray(self._grad + contribution)
        if self._state is NodeState.UNVISITED:
            self._state = NodeState.SEEDED

    def _resolve(self):
        self._state = NodeState.RESOLVED

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def backward(self, grad_output: Optional[Any] = None):
        """
        Compute gradients of this node w.r.t. every ancestor.

        Args:
            grad_output: Seed gradient; defaults to ones of this node's shape.
        """
        from .autograd.engine import backward
        backward(self, grad_output=grad_output)

    def update(self, learning_rate: float):
        """
        One gradient-descent step: ``value -= grad * learning_rate``.

        The gradient is consumed; another update needs another backward pass.
        """
        if not self.has_grad:
            raise GradientNotComputedError(
                "update() called on a node without computed gradient"
            )
        self._value -= self._grad * learning_rate
        self._reset_grad()

    def numpy(self) -> np.ndarray:
        """Copy of the value as an ndarray."""
        return self._value.copy()

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __add__(self, other):
        from .ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from .ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from .ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from .ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from .ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from .ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from .ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from .ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from .ops.arithmetic import neg
        return neg(self)

    def __pow__(self, exponent):
        from .ops.arithmetic import pow
        return pow(self, exponent)

    def __rpow__(self, base):
        from .ops.arithmetic import pow
        return pow(base, self)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        if self.grad_fn is None:
            if self.name is not None:
                return self.name
            return _format_array(self._value)
        return self.grad_fn.render(*(str(c) for c in self.children))

    def __repr__(self) -> str:
        parts = [f"Node({_format_array(self._value)}"]
        if self.name is not None:
            parts.append(f", name={self.name!r}")
        if self.grad_fn is not None:
            parts.append(f", op={self.op_name!r}")
        if not self.requires_grad:
            parts.append(", requires_grad=False")
        parts.append(")")
        return "".join(parts)


def _format_array(arr: np.ndarray) -> str:
    if arr.ndim == 0:
        return f"{arr[()]:g}"
    return np.array2string(arr, precision=4, suppress_small=True, separator=", ")
