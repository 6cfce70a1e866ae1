"""
adgraph Autograd - Gradient Functions
=====================================

Backward rules attached to nodes at construction time.

Each operator instance gets its own GradFn holding the operand nodes (in
the operator's fixed order) and whatever forward values the local
derivative needs. ``apply`` maps the output gradient to one gradient per
input, or None for inputs that do not require gradient.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np

from ..core import linalg
from ..core.shapes import Shape
from ..errors import UnsupportedGradientError
from .dispatch import MulRule, mul_grads, reduce_to


@dataclass
class SavedContext:
    """
    Saved values and metadata for backward pass.
    """
    tensors: Dict[str, np.ndarray] = field(default_factory=dict)
    scalars: Dict[str, Any] = field(default_factory=dict)

    def save_for_backward(self, **kwargs):
        for k, v in kwargs.items():
            if isinstance(v, np.ndarray):
                self.tensors[k] = v
            else:
                self.scalars[k] = v


class GradFn(ABC):
    """
    Base class for backward functions.

    Each operation defines how gradients flow backward.
    """

    symbol: str = "?"

    def __init__(self, *inputs):
        self._inputs = tuple(inputs)
        self.ctx = SavedContext()

    @property
    def inputs(self) -> Tuple:
        """Operand nodes, in the operator's fixed order."""
        return self._inputs

    @abstractmethod
    def apply(self, grad_output: np.ndarray) -> Tuple[Optional[np.ndarray], ...]:
        """
        Compute gradients w.r.t. inputs given gradient of output.

        Parameters
        ----------
        grad_output : np.ndarray
            Gradient of the result w.r.t. this operation's output

        Returns
        -------
        Tuple of gradients for each input (None if input doesn't require grad)
        """
        ...

    def render(self, *children: str) -> str:
        """Text form of the expression, given the text of each operand."""
        return f"{self.symbol}({', '.join(children)})"

    def _wants(self, i: int) -> bool:
        return self._inputs[i].requires_grad

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class _BinaryGradFn(GradFn):
    """Infix rendering for two-operand operators."""

    def render(self, lhs: str, rhs: str) -> str:
        return f"({lhs} {self.symbol} {rhs})"

    @property
    def _shapes(self) -> Tuple[Shape, Shape]:
        return self._inputs[0].shape, self._inputs[1].shape


class AddBackward(_BinaryGradFn):
    """Backward for addition: z = x + y"""

    symbol = "+"

    def apply(self, grad_output: np.ndarray):
        x_shape, y_shape = self._shapes
        # ∂L/∂x = ∂L/∂z, ∂L/∂y = ∂L/∂z
        grad_x = reduce_to(grad_output, x_shape) if self._wants(0) else None
        grad_y = reduce_to(grad_output, y_shape) if self._wants(1) else None
        return grad_x, grad_y


class SubBackward(_BinaryGradFn):
    """Backward for subtraction: z = x - y"""

    symbol = "-"

    def apply(self, grad_output: np.ndarray):
        x_shape, y_shape = self._shapes
        grad_x = reduce_to(grad_output, x_shape) if self._wants(0) else None
        grad_y = -reduce_to(grad_output, y_shape) if self._wants(1) else None
        return grad_x, grad_y


class MulBackward(_BinaryGradFn):
    """Backward for multiplication: z = x * y, law chosen by shape pair."""

    symbol = "*"

    def __init__(self, x, y, rule: MulRule):
        super().__init__(x, y)
        self.ctx.save_for_backward(rule=rule)

    @property
    def rule(self) -> MulRule:
        return self.ctx.scalars['rule']

    def apply(self, grad_output: np.ndarray):
        x, y = self._inputs
        grad_x, grad_y = mul_grads(self.rule, grad_output, x._value, y._value)
        return (
            grad_x if self._wants(0) else None,
            grad_y if self._wants(1) else None,
        )


class DivBackward(_BinaryGradFn):
    """Backward for division: z = x / y"""

    symbol = "/"

    def apply(self, grad_output: np.ndarray):
        x, y = self._inputs
        grad_x = grad_y = None
        # ∂L/∂x = ∂L/∂z / y
        # ∂L/∂y = -∂L/∂z * x / y^2
        if self._wants(0):
            grad_x = reduce_to(grad_output / y._value, x.shape)
        if self._wants(1):
            grad_y = reduce_to(-grad_output * x._value / (y._value * y._value), y.shape)
        return grad_x, grad_y


class NegBackward(GradFn):
    """Backward for negation: z = -x"""

    symbol = "-"

    def render(self, x: str) -> str:
        return f"-{x}"

    def apply(self, grad_output: np.ndarray):
        return (-grad_output if self._wants(0) else None,)


class PowBackward(GradFn):
    """
    Backward for power: z = x ** n

    Only the base is differentiable. A node-valued exponent that requires
    gradient would need d/dn x^n = x^n log(x), which is not provided.
    """

    symbol = "**"

    def render(self, base: str, exponent: str) -> str:
        return f"({base} ** {exponent})"

    def apply(self, grad_output: np.ndarray):
        base, exponent = self._inputs
        if exponent.requires_grad:
            raise UnsupportedGradientError(
                "pow() gradient w.r.t. a node-valued exponent is not implemented"
            )
        if not self._wants(0):
            return None, None
        n = exponent._value
        # ∂(x^n)/∂x = n * x^(n-1), and 0 wherever n is 0 (x^-1 blows up at x = 0)
        with np.errstate(divide="ignore", invalid="ignore"):
            local = np.where(n == 0, 0.0, n * linalg.power(base._value, n - 1))
        return linalg.ewise_mult(grad_output, local), None


class ReluBackward(GradFn):
    """Backward for relu: gradient passes where the output was positive."""

    symbol = "relu"

    def __init__(self, x, out: np.ndarray):
        super().__init__(x)
        self.ctx.save_for_backward(out=out)

    def apply(self, grad_output: np.ndarray):
        if not self._wants(0):
            return (None,)
        out = self.ctx.tensors['out']
        return (np.where(out > 0, grad_output, 0.0).astype(out.dtype),)


class SigmoidBackward(GradFn):
    """Backward for sigmoid: ∂σ/∂x = σ(1 - σ)"""

    symbol = "sigmoid"

    def __init__(self, x, out: np.ndarray):
        super().__init__(x)
        self.ctx.save_for_backward(out=out)

    def apply(self, grad_output: np.ndarray):
        if not self._wants(0):
            return (None,)
        out = self.ctx.tensors['out']
        return (grad_output * out * (1 - out),)


class SinBackward(GradFn):
    """Backward for sin: ∂sin(x)/∂x = cos(x)"""

    symbol = "sin"

    def apply(self, grad_output: np.ndarray):
        if not self._wants(0):
            return (None,)
        x = self._inputs[0]._value
        return (grad_output * linalg.emap(np.cos, x),)


class CosBackward(GradFn):
    """Backward for cos: ∂cos(x)/∂x = -sin(x)"""

    symbol = "cos"

    def apply(self, grad_output: np.ndarray):
        if not self._wants(0):
            return (None,)
        x = self._inputs[0]._value
        return (-grad_output * linalg.emap(np.sin, x),)


class SumBackward(GradFn):
    """Backward for sum: every element contributed with coefficient 1."""

    symbol = "sum"

    def apply(self, grad_output: np.ndarray):
        if not self._wants(0):
            return (None,)
        x = self._inputs[0]._value
        # Gradient broadcasts back to input shape
        return (linalg.ones_like(x) * grad_output,)


class ExpandBackward(GradFn):
    """
    Backward for expand: z = x repeated n times in blocks.

    Each source element receives the sum of the gradients of all its
    replicas, i.e. every output position congruent to it modulo the
    source size.
    """

    symbol = "expand"

    def __init__(self, x, n: int):
        super().__init__(x)
        self.ctx.save_for_backward(n=n)

    def render(self, x: str) -> str:
        return f"expand<{self.ctx.scalars['n']}>({x})"

    def apply(self, grad_output: np.ndarray):
        if not self._wants(0):
            return (None,)
        x = self._inputs[0]
        n = self.ctx.scalars['n']
        if x.shape.is_scalar:
            return (linalg.total(grad_output),)
        return (linalg.fold(grad_output, n),)
