"""
adgraph Autograd Module
=======================

Reverse-mode differentiation over scalar, vector and matrix nodes.

Every operator records a GradFn on its result. The engine walks the
graph from a root, parents before children, and each GradFn turns the
gradient of its output into one gradient per operand. How a product
differentiates depends on the operand shapes; see ``dispatch``.
"""

from .engine import backward, grad
from .grad_fn import (
    GradFn,
    SavedContext,
    AddBackward,
    SubBackward,
    MulBackward,
    DivBackward,
    NegBackward,
    PowBackward,
    ReluBackward,
    SigmoidBackward,
    SinBackward,
    CosBackward,
    SumBackward,
    ExpandBackward,
)
from .dispatch import MulRule, binary_result_shape, mul_rule
from .gradcheck import check_gradients, numerical_gradient

__all__ = [
    # Engine
    'backward',
    'grad',

    # Grad functions
    'GradFn',
    'SavedContext',
    'AddBackward',
    'SubBackward',
    'MulBackward',
    'DivBackward',
    'NegBackward',
    'PowBackward',
    'ReluBackward',
    'SigmoidBackward',
    'SinBackward',
    'CosBackward',
    'SumBackward',
    'ExpandBackward',

    # Shape dispatch
    'MulRule',
    'binary_result_shape',
    'mul_rule',

    # Verification
    'check_gradients',
    'numerical_gradient',
]
