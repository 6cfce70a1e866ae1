"""
adgraph NN - Activation Functions
=================================

Module wrappers around the element-wise operators.
"""

from __future__ import annotations

from ..ops import elementwise
from .module import Module


class ReLU(Module):
    """ReLU activation."""

    def forward(self, x):
        return elementwise.relu(x)


class Sigmoid(Module):
    """Sigmoid activation."""

    def forward(self, x):
        return elementwise.sigmoid(x)


class Sin(Module):
    def forward(self, x):
        return elementwise.sin(x)
