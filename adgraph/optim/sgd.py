"""Plain gradient descent over graph nodes."""

from __future__ import annotations
from typing import Iterable, List

from ..errors import GradientNotComputedError
from ..node import Node


class SGD:
    """
    Stochastic gradient descent: ``value -= lr * grad`` for every parameter.

    Args:
        params (iterable): Nodes to optimize, e.g. ``model.parameters()``.
            Nodes that do not require gradient are left alone.
        lr (float): Learning rate (required).

    Example:
        >>> model = ag.nn.Linear(2, 1)
        >>> optimizer = SGD(model.parameters(), lr=0.5)
        >>> loss = ag.sum(model(x) - y)
        >>> loss.backward()
        >>> optimizer.step()

    Each step consumes the gradients it applies, so every ``step()`` must
    follow a fresh ``backward()`` that reached all parameters.
    """

    def __init__(self, params: Iterable[Node], lr: float):
        if lr < 0.0:
            raise ValueError(f"Invalid learning rate: {lr}")
        self.params: List[Node] = list(params)
        if not self.params:
            raise ValueError("optimizer got an empty parameter list")
        self.lr = lr

    def step(self):
        """
        Perform a single optimization step.

        Nothing is updated unless every trainable parameter has a gradient.
        """
        trainable = [p for p in self.params if p.requires_grad]
        missing = [i for i, p in enumerate(self.params) if p.requires_grad and not p.has_grad]
        if missing:
            raise GradientNotComputedError(
                f"step() called before backward() reached parameters {missing}"
            )
        for p in trainable:
            p.update(self.lr)

    def __repr__(self) -> str:
        return f"SGD({len(self.params)} params, lr={self.lr})"
