"""
adgraph NN - Base Module and Parameters
=======================================

A Module is a callable holding Parameter leaves and child modules.
Registration happens on attribute assignment, so a model is written as
plain attribute code and ``parameters()`` finds every leaf to train.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..errors import GradientNotComputedError
from ..node import Node


class Parameter(Node):
    """
    Learnable leaf node.

    Behaves exactly like a Node; the subclass only marks it for
    collection by the owning Module.
    """

    def __init__(self, data: Any, requires_grad: bool = True, name: Optional[str] = None):
        super().__init__(data, requires_grad=requires_grad, name=name)

    def __repr__(self) -> str:
        return f"Parameter({self.shape})"


class Module(ABC):
    """
    Base class for all model components.

    Subclasses call ``super().__init__()`` first, assign Parameters and
    submodules as attributes, and implement ``forward``.
    """

    def __init__(self):
        self._parameters: Dict[str, Parameter] = {}
        self._modules: Dict[str, 'Module'] = {}

    def __setattr__(self, name: str, value: Any):
        if not name.startswith('_'):
            params = self.__dict__.setdefault('_parameters', {})
            modules = self.__dict__.setdefault('_modules', {})
            # Reassignment replaces whatever was registered under the name
            params.pop(name, None)
            modules.pop(name, None)
            if isinstance(value, Parameter):
                params[name] = value
            elif isinstance(value, Module):
                modules[name] = value
        super().__setattr__(name, value)

    def named_parameters(self, prefix: str = "") -> Iterator[Tuple[str, Parameter]]:
        """Yield ``(dotted_name, parameter)``, own parameters first."""
        for name, param in self._parameters.items():
            yield prefix + name, param
        for name, module in self._modules.items():
            yield from module.named_parameters(prefix=f"{prefix}{name}.")

    def parameters(self) -> List[Parameter]:
        return [p for _, p in self.named_parameters()]

    def num_parameters(self) -> int:
        """Total number of scalar weights."""
        return sum(p.shape.size for p in self.parameters())

    def update(self, learning_rate: float):
        """
        Gradient-descent step on every parameter.

        Raises GradientNotComputedError, with all values untouched, when any
        parameter has no computed gradient.
        """
        named = list(self.named_parameters())
        missing = [name for name, param in named if not param.has_grad]
        if missing:
            raise GradientNotComputedError(
                f"update() called without gradients for {', '.join(missing)}"
            )
        for _, param in named:
            param.update(learning_rate)

    @abstractmethod
    def forward(self, *args, **kwargs):
        ...

    def __call__(self, *args, **kwargs):
        return self.forward(*args, **kwargs)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
