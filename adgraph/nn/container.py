"""
adgraph NN - Container Modules
==============================
"""

from __future__ import annotations
from typing import Iterator, Union

from .module import Module


class Sequential(Module):
    """
    Chain of modules applied in order; the output of each is the input
    of the next.

    Example:
        >>> mlp = Sequential(Linear(2, 16), ReLU(), Linear(16, 1), Sigmoid())
        >>> y = mlp(ag.vector([0.5, 0.25]))
    """

    def __init__(self, *layers: Module):
        super().__init__()
        for layer in layers:
            self.append(layer)

    def append(self, layer: Module) -> 'Sequential':
        if not isinstance(layer, Module):
            raise TypeError(f"Sequential holds modules, got {type(layer).__name__}")
        # Registered by position; attribute assignment would register twice
        self._modules[str(len(self._modules))] = layer
        return self

    def forward(self, x):
        for layer in self:
            x = layer(x)
        return x

    def __iter__(self) -> Iterator[Module]:
        return iter(self._modules.values())

    def __getitem__(self, idx: Union[int, slice]):
        layers = list(self._modules.values())
        if isinstance(idx, slice):
            return Sequential(*layers[idx])
        return layers[idx]

    def __len__(self) -> int:
        return len(self._modules)

    def __repr__(self) -> str:
        body = "".join(f"\n  ({name}): {module}" for name, module in self._modules.items())
        return f"Sequential({body}\n)"
