"""Optimizers for graph parameters."""

from .sgd import SGD

__all__ = [
    'SGD',
]
