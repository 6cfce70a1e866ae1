"""
adgraph Neural Network Module
=============================

Small building blocks for training models made of graph nodes.
Every layer is ordinary operator composition, so backward needs no
layer-specific code.
"""

from .module import Module, Parameter
from .linear import Linear
from .activation import ReLU, Sigmoid, Sin
from .container import Sequential
from .encoding import PositionalEncoding, positional_encoding

__all__ = [
    # Base
    'Module',
    'Parameter',

    # Linear
    'Linear',

    # Activation
    'ReLU',
    'Sigmoid',
    'Sin',

    # Container
    'Sequential',

    # Encoding
    'PositionalEncoding',
    'positional_encoding',
]
