"""Exception hierarchy for adgraph."""


class ADError(Exception):
    """Base class for all adgraph errors."""


class GradientNotComputedError(ADError, RuntimeError):
    """A gradient was read or applied before a backward pass produced it."""


class UnsupportedGradientError(ADError, NotImplementedError):
    """The backward rule cannot differentiate along this path."""


class ShapeMismatchError(ADError, ValueError):
    """Operand shapes are not supported by an operator or assignment."""
