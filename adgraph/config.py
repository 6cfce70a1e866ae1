"""
adgraph Configuration
=====================

Process-wide settings read from the environment on first use.

Environment variables:
    ADGRAPH_DTYPE      numpy dtype used when wrapping literals (default: float64)
    ADGRAPH_LOG_LEVEL  level of the ``adgraph`` logger (default: WARNING)
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

_FLOAT_DTYPES = {
    "float32": np.float32,
    "float64": np.float64,
}


@dataclass
class Config:
    """Library-wide defaults."""
    dtype: type = np.float64
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> 'Config':
        dtype_name = os.getenv("ADGRAPH_DTYPE", "float64").lower()
        if dtype_name not in _FLOAT_DTYPES:
            raise ValueError(
                f"ADGRAPH_DTYPE must be one of {sorted(_FLOAT_DTYPES)}, got {dtype_name!r}"
            )
        return cls(
            dtype=_FLOAT_DTYPES[dtype_name],
            log_level=os.getenv("ADGRAPH_LOG_LEVEL", "WARNING").upper(),
        )


_config: Optional[Config] = None


def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def set_default_dtype(dtype: Union[str, type]):
    """
    Set the dtype used for values created from now on.

    Args:
        dtype: 'float32', 'float64', np.float32 or np.float64
    """
    if isinstance(dtype, str):
        if dtype not in _FLOAT_DTYPES:
            raise ValueError(f"Unsupported dtype: {dtype}")
        dtype = _FLOAT_DTYPES[dtype]
    elif dtype not in _FLOAT_DTYPES.values():
        raise ValueError(f"Unsupported dtype: {dtype}")
    get_config().dtype = dtype


def reset_config():
    """Drop cached settings so the environment is read again."""
    global _config
    _config = None
