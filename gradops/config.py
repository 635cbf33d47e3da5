import logging
import os

import numpy as np


def parse_dtype(name: str) -> np.dtype:
    """
    Resolves a dtype name such as `"float32"` and rejects anything that is not a floating point type.

    Raises:
        ValueError: if `name` is not a float dtype.
    """
    dtype = np.dtype(name.lower())
    if not np.issubdtype(dtype, np.floating):
        raise ValueError(f"GRADOPS_DTYPE must be a float type, not {dtype}")
    return dtype


# dtype of `gradops.Tensor` payloads
dtype = parse_dtype(os.getenv("GRADOPS_DTYPE", "float32"))

log_level = os.getenv("GRADOPS_LOG_LEVEL", "WARNING").upper()

logger = logging.getLogger("gradops")
logger.setLevel(log_level)
logger.addHandler(logging.NullHandler())
