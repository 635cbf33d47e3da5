from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from gradops import config
from gradops.node import Node


class Tensor(Node):
    """
    `gradops.Tensor` is an N-dimensional array node. `data` and `grad` are dense row-major numpy arrays of `gradops.config.dtype`.

    The payload is copied on construction, so later updates to the node never write through to the caller's array.
    """

    def _coerce(self, data: Any) -> np.ndarray:
        return np.array(data, dtype=config.dtype)

    def _zeros_like(self, data: np.ndarray) -> np.ndarray:
        return np.zeros_like(data)

    def _ones_like(self, data: np.ndarray) -> np.ndarray:
        return np.ones_like(data)

    def constant(self, value: float) -> Tensor:
        return Tensor(np.full(self.shape, value))

    @property
    def size(self) -> int:
        return self.data.size

    def numpy(self) -> np.ndarray:
        return self.data.copy()

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(data={self.data.tolist()}, grad={self.grad.tolist()}, shape={self.shape})"


def tensor(values: Any, shape: Sequence[int] | None = None) -> Tensor:
    """
    Creates a `gradops.Tensor` leaf from nested lists or a flat list of values.

    Args:
        values (Any): The values of the tensor, row-major if `shape` is given.
        shape (Optional[Sequence[int]]): The shape to lay `values` out in.

    Returns:
        gradops.Tensor: The new leaf.
    """
    data = np.asarray(values, dtype=config.dtype)
    if shape is not None:
        data = data.reshape(tuple(shape))
    return Tensor(data)


def zeros(shape: Sequence[int]) -> Tensor:
    return Tensor(np.zeros(tuple(shape)))


def ones(shape: Sequence[int]) -> Tensor:
    return Tensor(np.ones(tuple(shape)))
