from __future__ import annotations

from typing import Any

from gradops.node import Node


class Value(Node):
    """
    `gradops.Value` is a scalar node. `data` and `grad` are plain Python floats.
    """

    def _coerce(self, data: Any) -> float:
        return float(data)

    def _zeros_like(self, data: Any) -> float:
        return 0.0

    def _ones_like(self, data: Any) -> float:
        return 1.0

    def constant(self, value: float) -> Value:
        return Value(value)

    def __float__(self) -> float:
        return self.data

    def __repr__(self) -> str:
        return f"{type(self).__name__}(data={round(self.data, 4)}, grad={round(self.grad, 4)})"
