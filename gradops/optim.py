from __future__ import annotations

import pickle
from typing import Any, Iterable

import numpy as np

from gradops.node import Node


class Optim:
    def __init__(
        self,
        lr: float = 1e-3,
        maximise: bool = False,
        weight_decay: float = 0.0,
        grad_clip_norm: float | None = None,
        grad_clip_value: float | None = None,
    ) -> None:
        self.lr = lr
        self.maximise = maximise
        self.weight_decay = weight_decay
        self.grad_clip_norm = grad_clip_norm
        self.grad_clip_value = grad_clip_value

    def _apply_clipping(self, g: Any) -> Any:
        # per-parameter L2 norm, then elementwise clamp
        if self.grad_clip_norm is not None:
            norm = float(np.linalg.norm(np.ravel(g)))
            if norm > self.grad_clip_norm:
                g = g * (self.grad_clip_norm / norm)
        if self.grad_clip_value is not None:
            g = np.clip(g, -self.grad_clip_value, self.grad_clip_value)
        return g

    def step(self) -> None:
        pass

    def save(self, path: str) -> None:
        """
        Saves the optimiser to a `.pkl` file.

        Args:
            path (str): The file path where the optimiser should be saved.
        """
        with open(path, "wb") as f:
            pickle.dump(self, f)

    @staticmethod
    def load(path: str) -> Any:
        """
        Loads an optimiser from a `.pkl` file.

        Args:
            path (str): The file path from which to load the optimiser.

        Returns:
            Optim: The loaded optimiser.
        """
        with open(path, "rb") as f:
            return pickle.load(f)


class SGD(Optim):
    """
    `gradops.optim.SGD` performs stochastic gradient descent, `data -= lr * grad`, with optional momentum and weight decay.

    Attributes
    ----------
    parameters (list[gradops.Node]): The leaves updated by `step()`.
    momentum (float): Momentum factor, 0 disables the velocity buffer.
    dampening (float): Dampening applied to the gradient when updating the velocity buffer.
    nesterov (bool): Whether to use Nesterov momentum.
    """

    def __init__(
        self,
        parameters: Iterable[Node],
        lr: float = 1e-3,
        maximise: bool = False,
        weight_decay: float = 0.0,
        nesterov: bool = False,
        dampening: float = 0.0,
        momentum: float = 0.0,
        grad_clip_norm: float | None = None,
        grad_clip_value: float | None = None,
    ) -> None:
        super().__init__(lr, maximise, weight_decay, grad_clip_norm, grad_clip_value)
        self.parameters = list(parameters)
        assert not nesterov or momentum > 0, "Nesterov momentum requires a momentum"
        self.t = 0
        self.dampening = dampening
        self.nesterov = nesterov
        self.momentum = momentum
        self.b_t: dict[Node, Any] = {param: None for param in self.parameters}

    def step(self) -> None:
        """
        Updates every parameter in place from its accumulated gradient.
        """
        self.t += 1
        for param in self.parameters:
            g_t = param.grad

            if self.weight_decay != 0.0:
                g_t = g_t + self.weight_decay * param.data

            if self.momentum != 0:
                if self.b_t[param] is None:
                    self.b_t[param] = np.copy(g_t)
                else:
                    self.b_t[param] = (
                        self.momentum * self.b_t[param] + (1 - self.dampening) * g_t
                    )

                if self.nesterov:
                    g_t = g_t + self.momentum * self.b_t[param]
                else:
                    g_t = self.b_t[param]

            g_t = self._apply_clipping(g_t)

            if self.maximise:
                param.set_data(param.data + self.lr * g_t)
            else:
                param.set_data(param.data - self.lr * g_t)

    def zero_grad(self) -> None:
        for param in self.parameters:
            param.zero_grad()
