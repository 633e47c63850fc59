"""Autograd-backed objectives for costs written in PyTorch."""

from __future__ import annotations

from typing import Callable

import numpy as np
import torch


class TorchObjective:
    """
    Objective wrapping a callable that maps a 1-D tensor to a scalar tensor.

    Values are computed in double precision by default; the gradient is
    obtained with ``torch.autograd`` and returned as a NumPy array so the
    quasi-Newton minimizers can use it directly.

    Args:
        fun: Callable mapping a 1-D tensor of parameter values to a scalar
            tensor.
        up: Cost increase defining one confidence unit. Must be positive.
        dtype: Floating-point dtype used for the parameter tensor.
        device: Device the parameter tensor is created on.
    """

    has_gradient = True

    def __init__(
        self,
        fun: Callable[[torch.Tensor], torch.Tensor],
        up: float = 1.0,
        dtype: torch.dtype = torch.float64,
        device: torch.device | str = "cpu",
    ) -> None:
        if not up > 0:
            raise ValueError(f"up must be positive, got {up}")
        self.fun = fun
        self.up = float(up)
        self.dtype = dtype
        self.device = torch.device(device)
        self.ncalls = 0

    def _as_tensor(self, x: np.ndarray, requires_grad: bool) -> torch.Tensor:
        return torch.tensor(
            np.asarray(x, dtype=float),
            dtype=self.dtype,
            device=self.device,
            requires_grad=requires_grad,
        )

    def evaluate(self, x: np.ndarray) -> float:
        self.ncalls += 1
        with torch.no_grad():
            value = self.fun(self._as_tensor(x, requires_grad=False))
        return float(value.item())

    def gradient(self, x: np.ndarray) -> np.ndarray:
        params = self._as_tensor(x, requires_grad=True)
        value = self.fun(params)
        if value.dim() != 0:
            raise ValueError(
                f"Objective must return a scalar tensor, got shape {tuple(value.shape)}"
            )
        (grad,) = torch.autograd.grad(value, params)
        return grad.detach().cpu().numpy().astype(float)

    __call__ = evaluate


__all__ = ["TorchObjective"]
