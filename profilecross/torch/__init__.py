"""PyTorch integration for profilecross.

Lets a cost written with torch operations drive the minimizers and the
crossing search, with gradients supplied by autograd.

Example:
    >>> import torch
    >>> from profilecross.torch import TorchObjective
    >>> objective = TorchObjective(lambda p: ((p - 2.0) ** 2).sum(), up=1.0)
    >>> objective.gradient([3.0])
    array([2.])
"""

from profilecross.torch.objective import TorchObjective

__all__ = ["TorchObjective"]
