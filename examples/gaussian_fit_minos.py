"""
Example: MINOS errors of a Gaussian fit

Fits the mean and width of a normal distribution to simulated data by
minimizing the negative log-likelihood (written in PyTorch, so the gradient
comes from autograd), then computes asymmetric errors by profiling the
likelihood. The width error comes out visibly asymmetric.
"""

import numpy as np
import torch

from profilecross import ParameterState, QuasiNewtonReminimizer, minos_errors
from profilecross.torch import TorchObjective


def main() -> None:
    rng = np.random.default_rng(42)
    data = torch.tensor(rng.normal(3.0, 2.0, size=50), dtype=torch.float64)

    def nll(params: torch.Tensor) -> torch.Tensor:
        mu, sigma = params[0], params[1]
        return data.numel() * torch.log(sigma) + ((data - mu) ** 2).sum() / (
            2.0 * sigma**2
        )

    # up = 0.5 for a negative log-likelihood
    objective = TorchObjective(nll, up=0.5)

    state = ParameterState()
    state.add("mu", 0.0, 0.5)
    state.add("sigma", 1.0, 0.5, lower=1e-3)

    fit = QuasiNewtonReminimizer(objective).minimize(state)
    print("=" * 60)
    print("Maximum-likelihood fit")
    print("=" * 60)
    print(f"Valid: {fit.is_valid}  calls: {fit.nfcn}  -lnL: {fit.fval:.4f}")
    for param in fit.state:
        print(f"  {param.name:6s} = {param.value:.4f}")
    print()

    # rough parabolic errors as step guesses: sigma / sqrt(n), sigma / sqrt(2n)
    sigma_hat = fit.state["sigma"].value
    start = fit.state.copy()
    start.set_error("mu", sigma_hat / np.sqrt(data.numel()))
    start.set_error("sigma", sigma_hat / np.sqrt(2 * data.numel()))

    errors = minos_errors(objective, start, fit.fval)
    print("=" * 60)
    print("MINOS errors")
    print("=" * 60)
    for name, error in errors.items():
        print(
            f"  {name:6s} = {error.value:.4f} {error.lower:+.4f} / {error.upper:+.4f}"
            f"  (valid: {error.is_valid}, calls: {error.nfcn})"
        )


if __name__ == "__main__":
    main()
