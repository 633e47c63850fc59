"""
Example: Crossing searches near a physical boundary

A signal strength ``s`` is measured as 0.3 +- 1.0 but cannot be negative.
The upper error is an ordinary crossing; the lower crossing would lie at
-0.7, beyond the boundary, so the search stops at ``s = 0`` and reports it.
"""

from profilecross import (
    FunctionCrossSolver,
    FunctionObjective,
    Minos,
    ParameterState,
    QuasiNewtonReminimizer,
)


def main() -> None:
    objective = FunctionObjective(lambda p: (p[0] - 0.3) ** 2, up=1.0)

    state = ParameterState()
    state.add("s", 1.0, 0.5, lower=0.0)
    fit = QuasiNewtonReminimizer(objective).minimize(state)
    print(f"Best fit: s = {fit.state['s'].value:.4f}  chi2 = {fit.fval:.6f}")

    minos = Minos(objective, fit.state, fit.fval)
    error = minos.minos_error("s")
    print(f"Upper error: {error.upper:+.4f} ({error.upper_result.status.value})")
    print(f"Lower error: {error.lower:+.4f} ({error.lower_result.status.value})")
    print(f"Lower search stopped at the boundary: {error.at_lower_limit}")

    # a single crossing at two standard deviations
    solver = FunctionCrossSolver(objective, fit.state, fit.fval)
    result = solver.solve(["s"], [1.0], [1.0], target_delta=4.0, trace=True)
    print(f"Two-sigma upper crossing: s = {result.value:.4f} after {result.niter} trials")
    for point in result.trace:
        print(f"  step {point.step:.4f}  s = {point.values[0]:.4f}  chi2 = {point.fval:.4f}")


if __name__ == "__main__":
    main()
