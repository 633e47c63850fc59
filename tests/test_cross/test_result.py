import numpy as np
import pytest

from profilecross import CrossingRequest, CrossingResult, CrossStatus


def test_exactly_one_status_flag_is_set():
    for status in CrossStatus:
        result = CrossingResult(
            status=status, values=np.array([1.0]), step=1.0, fval=1.0, nfcn=1, niter=1
        )
        flags = [
            result.converged,
            result.at_limit,
            result.new_minimum_found,
            result.max_calls_exceeded,
            result.invalid_reminimization,
        ]
        assert sum(flags) == 1
        assert result.is_valid == (status is CrossStatus.CONVERGED)


def test_value_is_first_searched_parameter():
    result = CrossingResult(
        status=CrossStatus.CONVERGED,
        values=np.array([3.0, -1.0]),
        step=1.0,
        fval=1.0,
        nfcn=4,
        niter=2,
    )
    assert result.value == 3.0
    assert result.state is None
    assert result.trace is None


def test_request_offsets():
    request = CrossingRequest.build(
        [1, 0], [-1.0, 2.0], [0.5, 0.25], target_delta=1.0, max_calls=100
    )
    assert request.indices == (1, 0)
    np.testing.assert_allclose(request.offsets, [-0.5, 0.5])


def test_request_rejects_duplicate_indices():
    with pytest.raises(ValueError, match="unique"):
        CrossingRequest.build([0, 0], [1.0, 1.0], [1.0, 1.0], target_delta=1.0, max_calls=10)


def test_request_rejects_non_finite_target():
    with pytest.raises(ValueError):
        CrossingRequest.build([0], [1.0], [1.0], target_delta=float("inf"), max_calls=10)
