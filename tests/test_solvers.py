import math

import numpy as np
import pytest

from cfmm_router.solvers import (
    LogTransformedProblem,
    OptimizationProblem,
    minimize_scalar_function,
)
from cfmm_router.types import InvalidInputError, OptimizationError, CalculationError


class SimpleQuadraticProblem(OptimizationProblem):
    def __init__(self, a, b, token_x="X", token_y="Y"):
        self.a = a
        self.b = b
        self.token_x = token_x
        self.token_y = token_y

    def evaluate(self, nu_vec, token_order):
        nu_map = self.vec_to_nu_map(nu_vec, token_order)
        x = nu_map.get(self.token_x, 0.0)
        y = nu_map.get(self.token_y, 0.0)
        value = (x - self.a) ** 2 + (y - self.b) ** 2
        grad_map = {
            self.token_x: 2.0 * (x - self.a),
            self.token_y: 2.0 * (y - self.b),
        }
        return value, self.nu_map_to_vec(grad_map, token_order)


class FailingProblem(OptimizationProblem):
    def evaluate(self, nu_vec, token_order):
        raise InvalidInputError("bad order")


class WrongGradientProblem(OptimizationProblem):
    def evaluate(self, nu_vec, token_order):
        return 0.0, [1.0]


ORDER = ["X", "Y"]


def test_simple_quadratic_problem_evaluation():
    transformed = LogTransformedProblem(SimpleQuadraticProblem(3.0, 4.0), ORDER)
    value, grad = transformed.cost_and_gradient([math.log(1.0), math.log(2.0)])
    assert value == pytest.approx(8.0, abs=1e-12)
    assert np.allclose(grad, [-4.0, -8.0], atol=1e-9)


def test_vec_to_nu_map_and_back():
    problem = SimpleQuadraticProblem(0.0, 0.0)
    nu_map = OptimizationProblem.vec_to_nu_map(problem, [1.5, 2.5], ORDER)
    assert nu_map == {"X": 1.5, "Y": 2.5}
    assert OptimizationProblem.nu_map_to_vec(problem, nu_map, ORDER) == [1.5, 2.5]


def test_nu_map_to_vec_missing_token_is_zero():
    problem = SimpleQuadraticProblem(0.0, 0.0)
    result = OptimizationProblem.nu_map_to_vec(problem, {"Y": 7.0}, ["X", "Y", "Z"])
    assert result == [0.0, 7.0, 0.0]


def test_transformed_problem_interface():
    transformed = LogTransformedProblem(SimpleQuadraticProblem(3.0, 4.0), ORDER)
    alpha = [math.log(1.0), math.log(2.0)]
    assert transformed.cost(alpha) == pytest.approx(8.0, abs=1e-12)
    grad = transformed.gradient(alpha)
    assert np.allclose(grad, [-4.0, -8.0], atol=1e-9)


def test_transformed_cost_and_gradient_agree():
    transformed = LogTransformedProblem(SimpleQuadraticProblem(3.0, 4.0), ORDER)
    alpha = [0.3, -0.2]
    value, grad = transformed.cost_and_gradient(alpha)
    assert value == pytest.approx(transformed.cost(alpha))
    assert np.allclose(grad, transformed.gradient(alpha))


def test_transformed_gradient_dimension_mismatch():
    transformed = LogTransformedProblem(WrongGradientProblem(), ORDER)
    with pytest.raises(CalculationError):
        transformed.gradient([0.0, 0.0])


def test_minimize_quadratic_positive_target():
    problem = SimpleQuadraticProblem(3.0, 4.0)
    result = minimize_scalar_function(problem, {"X": 1.0, "Y": 1.0}, ORDER, 200, 1e-6)
    assert abs(result["X"] - 3.0) < 1e-3
    assert abs(result["Y"] - 4.0) < 1e-3


def test_minimize_quadratic_constrained_by_transformation():
    problem = SimpleQuadraticProblem(3.0, -2.0)
    result = minimize_scalar_function(problem, {"X": 1.0, "Y": 1.0}, ORDER, 200, 1e-6)
    assert abs(result["X"] - 3.0) < 1e-3
    assert 0.0 < result["Y"] < 1e-2


def test_minimize_with_empty_token_order_returns_empty():
    problem = SimpleQuadraticProblem(3.0, 4.0)
    assert minimize_scalar_function(problem, {}, [], 100, 1e-6) == {}


def test_minimize_starts_from_zero_prices():
    problem = SimpleQuadraticProblem(3.0, 4.0)
    result = minimize_scalar_function(problem, {}, ORDER, 500, 1e-6)
    assert set(result) == {"X", "Y"}
    assert all(value > 0.0 for value in result.values())


def test_minimize_wraps_problem_errors():
    with pytest.raises(OptimizationError) as info:
        minimize_scalar_function(FailingProblem(), {"X": 1.0}, ["X"], 10, 1e-6)
    assert isinstance(info.value.__cause__, InvalidInputError)
    assert str(info.value).startswith("Optimization Error:")