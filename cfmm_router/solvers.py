"""Minimisation of the dual function over strictly positive prices."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Mapping, Sequence, Tuple

import numpy as np
from scipy.optimize import minimize

from .types import (
    CalculationError,
    CfmrError,
    DualVariables,
    OptimizationError,
    Token,
)

_LOG_FLOOR = 1e-10
_HISTORY_SIZE = 7


class OptimizationProblem(ABC):
    """A scalar function g(nu) together with its gradient."""

    @abstractmethod
    def evaluate(
        self, nu_vec: Sequence[float], token_order: Sequence[Token]
    ) -> Tuple[float, List[float]]:
        """Return g(nu) and its gradient, both ordered by ``token_order``."""

    def vec_to_nu_map(
        self, nu_vec: Sequence[float], token_order: Sequence[Token]
    ) -> DualVariables:
        """Pair each token of ``token_order`` with its value in ``nu_vec``."""
        return {token: float(value) for token, value in zip(token_order, nu_vec)}

    def nu_map_to_vec(
        self, nu_map: Mapping[Token, float], token_order: Sequence[Token]
    ) -> List[float]:
        """Flatten ``nu_map`` in the order of ``token_order``; missing tokens give 0.0."""
        return [nu_map.get(token, 0.0) for token in token_order]


class LogTransformedProblem:
    """View of a problem in log-prices: nu_k = exp(alpha_k), so nu stays positive."""

    def __init__(
        self, inner_problem: OptimizationProblem, token_order: Sequence[Token]
    ) -> None:
        self.inner_problem = inner_problem
        self.token_order = list(token_order)

    def _evaluate(self, alpha: Sequence[float]) -> Tuple[float, np.ndarray]:
        alpha_arr = np.asarray(alpha, dtype=float)
        nu = np.exp(alpha_arr)
        value, grad_nu = self.inner_problem.evaluate(nu.tolist(), self.token_order)
        grad_nu_arr = np.asarray(grad_nu, dtype=float)
        if grad_nu_arr.shape != alpha_arr.shape:
            raise CalculationError("Gradient dimension mismatch in transformation")
        return float(value), grad_nu_arr * nu

    def cost(self, alpha: Sequence[float]) -> float:
        """Value of g at nu = exp(alpha)."""
        nu = np.exp(np.asarray(alpha, dtype=float))
        value, _ = self.inner_problem.evaluate(nu.tolist(), self.token_order)
        return float(value)

    def gradient(self, alpha: Sequence[float]) -> np.ndarray:
        """Gradient of g with respect to alpha (chain rule through exp)."""
        return self._evaluate(alpha)[1]

    def cost_and_gradient(self, alpha: Sequence[float]) -> Tuple[float, np.ndarray]:
        """Value and gradient in one evaluation of the inner problem."""
        return self._evaluate(alpha)


def minimize_scalar_function(
    problem: OptimizationProblem,
    initial_nu: Mapping[Token, float],
    token_order: Sequence[Token],
    max_iterations: int,
    tolerance: float,
) -> DualVariables:
    """Minimise ``problem`` over positive nu with L-BFGS, starting at ``initial_nu``.

    Returns the best nu found as a token-to-price mapping.
    """
    order = list(token_order)
    if not order:
        return {}

    start_nu = np.asarray(problem.nu_map_to_vec(initial_nu, order), dtype=float)
    start_alpha = np.log(np.maximum(start_nu, _LOG_FLOOR))
    transformed = LogTransformedProblem(problem, order)

    try:
        with np.errstate(over="ignore", invalid="ignore"):
            result = minimize(
                transformed.cost_and_gradient,
                start_alpha,
                jac=True,
                method="L-BFGS-B",
                options={
                    "maxiter": int(max_iterations),
                    "maxcor": _HISTORY_SIZE,
                    "gtol": tolerance,
                },
            )
    except CfmrError as exc:
        raise OptimizationError(f"L-BFGS optimization failed: {exc}") from exc

    best_alpha = np.asarray(result.x, dtype=float)
    if best_alpha.shape != start_alpha.shape or not np.all(np.isfinite(best_alpha)):
        raise OptimizationError("L-BFGS finished but no best parameters found.")
    best_nu = np.exp(best_alpha)
    return problem.vec_to_nu_map(best_nu.tolist(), order)


__all__ = [
    "OptimizationProblem",
    "LogTransformedProblem",
    "minimize_scalar_function",
]