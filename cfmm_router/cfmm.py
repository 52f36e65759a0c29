"""Constant function market makers and their arbitrage subproblems."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import List, Mapping

from .types import (
    Amount,
    ArbitrageResult,
    DualVariables,
    Fee,
    InvalidInputError,
    Reserves,
    Token,
    get_or_zero,
)


class CFMM(ABC):
    """A constant function market maker that can solve its arbitrage subproblem.

    Token names are global, so the mapping from local to network tokens is
    implicit in the keys of reserves, baskets and prices.
    """

    @property
    @abstractmethod
    def tokens(self) -> List[Token]:
        """Tokens traded by this CFMM."""

    @property
    @abstractmethod
    def reserves(self) -> Reserves:
        """Current reserves of the CFMM."""

    @property
    @abstractmethod
    def fee(self) -> Fee:
        """Trading fee as a fraction between 0 and 1."""

    @abstractmethod
    def solve_arbitrage_subproblem(self, nu: Mapping[Token, float]) -> ArbitrageResult:
        """Maximise nu^T (Lambda - Delta) subject to the trading function constraint."""


class ProductTwoCoinCFMM(CFMM):
    """Two-coin constant product market maker: R_x * R_y = k."""

    def __init__(self, reserves: Mapping[Token, Amount], fee: Fee) -> None:
        if len(reserves) != 2:
            raise InvalidInputError(
                "ProductTwoCoinCFMM must be initialized with exactly two tokens"
            )
        if not 0.0 <= fee <= 1.0:
            raise InvalidInputError("Fee must be between 0.0 and 1.0")
        self._reserves: Reserves = dict(reserves)
        self._fee = fee
        self._tokens: List[Token] = sorted(self._reserves)
        self._gamma = 1.0 - fee

    @property
    def tokens(self) -> List[Token]:
        return list(self._tokens)

    @property
    def reserves(self) -> Reserves:
        return dict(self._reserves)

    @property
    def fee(self) -> Fee:
        return self._fee

    @property
    def gamma(self) -> float:
        """Fraction of the tendered amount that reaches the pool (1 - fee)."""
        return self._gamma

    def _one_direction(
        self,
        nu_in: float,
        nu_out: float,
        r_in: Amount,
        r_out: Amount,
    ) -> tuple[float, float, float] | None:
        """Optimal trade tendering the 'in' token for the 'out' token.

        Returns (profit, tendered, received) or None when unprofitable.
        """
        gamma = self._gamma
        if gamma <= 0.0:
            return None
        k = r_in * r_out
        tendered = (math.sqrt(nu_out * k * gamma / nu_in) - r_in) / gamma
        if tendered <= 0.0:
            return None
        received = r_out - k / (r_in + gamma * tendered)
        if received <= 0.0:
            return None
        return nu_out * received - nu_in * tendered, tendered, received

    def solve_arbitrage_subproblem(self, nu: Mapping[Token, float]) -> ArbitrageResult:
        token_x, token_y = self._tokens
        nu_x = get_or_zero(nu, token_x)
        nu_y = get_or_zero(nu, token_y)
        rx = get_or_zero(self._reserves, token_x)
        ry = get_or_zero(self._reserves, token_y)

        best = ArbitrageResult()
        if rx <= 0.0 or ry <= 0.0 or nu_x <= 0.0 or nu_y <= 0.0:
            return best

        directions = (
            (token_x, token_y, nu_x, nu_y, rx, ry),
            (token_y, token_x, nu_y, nu_x, ry, rx),
        )
        for sold, bought, nu_in, nu_out, r_in, r_out in directions:
            trade = self._one_direction(nu_in, nu_out, r_in, r_out)
            if trade is None:
                continue
            profit, tendered, received = trade
            if profit > best.profit:
                best = ArbitrageResult(profit, {sold: tendered}, {bought: received})

        if best.profit < 0.0:
            return ArbitrageResult()
        return best


__all__ = ["CFMM", "ProductTwoCoinCFMM", "DualVariables"]