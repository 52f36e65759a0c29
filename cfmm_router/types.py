"""Core value types, result containers and errors shared across the router."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence

Token = str
Amount = float
Price = float
Fee = float

TokenBasket = Dict[Token, Amount]
Reserves = Dict[Token, Amount]
Delta = Dict[Token, Amount]
Lambda = Dict[Token, Amount]
NetTradeVec = Dict[Token, Amount]
DualVariables = Dict[Token, Price]

_NET_FLOW_EPSILON = 1e-9


class CfmrError(Exception):
    """Base class for all errors raised by the router."""

    prefix = "Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class OptimizationError(CfmrError):
    """The numerical optimizer failed or produced no result."""

    prefix = "Optimization Error"


class InvalidInputError(CfmrError):
    """Arguments given to the router or a CFMM are not acceptable."""

    prefix = "Invalid Input"


class CalculationError(CfmrError):
    """A numerical calculation could not be completed."""

    prefix = "Calculation Error"


class UnimplementedCfmmError(CfmrError):
    """The requested CFMM kind is not supported."""

    prefix = "Unimplemented CFMM"


@dataclass
class ArbitrageResult:
    """Outcome of the arbitrage subproblem on a single CFMM."""

    profit: Amount = 0.0
    delta: Delta = field(default_factory=dict)
    lambda_: Lambda = field(default_factory=dict)


@dataclass
class RouterResult:
    """Overall outcome of routing across all CFMMs."""

    objective_value: float
    net_trades: NetTradeVec
    deltas: List[Delta]
    lambdas: List[Lambda]
    nu: DualVariables


def get_or_zero(mapping: Mapping[Token, float], token: Token) -> float:
    """Return the value stored for ``token``, or 0.0 when it is absent."""
    return mapping.get(token, 0.0)


def sum_all_net_flows(
    all_lambdas: Sequence[Mapping[Token, Amount]],
    all_deltas: Sequence[Mapping[Token, Amount]],
    all_tokens: Iterable[Token],
) -> NetTradeVec:
    """Sum received minus tendered amounts per token over all CFMMs.

    Tokens whose net flow is numerically zero are left out of the result.
    """
    pairs = list(zip(all_lambdas, all_deltas))
    net_flows: NetTradeVec = {}
    for token in all_tokens:
        flow = sum(
            get_or_zero(received, token) - get_or_zero(tendered, token)
            for received, tendered in pairs
        )
        if abs(flow) > _NET_FLOW_EPSILON:
            net_flows[token] = flow
    return net_flows