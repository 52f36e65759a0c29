"""Constant product pool arbitrage and positive-price dual minimisation."""

__version__ = "0.1.0"
__all__ = ["cfmm", "solvers", "types"]