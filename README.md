# cfmm_router

Building blocks for routing trades across constant function market makers
(CFMMs): a two-token constant product pool that solves its own arbitrage
subproblem in closed form, and an L-BFGS minimiser for dual functions over
strictly positive prices.

Tokens are plain strings, and amounts and prices are floats. Baskets of tokens
are dictionaries that map a token to an amount.

## Modules

- `cfmm_router.types` – the records `ArbitrageResult` (`profit`, `delta`,
  `lambda_`) and `RouterResult` (`objective_value`, `net_trades`, `deltas`,
  `lambdas`, `nu`); the errors `CfmrError`, with its subclasses
  `OptimizationError`, `InvalidInputError`, `CalculationError` and
  `UnimplementedCfmmError`; and the helpers `get_or_zero` (a value from a
  mapping, or 0.0 when absent) and `sum_all_net_flows` (received minus
  tendered amounts per token over many pools, leaving out tokens whose net
  flow is below 1e-9 in size).
- `cfmm_router.cfmm` – the abstract `CFMM` base class (properties `tokens`,
  `reserves`, `fee` and the method `solve_arbitrage_subproblem`) and
  `ProductTwoCoinCFMM`, which also has a `gamma` property equal to
  `1 - fee`.
- `cfmm_router.solvers` – the abstract `OptimizationProblem` (with
  `evaluate`, `vec_to_nu_map` and `nu_map_to_vec`), `LogTransformedProblem`
  (`cost`, `gradient`, `cost_and_gradient` in log-prices) and
  `minimize_scalar_function`.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Solving an arbitrage subproblem

```python
from cfmm_router.cfmm import ProductTwoCoinCFMM

pool = ProductTwoCoinCFMM({"ETH": 1000.0, "USDC": 2_000_000.0}, 0.003)

result = pool.solve_arbitrage_subproblem({"ETH": 2050.0, "USDC": 1.0})
print(result.profit)   # about 238.47
print(result.delta)    # {'USDC': 21871.73...}  tendered to the pool
print(result.lambda_)  # {'ETH': 10.785...}     received from the pool
```

The pool keeps its tokens in sorted order. Both trade directions are tried and
the more profitable one is returned. When the given prices match the pool's
own price, when a price or a reserve is missing or not positive, or when no
trade is profitable, the result has zero profit and empty baskets.

If the reserves do not hold exactly two tokens, or the fee is outside
`[0, 1]`, the constructor raises `InvalidInputError`.

## Minimising a dual function

Subclass `OptimizationProblem` and implement `evaluate`. It returns the value
and the gradient at a price vector, with both vectors ordered by
`token_order`:

```python
from cfmm_router.solvers import OptimizationProblem, minimize_scalar_function

class Quadratic(OptimizationProblem):
    def evaluate(self, nu_vec, token_order):
        x, y = nu_vec
        value = (x - 3.0) ** 2 + (y - 4.0) ** 2
        return value, [2.0 * (x - 3.0), 2.0 * (y - 4.0)]

nu = minimize_scalar_function(Quadratic(), {"X": 1.0, "Y": 1.0}, ["X", "Y"], 200, 1e-6)
print(nu)  # close to {'X': 3.0, 'Y': 4.0}
```

The search runs over `alpha = log(nu)` (starting values below 1e-10 are
raised to 1e-10 first), so the prices it finds are always strictly positive;
where the unconstrained minimum lies at a negative price, the result tends
towards zero instead. The iteration limit and the gradient tolerance are
passed to SciPy's L-BFGS-B. An empty `token_order` gives an empty result. A
`CfmrError` raised while evaluating the problem, or a search that ends
without finite parameters, raises `OptimizationError`.

## What the package does not do

There is no router that combines several pools with a utility or objective
function into one routing problem, and no command-line program. The pieces
above can be put together for that, but the package itself only solves
single-pool arbitrage subproblems and minimises a dual function you supply.

## Running the tests

```
pytest
```