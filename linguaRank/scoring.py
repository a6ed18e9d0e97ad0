from __future__ import annotations
from typing import Callable, Dict, List, Sequence, Tuple, Union
from .aggregation import TrapezoidResult, aggregate_alternative
from .config import configure_parameters
from .types import TrFN, Interval, available_methods


PROBABILITY_FORMULAS: Dict[str, Callable[[Interval], float]] = {}

def register_probability_formula(name: str):
    """A decorator to register a probability-of-dominance formula."""
    def decorator(func: Callable[[Interval], float]) -> Callable[[Interval], float]:
        if name in PROBABILITY_FORMULAS:
            print(f"Warning: Overwriting probability formula '{name}'")
        PROBABILITY_FORMULAS[name] = func
        return func
    return decorator

def available_formulas() -> List[str]:
    return list(PROBABILITY_FORMULAS.keys())


# ==============================================================================
# 1. ALPHA-CUT AND DOMINANCE PROBABILITY
# ==============================================================================

def alpha_cut(trapezoid: TrFN, alpha: float) -> Interval:
    """
    Alpha-cut of a trapezoid: l = α·b + (1−α)·a, r = α·c + (1−α)·d.
    """
    return trapezoid.alpha_cut(alpha)


@register_probability_formula("positive_share")
def positive_share_probability(interval: Interval) -> float:
    """
    Share of the interval lying above the zero threshold.

    An interval entirely at or above zero dominates (1.0), one entirely at or
    below zero is dominated (0.0). A straddling interval scores r / (r - l).
    The degenerate interval [0, 0] falls in the first branch and scores 1.0.
    """
    l, r = interval.l, interval.r
    if l >= 0:
        return 1.0
    if r <= 0:
        return 0.0
    return r / (r - l)


@register_probability_formula("unit_reference")
def unit_reference_probability(interval: Interval) -> float:
    """
    Possibility that the interval is at least the unit reference [0, 1]:
    max(1 - max((1 - l) / (r - l + 1), 0), 0).

    .. note::
        This closed form comes from a later revision of the method and gives
        different values on straddling intervals than 'positive_share'.
        For [-0.75, 0.75] it yields 0.3 where 'positive_share' yields 0.5.
    """
    l, r = interval.l, interval.r
    return max(1 - max((1 - l) / (r - l + 1), 0), 0)


def dominance_probability(interval: Interval, formula: str | None = None) -> float:
    """Scores an interval with a registered formula (the configured default if None)."""
    final_formula = formula or configure_parameters.DEFAULT_PROBABILITY_FORMULA
    func = PROBABILITY_FORMULAS.get(final_formula)
    if func is None:
        raise ValueError(f"Unknown probability formula: '{final_formula}'. Available: {available_formulas()}")
    return float(func(interval))


# ==============================================================================
# 2. RESULTS
# ==============================================================================

class AlternativeResult:
    """Final interval and dominance probability of one alternative."""

    def __init__(self, index: int, alternative: str, interval: Interval, probability: float, is_best: bool = False):
        self.index = index
        self.alternative = alternative
        self.interval = interval
        self.probability = probability
        self.is_best = is_best

    def __repr__(self):
        best = ", best" if self.is_best else ""
        return f"AlternativeResult('{self.alternative}', {self.interval}, p={self.probability:.4f}{best})"


class ScoringResult:
    """
    Results of one scoring run: one AlternativeResult per scored alternative,
    the best probability and the settings that produced them.
    """

    def __init__(self, results: List[AlternativeResult], best_probability: float | None,
                 method: str, alpha: float, formula: str, generalized_strategy: str | None):
        self.results = results
        self.best_probability = best_probability
        self.method = method
        self.alpha = alpha
        self.formula = formula
        self.generalized_strategy = generalized_strategy

    def __repr__(self) -> str:
        best = f"{self.best_probability:.4f}" if self.best_probability is not None else "N/A"
        return f"ScoringResult(method='{self.method}', alpha={self.alpha}, results={len(self.results)}, best={best})"

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)

    @property
    def winners(self) -> List[AlternativeResult]:
        return [r for r in self.results if r.is_best]

    def get(self, alternative: str) -> AlternativeResult:
        for result in self.results:
            if result.alternative == alternative:
                return result
        raise KeyError(f"No result for alternative '{alternative}'.")

    def rankings(self) -> List[Tuple[str, float]]:
        """(alternative, probability) pairs, best first; ties keep matrix order."""
        ranked = sorted(self.results, key=lambda r: r.probability, reverse=True)
        return [(r.alternative, r.probability) for r in ranked]


def select_best(results: Sequence[AlternativeResult]) -> Tuple[float | None, List[AlternativeResult]]:
    """
    Marks the winners: every result whose probability equals the maximum
    exactly. Returns (best_probability, winners); (None, []) for no results.
    """
    if not results:
        return None, []
    best = max(r.probability for r in results)
    winners = []
    for result in results:
        result.is_best = result.probability == best
        if result.is_best:
            winners.append(result)
    return best, winners


# ==============================================================================
# 3. SCORING
# ==============================================================================

def score(
    trapezoids: Union[TrapezoidResult, Sequence[Sequence[TrFN]]],
    method: str,
    alpha: float,
    formula: str | None = None,
    generalized_strategy: str | None = None,
    alternatives: Sequence[str] | None = None
) -> ScoringResult:
    """
    Scores every alternative under one aggregation method.

    Each row of trapezoids (one per criterion) is combined into a single
    alpha-cut interval by the chosen method, the interval is scored with a
    dominance-probability formula, and the alternatives with the highest
    probability are marked as winners. Rows without criteria are skipped.

    Args:
        trapezoids: A TrapezoidResult or nested rows of TrFN.
        method: 'generalized', 'pessimistic' or 'optimistic'.
        alpha: Confidence level in [0, 1].
        formula: Probability formula name; the configured default if None.
        generalized_strategy: 'envelope' or 'average' for the generalized
                              method; the configured default if None.
        alternatives: Names for the rows. Taken from the TrapezoidResult if
                      available, else A1, A2, ...

    Returns:
        A ScoringResult.
    """
    if method not in available_methods():
        raise ValueError(f"Unknown aggregation method: '{method}'. Available methods: {list(available_methods())}")
    if not (0 <= alpha <= 1):
        raise ValueError("Alpha must be between 0 and 1.")
    final_formula = formula or configure_parameters.DEFAULT_PROBABILITY_FORMULA
    if final_formula not in PROBABILITY_FORMULAS:
        raise ValueError(f"Unknown probability formula: '{final_formula}'. Available: {available_formulas()}")

    if isinstance(trapezoids, TrapezoidResult):
        rows = trapezoids.rows()
        names = list(alternatives) if alternatives is not None else trapezoids.alternatives
    else:
        rows = [list(row) for row in trapezoids]
        names = list(alternatives) if alternatives is not None else [f"A{i + 1}" for i in range(len(rows))]
    if len(names) != len(rows):
        raise ValueError(f"Got {len(names)} alternative names for {len(rows)} rows.")

    strategy = None
    if method == "generalized":
        strategy = generalized_strategy or configure_parameters.DEFAULT_GENERALIZED_STRATEGY

    results: List[AlternativeResult] = []
    for index, row in enumerate(rows):
        interval = aggregate_alternative(row, method, alpha, generalized_strategy=strategy)
        if interval is None:
            continue
        probability = dominance_probability(interval, final_formula)
        results.append(AlternativeResult(index, names[index], interval, probability))

    best_probability, _ = select_best(results)
    return ScoringResult(results, best_probability, method, alpha, final_formula, strategy)
